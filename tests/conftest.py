"""Pytest fixtures for testing"""

import pytest
from typing import Callable, Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker, Session
from wip_gateway.api.main import create_app
from wip_gateway.domain.models import ActivityType, Bucket, TimeEntry
from wip_gateway.infrastructure.database.models import Base
from wip_gateway.infrastructure.database.session import build_engine, get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def app(db: Session):
    """FastAPI app wired to the test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
def client(app) -> TestClient:
    """Create FastAPI test client acting as user_1"""
    return TestClient(app, headers={"X-User-ID": "user_1"})


@pytest.fixture
def make_entry() -> Callable[..., TimeEntry]:
    """Factory for domain time entries on a single matter"""

    def _make(minutes: Optional[int], bucket: Optional[Bucket] = None) -> TimeEntry:
        return TimeEntry(
            user_id="user_1",
            matter_id="MAT-ALPHA-001",
            activity_type=ActivityType.KEYPAD,
            minutes=minutes,
            bucket=bucket,
        )

    return _make
