"""Database engine and per-request session management"""

from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from wip_gateway.config import settings


def build_engine(database_url: str) -> Engine:
    """Create an engine, pooled for server databases and thread-shareable for SQLite"""
    kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        # max 20 connections, recycled hourly
        kwargs.update(pool_size=10, max_overflow=10, pool_recycle=3600)
    return create_engine(database_url, **kwargs)


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
