"""SQLAlchemy ORM models for time entries, WIP targets, rates and the event log"""

import uuid
from sqlalchemy import Column, Date, DateTime, Float, Index, Integer, JSON, Text, UniqueConstraint, Uuid, text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

# Partial index predicates, shared by the Postgres and SQLite dialects
OPEN_CLOCK_PREDICATE = text("ended_at IS NULL AND activity_type = 'switch'")
MATTER_CAP_PREDICATE = text("bucket IS NULL")
BUCKET_CAP_PREDICATE = text("bucket IS NOT NULL")


class TimeEntryRecord(Base):
    """Logged time against a matter"""

    __tablename__ = "time_entry"
    __table_args__ = (
        # At most one running clock per user
        Index(
            "uq_time_entry_open_clock",
            "user_id",
            unique=True,
            postgresql_where=OPEN_CLOCK_PREDICATE,
            sqlite_where=OPEN_CLOCK_PREDICATE,
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    matter_id = Column(Text, nullable=False, index=True)
    activity_type = Column(Text, nullable=False)
    minutes = Column(Integer, nullable=True)  # NULL while a clock is running
    bucket = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True)
    ended_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class WipTargetRecord(Base):
    """Dollar cap per matter; bucket is NULL for the matter-level cap"""

    __tablename__ = "wip_target"
    __table_args__ = (
        # NULLs are distinct in unique indexes, so matter and bucket caps get one each
        Index(
            "uq_wip_target_matter_cap",
            "matter_id",
            unique=True,
            postgresql_where=MATTER_CAP_PREDICATE,
            sqlite_where=MATTER_CAP_PREDICATE,
        ),
        Index(
            "uq_wip_target_bucket_cap",
            "matter_id",
            "bucket",
            unique=True,
            postgresql_where=BUCKET_CAP_PREDICATE,
            sqlite_where=BUCKET_CAP_PREDICATE,
        ),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    matter_id = Column(Text, nullable=False, index=True)
    bucket = Column(Text, nullable=True)
    cap_amount = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RateRecord(Base):
    """Hourly rate by role with effective date"""

    __tablename__ = "rate"
    __table_args__ = (UniqueConstraint("role", "effective_from", name="uq_rate_role_effective_from"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    role = Column(Text, nullable=False, index=True)
    hourly_rate = Column(Float, nullable=False)
    effective_from = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class EventRecord(Base):
    """Audit trail of user actions (TIME_QUICK_LOG, WIP_TARGET_SET, ...)"""

    __tablename__ = "event"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    event_type = Column(Text, nullable=False, index=True)
    actor_user_id = Column(Text, nullable=True)
    matter_id = Column(Text, nullable=True, index=True)
    event_metadata = Column("metadata", JSON, nullable=True)
    occurred_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
