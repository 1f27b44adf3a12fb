"""Data access layer for time tracking and WIP entities"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from wip_gateway.infrastructure.database.models import EventRecord, RateRecord, TimeEntryRecord, WipTargetRecord
from wip_gateway.domain.models import ActivityType, Bucket, Rate, Role, TimeEntry, WipTarget


def to_time_entry(record: TimeEntryRecord) -> TimeEntry:
    """Map a stored row onto the domain TimeEntry"""
    return TimeEntry(
        user_id=record.user_id,
        matter_id=record.matter_id,
        activity_type=ActivityType(record.activity_type),
        minutes=record.minutes,
        created_at=record.created_at,
        started_at=record.started_at,
        ended_at=record.ended_at,
        bucket=Bucket(record.bucket) if record.bucket else None,
    )


class TimeEntryRepository:
    """Repository for time entries"""

    def __init__(self, db: Session):
        self.db = db

    def create_entry(
        self,
        user_id: str,
        matter_id: str,
        activity_type: ActivityType,
        minutes: Optional[int],
        bucket: Optional[Bucket] = None,
        started_at: Optional[datetime] = None,
    ) -> TimeEntryRecord:
        """Persist a time entry"""
        record = TimeEntryRecord(
            user_id=user_id,
            matter_id=matter_id,
            activity_type=activity_type.value,
            minutes=minutes,
            bucket=bucket.value if bucket else None,
            started_at=started_at,
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_entries_by_matter(self, matter_id: str, limit: Optional[int] = None) -> List[TimeEntryRecord]:
        """Fetch entries for a matter, newest first"""
        query = (
            self.db.query(TimeEntryRecord)
            .filter(TimeEntryRecord.matter_id == matter_id)
            .order_by(TimeEntryRecord.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_open_clock(self, user_id: str, matter_id: Optional[str] = None) -> Optional[TimeEntryRecord]:
        """Running SWITCH entry for a user, optionally restricted to one matter"""
        query = self.db.query(TimeEntryRecord).filter(
            TimeEntryRecord.user_id == user_id,
            TimeEntryRecord.activity_type == ActivityType.SWITCH.value,
            TimeEntryRecord.ended_at.is_(None),
        )
        if matter_id is not None:
            query = query.filter(TimeEntryRecord.matter_id == matter_id)
        return query.first()

    def close_clock(self, record: TimeEntryRecord, ended_at: datetime, minutes: int) -> TimeEntryRecord:
        record.ended_at = ended_at
        record.minutes = minutes
        self.db.flush()
        return record


class WipTargetRepository:
    """Repository for matter and bucket caps"""

    def __init__(self, db: Session):
        self.db = db

    def set_target(self, matter_id: str, cap_amount: float, bucket: Optional[Bucket] = None) -> WipTargetRecord:
        """Create or replace the cap for a matter (or one of its buckets)"""
        record = self._find(matter_id, bucket)
        if record is None:
            record = WipTargetRecord(
                matter_id=matter_id,
                bucket=bucket.value if bucket else None,
                cap_amount=cap_amount,
            )
            self.db.add(record)
        else:
            record.cap_amount = cap_amount
        self.db.flush()
        return record

    def get_targets(self, matter_id: str) -> List[WipTarget]:
        records = self.db.query(WipTargetRecord).filter(WipTargetRecord.matter_id == matter_id).all()
        return [
            WipTarget(
                matter_id=r.matter_id,
                cap_amount=r.cap_amount,
                bucket=Bucket(r.bucket) if r.bucket else None,
            )
            for r in records
        ]

    def _find(self, matter_id: str, bucket: Optional[Bucket]) -> Optional[WipTargetRecord]:
        query = self.db.query(WipTargetRecord).filter(WipTargetRecord.matter_id == matter_id)
        if bucket is None:
            query = query.filter(WipTargetRecord.bucket.is_(None))
        else:
            query = query.filter(WipTargetRecord.bucket == bucket.value)
        return query.first()


class RateRepository:
    """Repository for the role rate table"""

    def __init__(self, db: Session):
        self.db = db

    def set_rate(self, role: Role, hourly_rate: float, effective_from: date) -> RateRecord:
        """Create the rate for (role, effective_from), or correct the existing one"""
        record = (
            self.db.query(RateRecord)
            .filter(RateRecord.role == role.value, RateRecord.effective_from == effective_from)
            .first()
        )
        if record is None:
            record = RateRecord(role=role.value, hourly_rate=hourly_rate, effective_from=effective_from)
            self.db.add(record)
        else:
            record.hourly_rate = hourly_rate
        self.db.flush()
        return record

    def get_rates_for_role(self, role: Role) -> List[Rate]:
        """Rates for a role, oldest insert first"""
        records = (
            self.db.query(RateRecord)
            .filter(RateRecord.role == role.value)
            .order_by(RateRecord.created_at, RateRecord.effective_from)
            .all()
        )
        return [
            Rate(role=Role(r.role), hourly_rate=r.hourly_rate, effective_from=r.effective_from)
            for r in records
        ]


class EventRepository:
    """Append-only event log"""

    def __init__(self, db: Session):
        self.db = db

    def record_event(
        self,
        event_type: str,
        actor_user_id: Optional[str] = None,
        matter_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> EventRecord:
        record = EventRecord(
            event_type=event_type,
            actor_user_id=actor_user_id,
            matter_id=matter_id,
            event_metadata=metadata,
        )
        self.db.add(record)
        return record

    def get_events_by_matter(self, matter_id: str) -> List[EventRecord]:
        return (
            self.db.query(EventRecord)
            .filter(EventRecord.matter_id == matter_id)
            .order_by(EventRecord.occurred_at.desc())
            .all()
        )
