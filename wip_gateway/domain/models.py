"""Domain models - pure Python enums and dataclasses for time tracking and WIP reporting"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class Role(str, Enum):
    """Staff role used to select the billing rate"""

    STAFF = "STAFF"
    MANAGER = "MANAGER"
    PARTNER = "PARTNER"
    BILLING_ADMIN = "BILLING_ADMIN"


class ActivityType(str, Enum):
    """How a time entry was captured"""

    SWITCH = "switch"  # on/off timer
    QUICK = "quick"  # +15/+30/+60 buttons
    KEYPAD = "keypad"  # manual minutes


class Bucket(str, Enum):
    """Classification of the kind of work performed"""

    HLB_THINKING = "HLB Thinking"
    WORKSHOP = "Workshop / Whiteboard session"
    MS_ENG_LETTER = "Morgan Stanley Eng Letter"
    TAX_RESEARCH = "Tax Research"


ALL_BUCKETS: List[Bucket] = [
    Bucket.HLB_THINKING,
    Bucket.WORKSHOP,
    Bucket.MS_ENG_LETTER,
    Bucket.TAX_RESEARCH,
]


def is_bucket(value: object) -> bool:
    """Check whether an untrusted value is one of the bucket labels"""
    return isinstance(value, str) and value in [b.value for b in ALL_BUCKETS]


class WipStatus(str, Enum):
    """Traffic-light risk tier derived from percentage of cap consumed"""

    GREEN = "GREEN"
    AMBER = "AMBER"
    RED = "RED"


@dataclass(frozen=True)
class TimeEntry:
    """Logged effort against a matter"""

    user_id: str
    matter_id: str
    activity_type: ActivityType
    minutes: Optional[int]  # None while a SWITCH clock is still running
    created_at: Optional[datetime] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    bucket: Optional[Bucket] = None


@dataclass(frozen=True)
class WipTarget:
    """Dollar cap for a matter, or for one bucket of a matter"""

    matter_id: str
    cap_amount: float
    bucket: Optional[Bucket] = None


@dataclass(frozen=True)
class Rate:
    """Hourly rate for a role, effective from a date"""

    role: Role
    hourly_rate: float
    effective_from: date


@dataclass(frozen=True)
class WipBucketSummary:
    """WIP figures for a single bucket"""

    bucket: Bucket
    minutes: int
    hours: float
    amount: float
    pct: float
    status: WipStatus


@dataclass(frozen=True)
class WipSummary:
    """Overall WIP figures for a matter with the per-bucket breakdown"""

    amount: float
    cap: float
    pct: float
    status: WipStatus
    minutes: int
    hours: float
    rate_per_hour: float
    buckets: List[WipBucketSummary] = field(default_factory=list)
