"""Pydantic schemas for API request/response validation"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from wip_gateway.domain.models import ActivityType, Bucket, Role, WipStatus

MIN_QUICK_LOG_MINUTES = 1
MAX_QUICK_LOG_MINUTES = 480  # one 8-hour day


class QuickLogRequest(BaseModel):
    """Request body for POST /v1/time/quick-log"""

    matter_id: str = Field(..., min_length=1, description="Matter identifier")
    minutes: int = Field(..., ge=MIN_QUICK_LOG_MINUTES, le=MAX_QUICK_LOG_MINUTES, description="Minutes worked")
    activity_type: ActivityType
    bucket: Optional[Bucket] = None


class ClockInRequest(BaseModel):
    """Request body for POST /v1/time/clock-in"""

    matter_id: str = Field(..., min_length=1, description="Matter identifier")
    bucket: Optional[Bucket] = None


class ClockOutRequest(BaseModel):
    """Request body for POST /v1/time/clock-out"""

    matter_id: str = Field(..., min_length=1, description="Matter identifier")


class WipSummaryQuery(BaseModel):
    """Query parameters for GET /v1/wip/summary"""

    matter_id: str = Field(..., min_length=1, description="Matter identifier")


class NewWipTargetRequest(BaseModel):
    """Request body for POST /v1/wip/targets"""

    matter_id: str = Field(..., min_length=1, description="Matter identifier")
    cap_amount: float = Field(..., gt=0, description="Dollar cap")
    bucket: Optional[Bucket] = None


class NewRateRequest(BaseModel):
    """Request body for POST /v1/rates"""

    role: Role
    hourly_rate: float = Field(..., gt=0, description="Dollars per hour")
    effective_from: date


class TimeEntryResponse(BaseModel):
    """Single stored time entry"""

    entry_id: str
    user_id: str
    matter_id: str
    activity_type: ActivityType
    minutes: Optional[int] = None
    bucket: Optional[Bucket] = None
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    created_at: str


class TimeLogResponse(BaseModel):
    """Response for quick-log, clock-in and clock-out"""

    entry: TimeEntryResponse
    matter_status: WipStatus


class TimeEntryListResponse(BaseModel):
    """Response for GET /v1/time/entries"""

    matter_id: str
    entries: List[TimeEntryResponse]


class WipBucketSummarySchema(BaseModel):
    """One bucket's WIP figures"""

    bucket: Bucket
    minutes: int
    hours: float
    amount: float
    pct: float
    status: WipStatus


class WipSummaryResponse(BaseModel):
    """Response for GET /v1/wip/summary"""

    matter_id: str
    amount: float
    cap: float
    pct: float
    status: WipStatus
    minutes: int
    hours: float
    rate_per_hour: float
    buckets: List[WipBucketSummarySchema]


class WipTargetResponse(BaseModel):
    """Response for POST /v1/wip/targets"""

    target_id: str
    matter_id: str
    cap_amount: float
    bucket: Optional[Bucket] = None


class RateResponse(BaseModel):
    """Response for POST /v1/rates"""

    rate_id: str
    role: Role
    hourly_rate: float
    effective_from: date
