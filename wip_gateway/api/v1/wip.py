"""GET /v1/wip/summary and POST /v1/wip/targets - matter WIP exposure and caps"""

import time
import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wip_gateway.api.v1.schemas import (
    NewWipTargetRequest,
    WipBucketSummarySchema,
    WipSummaryQuery,
    WipSummaryResponse,
    WipTargetResponse,
)
from wip_gateway.api.dependencies import get_request_id, get_user_id
from wip_gateway.config import settings
from wip_gateway.domain.models import WipSummary
from wip_gateway.domain.rates import resolve_hourly_rate
from wip_gateway.domain.wip import compute_wip_summary
from wip_gateway.infrastructure.database.session import get_db
from wip_gateway.infrastructure.database.repositories import (
    EventRepository,
    RateRepository,
    TimeEntryRepository,
    WipTargetRepository,
    to_time_entry,
)
from wip_gateway.infrastructure.observability.metrics import record_wip_summary
from wip_gateway.infrastructure.observability.logging import log_wip_summary
from wip_gateway.utils.date_utils import utc_now

router = APIRouter()


def load_wip_summary(db: Session, matter_id: str) -> WipSummary:
    """
    Gather a matter's entries, rate and caps, then run the WIP engine.

    The summary rate is the configured role's rate in force on the current
    UTC date, falling back to the configured default rate.
    """
    entries = [to_time_entry(r) for r in TimeEntryRepository(db).get_entries_by_matter(matter_id)]

    rates = RateRepository(db).get_rates_for_role(settings.summary_rate_role)
    rate_per_hour = resolve_hourly_rate(
        rates,
        settings.summary_rate_role,
        utc_now().date(),
        default=settings.default_hourly_rate,
    )

    cap = 0.0
    bucket_caps = {}
    for target in WipTargetRepository(db).get_targets(matter_id):
        if target.bucket is None:
            cap = target.cap_amount
        else:
            bucket_caps[target.bucket] = target.cap_amount

    return compute_wip_summary(
        entries,
        rate_per_hour,
        cap,
        bucket_caps=bucket_caps,
        default_bucket=settings.default_bucket,
    )


@router.get("/wip/summary", response_model=WipSummaryResponse)
def get_wip_summary(
    request: Request,
    query: Annotated[WipSummaryQuery, Query()],
    db: Session = Depends(get_db),
):
    """
    Compute the WIP exposure and status for a matter.

    Returns:
        Overall amount/pct/status plus one row per bucket
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        summary = load_wip_summary(db, query.matter_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "matter_id": query.matter_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_wip_summary(summary.status)
    log_wip_summary(request_id, query.matter_id, summary, duration_ms)

    return WipSummaryResponse(
        matter_id=query.matter_id,
        amount=summary.amount,
        cap=summary.cap,
        pct=summary.pct,
        status=summary.status,
        minutes=summary.minutes,
        hours=summary.hours,
        rate_per_hour=summary.rate_per_hour,
        buckets=[
            WipBucketSummarySchema(
                bucket=b.bucket,
                minutes=b.minutes,
                hours=b.hours,
                amount=b.amount,
                pct=b.pct,
                status=b.status,
            )
            for b in summary.buckets
        ],
    )


@router.post("/wip/targets", response_model=WipTargetResponse)
def create_wip_target(
    request_body: NewWipTargetRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Create or replace the dollar cap for a matter, or for one of its buckets"""
    request_id = get_request_id(request)

    try:
        target = WipTargetRepository(db).set_target(
            request_body.matter_id,
            request_body.cap_amount,
            request_body.bucket,
        )
        EventRepository(db).record_event(
            "WIP_TARGET_SET",
            actor_user_id=user_id,
            matter_id=request_body.matter_id,
            metadata={
                "cap_amount": request_body.cap_amount,
                "bucket": request_body.bucket.value if request_body.bucket else None,
            },
        )
        db.commit()

    except IntegrityError as e:
        # A concurrent request inserted the same row first
        db.rollback()
        logging.warning(f"Conflicting write: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Conflicting concurrent update, retry")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return WipTargetResponse(
        target_id=str(target.id),
        matter_id=target.matter_id,
        cap_amount=target.cap_amount,
        bucket=request_body.bucket,
    )
