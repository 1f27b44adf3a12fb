"""Time capture endpoints - quick-log, clock-in/clock-out and entry listing"""

import logging
from typing import Any, Dict
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wip_gateway.api.v1.schemas import (
    ClockInRequest,
    ClockOutRequest,
    QuickLogRequest,
    TimeEntryListResponse,
    TimeEntryResponse,
    TimeLogResponse,
)
from wip_gateway.api.v1.wip import load_wip_summary
from wip_gateway.api.dependencies import get_alert_client, get_request_id, get_user_id
from wip_gateway.config import settings
from wip_gateway.domain.exceptions import AlertDeliveryError, ClockAlreadyRunningError, NoActiveClockError
from wip_gateway.domain.models import ActivityType, WipStatus, WipSummary
from wip_gateway.domain.timer import elapsed_minutes
from wip_gateway.domain.wip import status_escalated
from wip_gateway.infrastructure.clients.alerts import AlertClient
from wip_gateway.infrastructure.database.session import get_db
from wip_gateway.infrastructure.database.models import TimeEntryRecord
from wip_gateway.infrastructure.database.repositories import EventRepository, TimeEntryRepository
from wip_gateway.infrastructure.observability.metrics import record_time_logged, status_alert_counter
from wip_gateway.infrastructure.observability.logging import log_time_logged
from wip_gateway.utils.date_utils import utc_now

router = APIRouter()


def _entry_response(record: TimeEntryRecord) -> TimeEntryResponse:
    return TimeEntryResponse(
        entry_id=str(record.id),
        user_id=record.user_id,
        matter_id=record.matter_id,
        activity_type=ActivityType(record.activity_type),
        minutes=record.minutes,
        bucket=record.bucket,
        started_at=record.started_at,
        ended_at=record.ended_at,
        created_at=record.created_at.isoformat(),
    )


async def _deliver_alert(alert_client: AlertClient, payload: Dict[str, Any]) -> None:
    try:
        await alert_client.send_status_event(payload)
    except AlertDeliveryError as e:
        logging.error(f"Status alert dropped: {e}", extra={"matter_id": payload["matter_id"]})


def _schedule_alert_if_escalated(
    background_tasks: BackgroundTasks,
    alert_client: AlertClient,
    matter_id: str,
    previous: WipStatus,
    summary: WipSummary,
) -> None:
    """Fire a status alert when logging time moved the matter to a worse tier"""
    if not alert_client.enabled or not status_escalated(previous, summary.status):
        return

    status_alert_counter.labels(status=summary.status.value).inc()
    background_tasks.add_task(
        _deliver_alert,
        alert_client,
        {
            "event": "WIP_STATUS_ESCALATED",
            "matter_id": matter_id,
            "previous_status": previous.value,
            "status": summary.status.value,
            "amount": summary.amount,
            "cap": summary.cap,
            "pct": summary.pct,
        },
    )


@router.post("/time/quick-log", response_model=TimeLogResponse)
def quick_log(
    request_body: QuickLogRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    alert_client: AlertClient = Depends(get_alert_client),
):
    """
    Log a block of minutes against a matter.

    Flow:
    1. Snapshot the matter's status before logging
    2. Persist the entry and a TIME_QUICK_LOG event
    3. Recompute the matter's WIP status
    4. Schedule an alert webhook if the status escalated
    """
    request_id = get_request_id(request)

    try:
        previous = load_wip_summary(db, request_body.matter_id).status

        record = TimeEntryRepository(db).create_entry(
            user_id=user_id,
            matter_id=request_body.matter_id,
            activity_type=request_body.activity_type,
            minutes=request_body.minutes,
            bucket=request_body.bucket,
        )
        EventRepository(db).record_event(
            "TIME_QUICK_LOG",
            actor_user_id=user_id,
            matter_id=request_body.matter_id,
            metadata={
                "minutes": request_body.minutes,
                "activity_type": request_body.activity_type.value,
            },
        )
        db.flush()

        summary = load_wip_summary(db, request_body.matter_id)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_time_logged(request_body.activity_type.value, request_body.minutes)
    log_time_logged(
        request_id, user_id, request_body.matter_id, request_body.minutes, request_body.activity_type.value
    )
    _schedule_alert_if_escalated(background_tasks, alert_client, request_body.matter_id, previous, summary)

    return TimeLogResponse(entry=_entry_response(record), matter_status=summary.status)


@router.post("/time/clock-in", response_model=TimeLogResponse)
def clock_in(
    request_body: ClockInRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """
    Start a running (SWITCH) timer on a matter.

    A user may only have one running clock at a time.
    """
    request_id = get_request_id(request)

    try:
        repo = TimeEntryRepository(db)
        running = repo.get_open_clock(user_id)
        if running is not None:
            raise ClockAlreadyRunningError(f"Clock already running on matter {running.matter_id}")

        record = repo.create_entry(
            user_id=user_id,
            matter_id=request_body.matter_id,
            activity_type=ActivityType.SWITCH,
            minutes=None,
            bucket=request_body.bucket,
            started_at=utc_now(),
        )
        EventRepository(db).record_event("TIME_CLOCK_IN", actor_user_id=user_id, matter_id=request_body.matter_id)
        db.flush()

        summary = load_wip_summary(db, request_body.matter_id)
        db.commit()

    except ClockAlreadyRunningError as e:
        db.rollback()
        logging.warning(f"Clock-in rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))

    except IntegrityError as e:
        # A concurrent clock-in won the open-clock unique index
        db.rollback()
        logging.warning(f"Clock-in rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail="Clock already running")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return TimeLogResponse(entry=_entry_response(record), matter_status=summary.status)


@router.post("/time/clock-out", response_model=TimeLogResponse)
def clock_out(
    request_body: ClockOutRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
    alert_client: AlertClient = Depends(get_alert_client),
):
    """Stop the running timer on a matter and record whole elapsed minutes"""
    request_id = get_request_id(request)

    try:
        previous = load_wip_summary(db, request_body.matter_id).status

        repo = TimeEntryRepository(db)
        running = repo.get_open_clock(user_id, request_body.matter_id)
        if running is None:
            raise NoActiveClockError(f"No running clock on matter {request_body.matter_id}")

        ended_at = utc_now()
        minutes = elapsed_minutes(running.started_at, ended_at)
        record = repo.close_clock(running, ended_at, minutes)
        EventRepository(db).record_event(
            "TIME_CLOCK_OUT",
            actor_user_id=user_id,
            matter_id=request_body.matter_id,
            metadata={"minutes": minutes},
        )
        db.flush()

        summary = load_wip_summary(db, request_body.matter_id)
        db.commit()

    except NoActiveClockError as e:
        db.rollback()
        logging.warning(f"Clock-out rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_time_logged(ActivityType.SWITCH.value, minutes)
    log_time_logged(request_id, user_id, request_body.matter_id, minutes, ActivityType.SWITCH.value)
    _schedule_alert_if_escalated(background_tasks, alert_client, request_body.matter_id, previous, summary)

    return TimeLogResponse(entry=_entry_response(record), matter_status=summary.status)


@router.get("/time/entries", response_model=TimeEntryListResponse)
def list_time_entries(
    request: Request,
    matter_id: str = Query(..., min_length=1, description="Matter identifier"),
    db: Session = Depends(get_db),
):
    """Most recent time entries logged against a matter"""
    request_id = get_request_id(request)

    try:
        records = TimeEntryRepository(db).get_entries_by_matter(matter_id, limit=settings.entry_history_limit)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "matter_id": matter_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    return TimeEntryListResponse(
        matter_id=matter_id,
        entries=[_entry_response(r) for r in records],
    )
