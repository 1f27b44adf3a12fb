"""POST /v1/rates - maintain the role hourly rate table"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wip_gateway.api.v1.schemas import NewRateRequest, RateResponse
from wip_gateway.api.dependencies import get_request_id, get_user_id
from wip_gateway.infrastructure.database.session import get_db
from wip_gateway.infrastructure.database.repositories import EventRepository, RateRepository

router = APIRouter()


@router.post("/rates", response_model=RateResponse)
def create_rate(
    request_body: NewRateRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    db: Session = Depends(get_db),
):
    """Add or correct the hourly rate for a role, in force from effective_from onwards"""
    request_id = get_request_id(request)

    try:
        rate = RateRepository(db).set_rate(
            request_body.role,
            request_body.hourly_rate,
            request_body.effective_from,
        )
        EventRepository(db).record_event(
            "RATE_SET",
            actor_user_id=user_id,
            metadata={
                "role": request_body.role.value,
                "hourly_rate": request_body.hourly_rate,
                "effective_from": request_body.effective_from.isoformat(),
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

    return RateResponse(
        rate_id=str(rate.id),
        role=request_body.role,
        hourly_rate=request_body.hourly_rate,
        effective_from=request_body.effective_from,
    )
