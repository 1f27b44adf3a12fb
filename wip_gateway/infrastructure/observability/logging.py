"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from wip_gateway.domain.models import WipSummary


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "wip-gateway", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "wip-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_time_logged(
    request_id: str,
    user_id: str,
    matter_id: str,
    minutes: int,
    activity_type: str,
) -> None:
    """Log a completed time entry"""
    logging.info(
        "Time logged",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "matter_id": matter_id,
            "step": "time_logged",
            "minutes": minutes,
            "activity_type": activity_type,
        },
    )


def log_wip_summary(
    request_id: str,
    matter_id: str,
    summary: WipSummary,
    duration_ms: float,
) -> None:
    """Log structured WIP summary outcome for analysis"""
    logging.info(
        "WIP summary computed",
        extra={
            "request_id": request_id,
            "matter_id": matter_id,
            "step": "wip_summary",
            "status": summary.status.value,
            "amount": summary.amount,
            "cap": summary.cap,
            "pct": summary.pct,
            "minutes": summary.minutes,
            "duration_ms": duration_ms,
        },
    )
