"""Status alert webhook client with exponential backoff retry logic"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from wip_gateway.config import settings
from wip_gateway.domain.exceptions import AlertDeliveryError
from wip_gateway.infrastructure.observability.metrics import (
    alert_webhook_failure_counter,
    alert_webhook_latency_histogram,
)

logger = logging.getLogger(__name__)


class AlertClient:
    """Posts WIP status escalation events to an external webhook"""

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        max_retries: Optional[int] = None,
        backoff_base: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        self.webhook_url = webhook_url if webhook_url is not None else settings.alert_webhook_url
        self.max_retries = max_retries if max_retries is not None else settings.webhook_max_retries
        self.backoff_base = backoff_base if backoff_base is not None else settings.webhook_backoff_base
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def send_status_event(self, payload: Dict[str, Any]) -> None:
        """
        Deliver a status escalation event, retrying on failure.

        Retry strategy:
        - Exponential backoff: base * 2^(attempt-1), i.e. 1s, 2s, 4s, 8s with base 1s
        - Retries on HTTP error statuses and network failures
        - No-op when no webhook URL is configured

        Raises:
            AlertDeliveryError: All attempts failed
        """
        if not self.enabled:
            return

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with alert_webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    alert_webhook_failure_counter.inc()
                    logger.warning(
                        f"Alert delivery attempt {attempt} failed: {e}",
                        extra={"matter_id": payload.get("matter_id")},
                    )

                    if attempt >= self.max_retries:
                        raise AlertDeliveryError(
                            f"Alert webhook failed after {attempt} attempts"
                        ) from e

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
