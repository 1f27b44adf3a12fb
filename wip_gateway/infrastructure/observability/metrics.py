"""Prometheus metrics for WIP status distribution, logged time, and alert webhook performance"""

from prometheus_client import Counter, Histogram

from wip_gateway.domain.models import WipStatus

# WIP metrics
wip_summary_counter = Counter(
    "wip_summary_total",
    "WIP summaries computed",
    ["status"],  # GREEN | AMBER | RED
)

minutes_logged_counter = Counter(
    "wip_minutes_logged_total",
    "Minutes of time logged",
    ["activity_type"],  # switch | quick | keypad
)

status_alert_counter = Counter(
    "wip_status_alerts_total",
    "Status escalation alerts scheduled",
    ["status"],
)

# Alert webhook metrics
alert_webhook_latency_histogram = Histogram(
    "alert_webhook_latency_seconds",
    "Status alert webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

alert_webhook_failure_counter = Counter(
    "alert_webhook_failures_total",
    "Failed status alert deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_wip_summary(status: WipStatus) -> None:
    wip_summary_counter.labels(status=status.value).inc()


def record_time_logged(activity_type: str, minutes: int) -> None:
    minutes_logged_counter.labels(activity_type=activity_type).inc(minutes)
