"""WIP engine - aggregates time entries into dollar exposure and risk status"""

from typing import Dict, List, Mapping, Optional, Sequence

from wip_gateway.domain.models import (
    ALL_BUCKETS,
    Bucket,
    TimeEntry,
    WipBucketSummary,
    WipStatus,
    WipSummary,
)

# Inclusive lower bounds; a boundary value belongs to the more severe tier
RED_THRESHOLD = 0.90
AMBER_THRESHOLD = 0.70

DEFAULT_BUCKET = Bucket.HLB_THINKING

STATUS_SEVERITY: Dict[WipStatus, int] = {
    WipStatus.GREEN: 0,
    WipStatus.AMBER: 1,
    WipStatus.RED: 2,
}


def classify_status(pct: float) -> WipStatus:
    """
    Map percentage of cap consumed to a status tier.

    - pct >= 0.90: RED
    - pct >= 0.70: AMBER
    - otherwise:   GREEN

    RED must be checked first so that 0.90 exactly lands in RED.
    """
    if pct >= RED_THRESHOLD:
        return WipStatus.RED
    elif pct >= AMBER_THRESHOLD:
        return WipStatus.AMBER
    else:
        return WipStatus.GREEN


def status_escalated(previous: WipStatus, current: WipStatus) -> bool:
    """True when current is a strictly more severe tier than previous"""
    return STATUS_SEVERITY[current] > STATUS_SEVERITY[previous]


def total_minutes(entries: Sequence[TimeEntry]) -> int:
    """Sum entry minutes; missing minutes (e.g. a running clock) count as 0"""
    return sum(entry.minutes or 0 for entry in entries)


def calculate_amount(minutes: int, rate_per_hour: float) -> float:
    """Dollar exposure for a number of minutes, unrounded"""
    return (minutes / 60) * rate_per_hour


def calculate_pct(amount: float, cap: Optional[float]) -> float:
    """Fraction of cap consumed; 0 when there is no positive cap"""
    if cap is None or cap <= 0:
        return 0.0
    return amount / cap


def assign_bucket(entry: TimeEntry, default_bucket: Bucket = DEFAULT_BUCKET) -> Bucket:
    """Bucket an entry belongs to: its own tag, else the default bucket"""
    return entry.bucket if entry.bucket is not None else default_bucket


def summarize_bucket(
    bucket: Bucket,
    minutes: int,
    rate_per_hour: float,
    cap: Optional[float],
) -> WipBucketSummary:
    amount = calculate_amount(minutes, rate_per_hour)
    pct = calculate_pct(amount, cap)
    return WipBucketSummary(
        bucket=bucket,
        minutes=minutes,
        hours=minutes / 60,
        amount=amount,
        pct=pct,
        status=classify_status(pct),
    )


def summarize_buckets(
    entries: Sequence[TimeEntry],
    rate_per_hour: float,
    bucket_caps: Optional[Mapping[Bucket, float]] = None,
    default_bucket: Bucket = DEFAULT_BUCKET,
) -> List[WipBucketSummary]:
    """
    Group entries by bucket and compute per-bucket WIP figures.

    Requirements:
    - Every bucket in ALL_BUCKETS is emitted, in canonical order, even with no entries
    - Each entry lands in exactly one bucket (untagged entries go to default_bucket)
    - Buckets without a cap in bucket_caps have cap 0, so pct 0
    """
    caps = bucket_caps or {}

    minutes_by_bucket: Dict[Bucket, int] = {bucket: 0 for bucket in ALL_BUCKETS}
    for entry in entries:
        minutes_by_bucket[assign_bucket(entry, default_bucket)] += entry.minutes or 0

    return [
        summarize_bucket(bucket, minutes_by_bucket[bucket], rate_per_hour, caps.get(bucket, 0.0))
        for bucket in ALL_BUCKETS
    ]


def combine_summaries(
    bucket_summaries: Sequence[WipBucketSummary],
    rate_per_hour: float,
    cap: Optional[float],
) -> WipSummary:
    """
    Roll bucket summaries into the overall matter summary.

    Overall minutes is the sum of bucket minutes; amount, pct and status use
    the same formulas and thresholds as the bucket level.
    """
    minutes = sum(summary.minutes for summary in bucket_summaries)
    amount = calculate_amount(minutes, rate_per_hour)
    pct = calculate_pct(amount, cap)

    return WipSummary(
        amount=amount,
        cap=cap if cap is not None else 0.0,
        pct=pct,
        status=classify_status(pct),
        minutes=minutes,
        hours=minutes / 60,
        rate_per_hour=rate_per_hour,
        buckets=list(bucket_summaries),
    )


def compute_wip_summary(
    entries: Sequence[TimeEntry],
    rate_per_hour: float,
    cap: Optional[float],
    bucket_caps: Optional[Mapping[Bucket, float]] = None,
    default_bucket: Bucket = DEFAULT_BUCKET,
) -> WipSummary:
    """
    Main entry point: build the complete nested WIP report for a matter.

    Example:
        45m + 60m at $150/h against a $5000 cap
        -> amount 262.5, pct 0.0525, GREEN, 105 minutes, 1.75 hours
    """
    bucket_summaries = summarize_buckets(entries, rate_per_hour, bucket_caps, default_bucket)
    return combine_summaries(bucket_summaries, rate_per_hour, cap)
