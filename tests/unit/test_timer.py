"""Unit tests for clock-in/clock-out elapsed time"""

from datetime import datetime, timedelta, timezone
from wip_gateway.domain.timer import elapsed_minutes


def test_elapsed_minutes_drops_partial_minute():
    start = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
    assert elapsed_minutes(start, start + timedelta(minutes=44, seconds=59)) == 44


def test_elapsed_minutes_exact():
    start = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
    assert elapsed_minutes(start, start + timedelta(hours=2)) == 120


def test_elapsed_minutes_mixes_naive_and_aware():
    """Naive timestamps (as read back from SQLite) are treated as UTC"""
    naive_start = datetime(2026, 3, 2, 9, 0, 0)
    aware_end = datetime(2026, 3, 2, 9, 30, 0, tzinfo=timezone.utc)
    assert elapsed_minutes(naive_start, aware_end) == 30


def test_elapsed_minutes_converts_offsets():
    start = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    end = datetime(2026, 3, 2, 7, 15, 0, tzinfo=timezone.utc)
    assert elapsed_minutes(start, end) == 15


def test_elapsed_minutes_never_negative():
    start = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
    assert elapsed_minutes(start, start - timedelta(minutes=5)) == 0
