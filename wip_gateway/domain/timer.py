"""Clock-in / clock-out timer arithmetic for SWITCH entries"""

from datetime import datetime

from wip_gateway.utils.date_utils import ensure_utc


def elapsed_minutes(started_at: datetime, ended_at: datetime) -> int:
    """
    Whole minutes between clock-in and clock-out.

    Partial minutes are dropped; a clock-out before clock-in yields 0.

    Example:
        09:00:00 -> 09:44:59 = 44 minutes
    """
    delta = ensure_utc(ended_at) - ensure_utc(started_at)
    return max(int(delta.total_seconds() // 60), 0)
