"""Hourly rate resolution from a role/effective-date rate table"""

from datetime import date
from typing import Optional, Sequence

from wip_gateway.domain.exceptions import RateNotFoundError
from wip_gateway.domain.models import Rate, Role


def resolve_hourly_rate(
    rates: Sequence[Rate],
    role: Role,
    as_of: date,
    default: Optional[float] = None,
) -> float:
    """
    Pick the hourly rate in force for a role on a date.

    The rate with the latest effective_from on or before as_of wins; among
    rates sharing that date, the last one in the sequence wins.
    Falls back to default when no rate applies.

    Raises:
        RateNotFoundError: No rate applies and no default was given
    """
    candidates = [r for r in rates if r.role == role and r.effective_from <= as_of]

    if not candidates:
        if default is not None:
            return default
        raise RateNotFoundError(f"No {role.value} rate effective on {as_of.isoformat()}")

    # sorted() is stable, so later entries win ties
    return sorted(candidates, key=lambda r: r.effective_from)[-1].hourly_rate
