"""Unit tests for hourly rate resolution"""

import pytest
from datetime import date
from wip_gateway.domain.exceptions import RateNotFoundError
from wip_gateway.domain.models import Rate, Role
from wip_gateway.domain.rates import resolve_hourly_rate


@pytest.fixture
def rate_table() -> list[Rate]:
    return [
        Rate(Role.STAFF, 150.0, date(2024, 1, 1)),
        Rate(Role.STAFF, 175.0, date(2025, 1, 1)),
        Rate(Role.STAFF, 200.0, date(2026, 7, 1)),
        Rate(Role.PARTNER, 650.0, date(2024, 1, 1)),
    ]


def test_latest_effective_rate_wins(rate_table):
    assert resolve_hourly_rate(rate_table, Role.STAFF, date(2025, 6, 30)) == 175.0


def test_rate_effective_on_its_start_date(rate_table):
    assert resolve_hourly_rate(rate_table, Role.STAFF, date(2026, 7, 1)) == 200.0


def test_future_rates_ignored(rate_table):
    assert resolve_hourly_rate(rate_table, Role.STAFF, date(2024, 12, 31)) == 150.0


def test_rates_are_per_role(rate_table):
    assert resolve_hourly_rate(rate_table, Role.PARTNER, date(2026, 1, 1)) == 650.0


def test_falls_back_to_default(rate_table):
    assert resolve_hourly_rate(rate_table, Role.MANAGER, date(2026, 1, 1), default=300.0) == 300.0


def test_missing_rate_without_default_raises(rate_table):
    with pytest.raises(RateNotFoundError):
        resolve_hourly_rate(rate_table, Role.STAFF, date(2023, 12, 31))


def test_same_date_correction_wins(rate_table):
    """A later rate for an existing effective date supersedes the earlier one"""
    corrected = rate_table + [Rate(Role.STAFF, 180.0, date(2025, 1, 1))]
    assert resolve_hourly_rate(corrected, Role.STAFF, date(2025, 6, 30)) == 180.0
