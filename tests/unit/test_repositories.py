"""Unit tests for repositories and storage constraints"""

import pytest
from datetime import date
from sqlalchemy.exc import IntegrityError
from wip_gateway.domain.models import ActivityType, Bucket, Role
from wip_gateway.infrastructure.database.models import RateRecord, WipTargetRecord
from wip_gateway.infrastructure.database.repositories import (
    RateRepository,
    TimeEntryRepository,
    WipTargetRepository,
)
from wip_gateway.utils.date_utils import utc_now


def test_second_open_clock_rejected_by_storage(db):
    """Only one running SWITCH entry per user, even without the application check"""
    repo = TimeEntryRepository(db)
    repo.create_entry("user_1", "MAT-1", ActivityType.SWITCH, None, started_at=utc_now())

    with pytest.raises(IntegrityError):
        repo.create_entry("user_1", "MAT-2", ActivityType.SWITCH, None, started_at=utc_now())
    db.rollback()


def test_closed_clocks_do_not_block_new_clock(db):
    repo = TimeEntryRepository(db)
    first = repo.create_entry("user_1", "MAT-1", ActivityType.SWITCH, None, started_at=utc_now())
    repo.close_clock(first, utc_now(), 15)

    repo.create_entry("user_1", "MAT-1", ActivityType.SWITCH, None, started_at=utc_now())
    repo.create_entry("user_2", "MAT-1", ActivityType.SWITCH, None, started_at=utc_now())
    db.commit()

    assert repo.get_open_clock("user_1") is not None
    assert repo.get_open_clock("user_2") is not None


def test_quick_entries_unaffected_by_open_clock_index(db):
    repo = TimeEntryRepository(db)
    repo.create_entry("user_1", "MAT-1", ActivityType.SWITCH, None, started_at=utc_now())
    repo.create_entry("user_1", "MAT-1", ActivityType.QUICK, 15)
    repo.create_entry("user_1", "MAT-1", ActivityType.KEYPAD, 30)
    db.commit()

    assert len(repo.get_entries_by_matter("MAT-1")) == 3


def test_duplicate_matter_cap_rejected_by_storage(db):
    db.add(WipTargetRecord(matter_id="MAT-1", cap_amount=100))
    db.flush()

    db.add(WipTargetRecord(matter_id="MAT-1", cap_amount=200))
    with pytest.raises(IntegrityError):
        db.flush()
    db.rollback()


def test_duplicate_bucket_cap_rejected_by_storage(db):
    db.add(WipTargetRecord(matter_id="MAT-1", bucket=Bucket.WORKSHOP.value, cap_amount=100))
    db.flush()

    db.add(WipTargetRecord(matter_id="MAT-1", bucket=Bucket.WORKSHOP.value, cap_amount=200))
    with pytest.raises(IntegrityError):
        db.flush()
    db.rollback()


def test_set_target_replaces_in_place(db):
    repo = WipTargetRepository(db)
    repo.set_target("MAT-1", 100)
    repo.set_target("MAT-1", 250)
    repo.set_target("MAT-1", 50, Bucket.TAX_RESEARCH)
    db.commit()

    targets = {t.bucket: t.cap_amount for t in repo.get_targets("MAT-1")}
    assert targets == {None: 250, Bucket.TAX_RESEARCH: 50}


def test_duplicate_rate_rejected_by_storage(db):
    db.add(RateRecord(role="STAFF", hourly_rate=200, effective_from=date(2020, 1, 1)))
    db.flush()

    db.add(RateRecord(role="STAFF", hourly_rate=250, effective_from=date(2020, 1, 1)))
    with pytest.raises(IntegrityError):
        db.flush()
    db.rollback()


def test_set_rate_corrects_same_date(db):
    repo = RateRepository(db)
    repo.set_rate(Role.STAFF, 200, date(2020, 1, 1))
    repo.set_rate(Role.STAFF, 250, date(2020, 1, 1))
    db.commit()

    rates = repo.get_rates_for_role(Role.STAFF)
    assert [(r.hourly_rate, r.effective_from) for r in rates] == [(250, date(2020, 1, 1))]
