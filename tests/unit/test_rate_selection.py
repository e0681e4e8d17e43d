"""Unit tests for choosing the pay rate that applies to a day of work."""

from datetime import date
from decimal import Decimal

from groundwork.domain.hr import PayRate
from groundwork.services.hr import select_rate


def _rate(amount, effective, *, project_id=None, priority=10, expiration=None, rate_type="hourly"):
    return PayRate(
        employee_id="emp-1",
        rate_type=rate_type,
        amount=Decimal(amount),
        effective_date=effective,
        expiration_date=expiration,
        project_id=project_id,
        priority=priority,
    )


GENERAL = _rate("40", date(2024, 1, 1))
PROJECT = _rate("55", date(2024, 6, 1), project_id="proj-1")
EXPIRED = _rate("60", date(2023, 1, 1), priority=1, expiration=date(2023, 12, 31))
DAILY = _rate("400", date(2024, 1, 1), priority=0, rate_type="daily")
RATES = [GENERAL, PROJECT, EXPIRED, DAILY]


def test_project_rate_beats_general_rate():
    assert select_rate(RATES, project_id="proj-1", as_of=date(2024, 7, 1)) is PROJECT


def test_other_project_gets_general_rate():
    assert select_rate(RATES, project_id="proj-2", as_of=date(2024, 7, 1)) is GENERAL


def test_rate_not_yet_effective_is_skipped():
    assert select_rate(RATES, project_id="proj-1", as_of=date(2024, 5, 31)) is GENERAL


def test_lower_priority_number_wins():
    preferred = _rate("42", date(2024, 1, 1), priority=5)
    assert select_rate(RATES + [preferred], project_id=None, as_of=date(2024, 7, 1)) is preferred


def test_latest_effective_breaks_ties():
    newer = _rate("45", date(2024, 3, 1))
    assert select_rate(RATES + [newer], project_id=None, as_of=date(2024, 7, 1)) is newer


def test_nothing_active():
    assert select_rate(RATES, project_id=None, as_of=date(2022, 1, 1)) is None


def test_total_hourly_cost_adds_fringes():
    rate = _rate("50", date(2024, 1, 1))
    rate.health_welfare_rate = Decimal("8.25")
    rate.pension_rate = Decimal("6")
    rate.training_rate = Decimal("0.75")
    rate.other_fringe_rate = None
    assert rate.total_fringe_rate == Decimal("15.00")
    assert rate.total_hourly_cost == Decimal("65.00")
