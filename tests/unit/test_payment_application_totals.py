"""Unit tests for G702 payment application running totals."""

from decimal import Decimal
from types import SimpleNamespace

from groundwork.services.contracts import running_totals


def test_first_application():
    totals = running_totals(
        scheduled_value=Decimal("100000"),
        work_completed_this_period=Decimal("20000"),
        stored_materials=Decimal("5000"),
        retainage_percent=Decimal("10"),
        previous=None,
    )
    assert totals["work_completed_previous"] == Decimal("0")
    assert totals["work_completed_to_date"] == Decimal("20000")
    assert totals["total_completed_and_stored"] == Decimal("25000")
    assert totals["retainage_this_period"] == Decimal("2000.00")
    assert totals["total_retainage"] == Decimal("2000.00")
    assert totals["total_earned_less_retainage"] == Decimal("23000.00")
    assert totals["less_previous_certificates"] == Decimal("0")
    assert totals["current_payment_due"] == Decimal("23000.00")


def test_second_application_builds_on_the_first():
    previous = SimpleNamespace(
        work_completed_to_date=Decimal("20000"),
        total_retainage=Decimal("2000"),
        total_earned_less_retainage=Decimal("23000"),
    )
    totals = running_totals(
        scheduled_value=Decimal("100000"),
        work_completed_this_period=Decimal("30000"),
        stored_materials=Decimal("0"),
        retainage_percent=Decimal("10"),
        previous=previous,
    )
    assert totals["work_completed_previous"] == Decimal("20000")
    assert totals["work_completed_to_date"] == Decimal("50000")
    assert totals["retainage_previous"] == Decimal("2000")
    assert totals["total_retainage"] == Decimal("5000.00")
    assert totals["total_earned_less_retainage"] == Decimal("45000.00")
    assert totals["less_previous_certificates"] == Decimal("23000")
    assert totals["current_payment_due"] == Decimal("22000.00")


def test_zero_retainage():
    totals = running_totals(
        scheduled_value=Decimal("5000"),
        work_completed_this_period=Decimal("1234.56"),
        stored_materials=Decimal("0"),
        retainage_percent=Decimal("0"),
        previous=None,
    )
    assert totals["retainage_this_period"] == Decimal("0")
    assert totals["current_payment_due"] == Decimal("1234.56")
