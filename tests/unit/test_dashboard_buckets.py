"""Unit tests for weekly hour bucketing."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from groundwork.services.dashboard import bucket_weekly_hours, monday_of, week_label


def _entry(work_date, regular="0", overtime="0", doubletime="0"):
    return SimpleNamespace(
        work_date=work_date,
        regular_hours=Decimal(regular),
        overtime_hours=Decimal(overtime),
        doubletime_hours=Decimal(doubletime),
    )


def test_monday_of():
    assert monday_of(date(2025, 1, 8)) == date(2025, 1, 6)
    assert monday_of(date(2025, 1, 6)) == date(2025, 1, 6)
    assert monday_of(date(2025, 1, 12)) == date(2025, 1, 6)


def test_week_label_has_no_leading_zero():
    assert week_label(date(2025, 1, 6)) == "Jan 6"
    assert week_label(date(2024, 12, 30)) == "Dec 30"


def test_buckets_are_zero_filled_monday_weeks():
    entries = [
        _entry(date(2025, 1, 7), regular="8", overtime="2"),
        _entry(date(2025, 1, 21), regular="6"),
        _entry(date(2024, 12, 30), regular="99"),  # before the window
    ]
    result = bucket_weekly_hours(entries, date(2025, 1, 8), date(2025, 1, 22))

    assert [p.week_label for p in result.data] == ["Jan 6", "Jan 13", "Jan 20"]
    assert [p.total_hours for p in result.data] == [Decimal("10"), Decimal("0"), Decimal("6")]
    assert result.data[0].overtime_hours == Decimal("2")
    assert result.total_hours == Decimal("16")
    assert result.average_hours_per_week == Decimal("5.33")


def test_single_week():
    result = bucket_weekly_hours([], date(2025, 1, 6), date(2025, 1, 6))
    assert len(result.data) == 1
    assert result.total_hours == Decimal("0")
    assert result.average_hours_per_week == Decimal("0.00")
