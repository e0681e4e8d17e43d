"""Unit tests for the Vista/Viewpoint timesheet CSV builder."""

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace

import pytest

from groundwork.core.exceptions import BusinessRuleError
from groundwork.services import vista_export


def _row(**entry_overrides) -> vista_export.VistaRow:
    entry = SimpleNamespace(
        employee_id="emp-1",
        project_id="proj-1",
        work_date=date(2025, 1, 6),
        regular_hours=Decimal("2.5"),
        overtime_hours=Decimal("1"),
        doubletime_hours=Decimal("0"),
        status="approved",
        approved_at=datetime(2025, 1, 7, 9, 30, 0),
    )
    for key, value in entry_overrides.items():
        setattr(entry, key, value)
    entry.total_hours = entry.regular_hours + entry.overtime_hours + entry.doubletime_hours
    employee = SimpleNamespace(employee_number="E-100", full_name="Jane Doe", base_hourly_rate=Decimal("10.05"))
    project = SimpleNamespace(number="P-1", name="Smith, Jones Tower")
    cost_code = SimpleNamespace(code="03-100", description="Concrete")
    approver = SimpleNamespace(full_name="Sam Boss")
    return vista_export.VistaRow(entry, employee, project, cost_code, approver)


class TestBuildCsv:
    def test_header_only_when_empty(self):
        content = vista_export.build_csv([])
        assert content == ",".join(vista_export.HEADERS) + "\r\n"

    def test_row_values(self):
        """Numbers have two decimals, rounded half-up from unrounded amounts."""
        content = vista_export.build_csv([_row()])
        lines = list(csv.reader(io.StringIO(content)))
        assert lines[0] == list(vista_export.HEADERS)
        assert lines[1] == [
            "E-100",
            "Jane Doe",
            "2025-01-06",
            "P-1",
            "Smith, Jones Tower",
            "03-100",
            "Concrete",
            "2.50",
            "1.00",
            "0.00",
            "3.50",
            "10.05",
            "25.13",
            "15.08",
            "0.00",
            "40.20",
            "Approved",
            "Sam Boss",
            "2025-01-07 09:30:00",
        ]

    def test_fields_with_commas_are_quoted(self):
        content = vista_export.build_csv([_row()])
        assert '"Smith, Jones Tower"' in content
        assert content.endswith("\r\n")

    def test_missing_approver_leaves_blank(self):
        row = _row(approved_at=None)._replace(approver=None)
        fields = list(csv.reader(io.StringIO(vista_export.build_csv([row]))))[1]
        assert fields[-2:] == ["", ""]


class TestValidateRange:
    def test_end_before_start(self):
        with pytest.raises(BusinessRuleError) as exc_info:
            vista_export.validate_range(date(2025, 2, 1), date(2025, 1, 31))
        assert exc_info.value.code == "INVALID_DATE_RANGE"

    def test_range_over_a_year(self):
        with pytest.raises(BusinessRuleError) as exc_info:
            vista_export.validate_range(date(2024, 1, 1), date(2025, 1, 2))
        assert exc_info.value.code == "DATE_RANGE_TOO_LARGE"

    def test_full_leap_year_is_allowed(self):
        vista_export.validate_range(date(2024, 1, 1), date(2025, 1, 1))


class TestBuildExport:
    def test_file_name(self):
        assert (
            vista_export.export_file_name(date(2025, 1, 1), date(2025, 1, 31))
            == "vista-timesheet-20250101-20250131.csv"
        )

    def test_counts(self):
        rows = [
            _row(),
            _row(work_date=date(2025, 1, 7)),
            _row(employee_id="emp-2", project_id="proj-2", regular_hours=Decimal("8")),
        ]
        export = vista_export.build_export(rows, date(2025, 1, 1), date(2025, 1, 31))
        assert export.row_count == 3
        assert export.total_hours == Decimal("16.0")
        assert export.employee_count == 2
        assert export.project_count == 2
        assert export.csv_content.count("\r\n") == 4
