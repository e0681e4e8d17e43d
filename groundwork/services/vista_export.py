"""Vista/Viewpoint timesheet CSV builder.

Pure Python, no database access. The caller hands in approved time entries
already joined with their employee, project, cost code and approver.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple, Optional

from groundwork.core.exceptions import BusinessRuleError
from groundwork.core.money import dsum
from groundwork.services.labor_cost import DOUBLETIME_MULTIPLIER, OVERTIME_MULTIPLIER

MAX_EXPORT_DAYS = 366

HEADERS = (
    "EmployeeNumber",
    "EmployeeName",
    "WorkDate",
    "ProjectNumber",
    "ProjectName",
    "CostCode",
    "CostCodeDescription",
    "RegularHours",
    "OvertimeHours",
    "DoubletimeHours",
    "TotalHours",
    "HourlyRate",
    "RegularAmount",
    "OvertimeAmount",
    "DoubletimeAmount",
    "TotalAmount",
    "ApprovalStatus",
    "ApprovedBy",
    "ApprovedDate",
)


class VistaRow(NamedTuple):
    entry: object
    employee: object
    project: object
    cost_code: object
    approver: Optional[object] = None


@dataclass(frozen=True)
class VistaExport:
    csv_content: str
    file_name: str
    row_count: int
    total_hours: Decimal
    start_date: date
    end_date: date
    employee_count: int
    project_count: int


def validate_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise BusinessRuleError("End date must be on or after start date", code="INVALID_DATE_RANGE")
    if (end_date - start_date).days > MAX_EXPORT_DAYS:
        raise BusinessRuleError("Export date range cannot exceed one year", code="DATE_RANGE_TOO_LARGE")


def export_file_name(start_date: date, end_date: date) -> str:
    return f"vista-timesheet-{start_date:%Y%m%d}-{end_date:%Y%m%d}.csv"


def _num(value) -> str:
    return str(Decimal(value or 0).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _row(row: VistaRow) -> list[str]:
    entry, employee, project, cost_code, approver = row
    rate = Decimal(employee.base_hourly_rate or 0)
    regular = Decimal(entry.regular_hours or 0)
    overtime = Decimal(entry.overtime_hours or 0)
    doubletime = Decimal(entry.doubletime_hours or 0)

    # Amounts are formatted from unrounded products
    regular_amount = regular * rate
    overtime_amount = overtime * rate * OVERTIME_MULTIPLIER
    doubletime_amount = doubletime * rate * DOUBLETIME_MULTIPLIER

    return [
        employee.employee_number,
        employee.full_name,
        entry.work_date.isoformat(),
        project.number,
        project.name,
        cost_code.code,
        cost_code.description,
        _num(regular),
        _num(overtime),
        _num(doubletime),
        _num(regular + overtime + doubletime),
        _num(rate),
        _num(regular_amount),
        _num(overtime_amount),
        _num(doubletime_amount),
        _num(regular_amount + overtime_amount + doubletime_amount),
        str(entry.status).capitalize(),
        approver.full_name if approver is not None else "",
        entry.approved_at.strftime("%Y-%m-%d %H:%M:%S") if entry.approved_at else "",
    ]


def build_csv(rows: Iterable[VistaRow]) -> str:
    """Header line plus one line per entry, RFC 4180 quoting, CRLF line endings."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\r\n")
    writer.writerow(HEADERS)
    for row in rows:
        writer.writerow(_row(row))
    return buf.getvalue()


def build_export(rows: list[VistaRow], start_date: date, end_date: date) -> VistaExport:
    return VistaExport(
        csv_content=build_csv(rows),
        file_name=export_file_name(start_date, end_date),
        row_count=len(rows),
        total_hours=dsum(r.entry.total_hours for r in rows),
        start_date=start_date,
        end_date=end_date,
        employee_count=len({r.entry.employee_id for r in rows}),
        project_count=len({r.entry.project_id for r in rows}),
    )
