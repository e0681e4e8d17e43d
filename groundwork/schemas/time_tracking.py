"""Time tracking schemas: project assignments, time entries and the labor cost report."""


from datetime import date, datetime, timedelta

from pydantic import Field, model_validator

from groundwork.domain.time_tracking import AssignmentRole, TimeEntryStatus
from groundwork.schemas.common import CamelModel, Hours, Money

MAX_HOURS_PER_DAY = 24


# ---------------------------------------------------------------------------
# Project assignments
# ---------------------------------------------------------------------------

class ProjectAssignmentCreate(CamelModel):
    employee_id: str
    project_id: str
    role: AssignmentRole = AssignmentRole.WORKER
    start_date: date | None = None
    end_date: date | None = None
    notes: str | None = Field(default=None, max_length=500)


class ProjectAssignmentOut(CamelModel):
    id: str
    employee_id: str
    project_id: str
    project_number: str | None = None
    project_name: str | None = None
    employee_number: str | None = None
    employee_name: str | None = None
    role: AssignmentRole
    start_date: date
    end_date: date | None = None
    is_active: bool
    notes: str | None = None
    created_at: datetime


# ---------------------------------------------------------------------------
# Time entries
# ---------------------------------------------------------------------------

class _HoursFields(CamelModel):
    regular_hours: Hours | None = Field(default=None, ge=0, le=MAX_HOURS_PER_DAY)
    overtime_hours: Hours | None = Field(default=None, ge=0, le=MAX_HOURS_PER_DAY)
    doubletime_hours: Hours | None = Field(default=None, ge=0, le=MAX_HOURS_PER_DAY)
    description: str | None = Field(default=None, max_length=500)


class TimeEntryCreate(_HoursFields):
    work_date: date
    employee_id: str
    project_id: str
    cost_code_id: str

    @model_validator(mode="after")
    def _check_entry(self):
        if self.work_date > date.today() + timedelta(days=1):
            raise ValueError("workDate cannot be in the future")
        total = (self.regular_hours or 0) + (self.overtime_hours or 0) + (self.doubletime_hours or 0)
        if total <= 0:
            raise ValueError("Total hours must be greater than 0")
        if total > MAX_HOURS_PER_DAY:
            raise ValueError(f"Total hours cannot exceed {MAX_HOURS_PER_DAY} per day")
        return self


class TimeEntryUpdate(_HoursFields):
    """Partial update. A status change runs through the approval state machine."""

    status: TimeEntryStatus | None = None
    approver_id: str | None = None
    approval_comments: str | None = Field(default=None, max_length=500)
    rejection_reason: str | None = Field(default=None, max_length=500)


class ApproveTimeEntryRequest(CamelModel):
    approver_id: str
    comments: str | None = Field(default=None, max_length=500)


class RejectTimeEntryRequest(CamelModel):
    reviewer_id: str
    reason: str | None = Field(default=None, max_length=500)


class TimeEntryOut(CamelModel):
    id: str
    work_date: date
    employee_id: str
    project_id: str
    cost_code_id: str
    regular_hours: Hours
    overtime_hours: Hours
    doubletime_hours: Hours
    total_hours: Hours
    description: str | None = None
    status: TimeEntryStatus
    approved_by_id: str | None = None
    approved_at: datetime | None = None
    approval_comments: str | None = None
    rejection_reason: str | None = None
    payroll_batch_id: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Cost report
# ---------------------------------------------------------------------------

class CostCodeCostOut(CamelModel):
    cost_code_id: str
    cost_code: str
    description: str
    regular_hours: Hours
    overtime_hours: Hours
    doubletime_hours: Hours
    total_hours: Hours
    base_wage_cost: Money
    burden_cost: Money
    total_cost: Money


class ProjectCostOut(CamelModel):
    project_id: str
    project_number: str
    project_name: str
    total_hours: Hours
    base_wage_cost: Money
    burden_cost: Money
    total_cost: Money
    cost_codes: list[CostCodeCostOut]


class CostReportOut(CamelModel):
    start_date: date | None = None
    end_date: date | None = None
    approved_only: bool
    burden_rate: float
    entry_count: int
    total_hours: Hours
    base_wage_cost: Money
    burden_cost: Money
    total_cost: Money
    projects: list[ProjectCostOut]


class VistaExportOut(CamelModel):
    """Export metadata returned instead of the file when the client asks for JSON."""

    file_name: str
    row_count: int
    total_hours: Hours
    start_date: date
    end_date: date
    employee_count: int
    project_count: int
