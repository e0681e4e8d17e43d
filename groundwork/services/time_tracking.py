"""Time tracking services: project assignments, daily time entries and their approval workflow."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from itertools import groupby

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from groundwork.core.money import dsum
from groundwork.core.pagination import PaginationParams
from groundwork.domain.cost_code import CostCode
from groundwork.domain.hr import Employee, EmployeeClassification
from groundwork.domain.project import INACTIVE_PROJECT_STATUSES, Project
from groundwork.domain.time_tracking import ProjectAssignment, TimeEntry, TimeEntryStatus
from groundwork.repositories.cost_code import CostCodeRepository
from groundwork.repositories.hr import EmployeeRepository
from groundwork.repositories.project import ProjectRepository
from groundwork.repositories.time_tracking import ProjectAssignmentRepository, TimeEntryRepository
from groundwork.schemas.time_tracking import (
    MAX_HOURS_PER_DAY,
    ApproveTimeEntryRequest,
    CostCodeCostOut,
    CostReportOut,
    ProjectAssignmentCreate,
    ProjectAssignmentOut,
    ProjectCostOut,
    RejectTimeEntryRequest,
    TimeEntryCreate,
    TimeEntryUpdate,
)
from groundwork.services import vista_export
from groundwork.services.labor_cost import LaborCostCalculator

logger = logging.getLogger(__name__)

_DRAFT = TimeEntryStatus.DRAFT.value
_SUBMITTED = TimeEntryStatus.SUBMITTED.value
_APPROVED = TimeEntryStatus.APPROVED.value
_REJECTED = TimeEntryStatus.REJECTED.value

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    _DRAFT: {_SUBMITTED},
    _SUBMITTED: {_APPROVED, _REJECTED, _DRAFT},
    _REJECTED: {_DRAFT, _SUBMITTED},
    _APPROVED: {_SUBMITTED},
}

# Hours can only change before a decision is made
_EDITABLE_STATUSES = {_DRAFT, _SUBMITTED}


def can_transition(current: str, new: str) -> bool:
    """True when a time entry may move from `current` to `new` status."""
    return current == new or new in ALLOWED_TRANSITIONS.get(current, set())


def can_approve(approver: Employee | None, employee: Employee | None) -> bool:
    """Active supervisors and salaried staff may approve anyone; otherwise only the direct supervisor."""
    if approver is None or not approver.is_active:
        return False
    if approver.classification in (
        EmployeeClassification.SUPERVISOR.value,
        EmployeeClassification.SALARIED.value,
    ):
        return True
    return employee is not None and employee.supervisor_id == approver.id


def _assignment_out(
    assignment: ProjectAssignment,
    project: Project | None = None,
    employee: Employee | None = None,
) -> ProjectAssignmentOut:
    out = ProjectAssignmentOut.model_validate(assignment)
    if project is not None:
        out.project_number = project.number
        out.project_name = project.name
    if employee is not None:
        out.employee_number = employee.employee_number
        out.employee_name = employee.full_name
    return out


# ---------------------------------------------------------------------------
# Project assignments
# ---------------------------------------------------------------------------

class ProjectAssignmentService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = ProjectAssignmentRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)
        self._projects = ProjectRepository(session, tenant_id)

    async def assign(self, data: ProjectAssignmentCreate) -> ProjectAssignmentOut:
        employee = await self._employees.get_by_id(data.employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee", data.employee_id, code="EMPLOYEE_NOT_FOUND")
        project = await self._projects.get_by_id(data.project_id)
        if not project:
            raise NotFoundError("Project", data.project_id, code="PROJECT_NOT_FOUND")

        start_date = data.start_date or date.today()
        if data.end_date and data.end_date < start_date:
            raise BusinessRuleError("End date must be on or after start date", code="INVALID_DATE_RANGE")
        if await self._repo.active_for(data.employee_id, data.project_id):
            raise ConflictError(
                "Employee already has an active assignment to this project",
                code="DUPLICATE_ASSIGNMENT",
            )

        assignment = await self._repo.create(
            employee_id=data.employee_id,
            project_id=data.project_id,
            role=data.role,
            start_date=start_date,
            end_date=data.end_date,
            notes=data.notes,
        )
        logger.info("Assigned employee %s to project %s", employee.employee_number, project.number)
        return _assignment_out(assignment, project, employee)

    async def _end(self, assignment: ProjectAssignment | None, end_date: date | None) -> None:
        if assignment is None:
            raise NotFoundError("Active assignment", code="ASSIGNMENT_NOT_FOUND")
        assignment.end_date = end_date or date.today()
        assignment.is_active = False
        await self._repo.save(assignment)

    async def remove(self, assignment_id: str, end_date: date | None = None) -> None:
        assignment = await self._repo.first(
            ProjectAssignment.id == assignment_id,
            ProjectAssignment.is_active.is_(True),
        )
        await self._end(assignment, end_date)

    async def remove_by_ids(self, employee_id: str, project_id: str, end_date: date | None = None) -> None:
        await self._end(await self._repo.active_for(employee_id, project_id), end_date)

    async def list_for_project(self, project_id: str, include_inactive: bool = False) -> list[ProjectAssignmentOut]:
        project = await self._projects.get_by_id(project_id)
        if not project:
            raise NotFoundError("Project", project_id, code="PROJECT_NOT_FOUND")
        conditions = [ProjectAssignment.project_id == project_id]
        if not include_inactive:
            conditions.append(ProjectAssignment.is_active.is_(True))
        assignments = await self._repo.find(*conditions, order_by=ProjectAssignment.start_date)
        employees = await self._employees.get_many(a.employee_id for a in assignments)
        return [_assignment_out(a, project, employees.get(a.employee_id)) for a in assignments]

    async def list_for_employee(self, employee_id: str, include_inactive: bool = False) -> list[ProjectAssignmentOut]:
        employee = await self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id, code="EMPLOYEE_NOT_FOUND")
        conditions = [ProjectAssignment.employee_id == employee_id]
        if not include_inactive:
            conditions.append(ProjectAssignment.is_active.is_(True))
        assignments = await self._repo.find(*conditions, order_by=ProjectAssignment.start_date)
        projects = {
            p.id: p
            for p in await self._projects.find(Project.id.in_({a.project_id for a in assignments}))
        } if assignments else {}
        return [_assignment_out(a, projects.get(a.project_id), employee) for a in assignments]


# ---------------------------------------------------------------------------
# Time entries
# ---------------------------------------------------------------------------

class TimeEntryService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = TimeEntryRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)
        self._projects = ProjectRepository(session, tenant_id)
        self._cost_codes = CostCodeRepository(session, tenant_id)
        self._assignments = ProjectAssignmentRepository(session, tenant_id)

    async def _require_project(self, project_id: str) -> Project:
        project = await self._projects.get_by_id(project_id)
        if not project:
            raise NotFoundError("Project", project_id, code="PROJECT_NOT_FOUND")
        return project

    async def list_time_entries(
        self,
        pagination: PaginationParams,
        *,
        employee_id: str | None = None,
        project_id: str | None = None,
        status: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ):
        conditions = []
        if start_date:
            conditions.append(TimeEntry.work_date >= start_date)
        if end_date:
            conditions.append(TimeEntry.work_date <= end_date)
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"employee_id": employee_id, "project_id": project_id, "status": status},
            conditions=conditions,
        )

    async def list_by_project(self, project_id: str, pagination: PaginationParams, **filters):
        await self._require_project(project_id)
        return await self.list_time_entries(pagination, project_id=project_id, **filters)

    async def get_time_entry(self, entry_id: str) -> TimeEntry:
        entry = await self._repo.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Time entry", entry_id)
        return entry

    async def create_time_entry(self, data: TimeEntryCreate) -> TimeEntry:
        employee = await self._employees.get_by_id(data.employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Employee", data.employee_id, code="EMPLOYEE_NOT_FOUND")
        project = await self._require_project(data.project_id)
        if project.status in INACTIVE_PROJECT_STATUSES:
            raise BusinessRuleError(
                f"Cannot log time to a {project.status} project", code="PROJECT_INACTIVE"
            )
        if not await self._assignments.covering(data.employee_id, data.project_id, data.work_date):
            raise BusinessRuleError(
                "Employee is not assigned to this project on that date",
                code="NOT_ASSIGNED_TO_PROJECT",
            )
        cost_code = await self._cost_codes.get_by_id(data.cost_code_id)
        if not cost_code or not cost_code.is_active:
            raise NotFoundError("Cost code", data.cost_code_id, code="COSTCODE_NOT_FOUND")
        if await self._repo.duplicate_exists(
            data.work_date, data.employee_id, data.project_id, data.cost_code_id
        ):
            raise ConflictError(
                "A time entry already exists for this employee, project, cost code and date",
                code="DUPLICATE_ENTRY",
            )

        return await self._repo.create(
            work_date=data.work_date,
            employee_id=data.employee_id,
            project_id=data.project_id,
            cost_code_id=data.cost_code_id,
            regular_hours=data.regular_hours or Decimal("0"),
            overtime_hours=data.overtime_hours or Decimal("0"),
            doubletime_hours=data.doubletime_hours or Decimal("0"),
            description=data.description,
            status=_SUBMITTED,
        )

    async def _check_approver(self, approver_id: str, entry: TimeEntry) -> None:
        approver = await self._employees.get_by_id(approver_id)
        employee = await self._employees.get_by_id(entry.employee_id)
        if not can_approve(approver, employee):
            raise ForbiddenError(
                "Approver is not allowed to approve or reject this time entry",
                code="UNAUTHORIZED_APPROVER",
            )

    async def _apply_transition(self, entry: TimeEntry, data: TimeEntryUpdate) -> None:
        new_status = data.status
        if not can_transition(entry.status, new_status):
            raise BusinessRuleError(
                f"Cannot transition from {entry.status} to {new_status}", code="INVALID_TRANSITION"
            )
        if new_status in (_APPROVED, _REJECTED):
            if not data.approver_id:
                raise BusinessRuleError("approverId is required to approve or reject", code="MISSING_APPROVER")
            await self._check_approver(data.approver_id, entry)
            if new_status == _REJECTED and not (data.rejection_reason or "").strip():
                raise BusinessRuleError("Rejection reason is required", code="MISSING_REJECTION_REASON")

            entry.approved_by_id = data.approver_id
            entry.approved_at = datetime.now(timezone.utc)
            if new_status == _APPROVED:
                entry.approval_comments = data.approval_comments
                entry.rejection_reason = None
            else:
                entry.rejection_reason = data.rejection_reason
                entry.approval_comments = None
        entry.status = new_status

    async def update_time_entry(self, entry_id: str, data: TimeEntryUpdate) -> TimeEntry:
        entry = await self.get_time_entry(entry_id)
        previous = entry.status
        if data.status is not None:
            await self._apply_transition(entry, data)

        hours = data.model_dump(
            include={"regular_hours", "overtime_hours", "doubletime_hours"}, exclude_none=True
        )
        if hours:
            if entry.status not in _EDITABLE_STATUSES:
                raise BusinessRuleError(
                    "Cannot modify hours on approved or rejected time entries", code="INVALID_STATUS"
                )
            for field, value in hours.items():
                setattr(entry, field, value)
            if not 0 < entry.total_hours <= MAX_HOURS_PER_DAY:
                raise ValidationError(
                    f"Total hours must be greater than 0 and at most {MAX_HOURS_PER_DAY}"
                )
        if data.description is not None and entry.status in _EDITABLE_STATUSES:
            entry.description = data.description

        entry = await self._repo.save(entry)
        if entry.status != previous:
            logger.info("Time entry %s moved %s -> %s", entry.id, previous, entry.status)
        return entry

    async def approve_time_entry(self, entry_id: str, data: ApproveTimeEntryRequest) -> TimeEntry:
        entry = await self.get_time_entry(entry_id)
        if entry.status == _APPROVED:
            raise BusinessRuleError("Time entry is already approved", code="ALREADY_APPROVED")
        if entry.status == _DRAFT:
            raise BusinessRuleError(
                "Cannot approve a draft entry. It must be submitted first.", code="INVALID_STATUS"
            )
        if not await self._employees.get_by_id(data.approver_id):
            raise NotFoundError("Approver", data.approver_id, code="APPROVER_NOT_FOUND")
        await self._check_approver(data.approver_id, entry)

        entry.status = _APPROVED
        entry.approved_by_id = data.approver_id
        entry.approved_at = datetime.now(timezone.utc)
        entry.approval_comments = data.comments
        entry.rejection_reason = None
        entry = await self._repo.save(entry)
        logger.info("Time entry %s approved by %s", entry.id, data.approver_id)
        return entry

    async def reject_time_entry(self, entry_id: str, data: RejectTimeEntryRequest) -> TimeEntry:
        if not (data.reason or "").strip():
            raise BusinessRuleError("Rejection reason is required", code="REASON_REQUIRED")
        entry = await self.get_time_entry(entry_id)
        if entry.status == _DRAFT:
            raise BusinessRuleError(
                "Cannot reject a draft entry. It must be submitted first.", code="INVALID_STATUS"
            )
        if not await self._employees.get_by_id(data.reviewer_id):
            raise NotFoundError("Reviewer", data.reviewer_id, code="REVIEWER_NOT_FOUND")
        await self._check_approver(data.reviewer_id, entry)

        entry.status = _REJECTED
        entry.rejection_reason = data.reason
        entry.approved_by_id = None
        entry.approved_at = None
        entry.approval_comments = None
        entry = await self._repo.save(entry)
        logger.info("Time entry %s rejected by %s", entry.id, data.reviewer_id)
        return entry

    async def delete_time_entry(self, entry_id: str) -> None:
        entry = await self.get_time_entry(entry_id)
        if entry.status == _APPROVED:
            raise BusinessRuleError("Approved time entries cannot be deleted", code="INVALID_STATUS")
        await self._repo.soft_delete(entry_id)

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    async def cost_report(
        self,
        *,
        project_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        approved_only: bool = True,
    ) -> CostReportOut:
        if project_id:
            await self._require_project(project_id)
        rows = await self._repo.details(
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
            approved_only=approved_only,
            order_by=[Project.number, CostCode.code, TimeEntry.work_date],
        )
        calc = LaborCostCalculator()

        projects: list[ProjectCostOut] = []
        for (_, _), project_rows in groupby(rows, key=lambda r: (r[2].number, r[2].id)):
            project_rows = list(project_rows)
            project = project_rows[0][2]
            codes: list[CostCodeCostOut] = []
            for _, code_rows in groupby(project_rows, key=lambda r: r[3].id):
                code_rows = list(code_rows)
                cost_code = code_rows[0][3]
                cost = calc.total((e, emp.base_hourly_rate) for e, emp, _, _ in code_rows)
                codes.append(
                    CostCodeCostOut(
                        cost_code_id=cost_code.id,
                        cost_code=cost_code.code,
                        description=cost_code.description,
                        regular_hours=cost.regular_hours,
                        overtime_hours=cost.overtime_hours,
                        doubletime_hours=cost.doubletime_hours,
                        total_hours=cost.total_hours,
                        base_wage_cost=cost.base_wage_cost,
                        burden_cost=cost.burden_cost,
                        total_cost=cost.total_cost,
                    )
                )
            projects.append(
                ProjectCostOut(
                    project_id=project.id,
                    project_number=project.number,
                    project_name=project.name,
                    total_hours=dsum(c.total_hours for c in codes),
                    base_wage_cost=dsum(c.base_wage_cost for c in codes),
                    burden_cost=dsum(c.burden_cost for c in codes),
                    total_cost=dsum(c.total_cost for c in codes),
                    cost_codes=codes,
                )
            )

        return CostReportOut(
            start_date=start_date,
            end_date=end_date,
            approved_only=approved_only,
            burden_rate=float(calc.burden_rate),
            entry_count=len(rows),
            total_hours=dsum(p.total_hours for p in projects),
            base_wage_cost=dsum(p.base_wage_cost for p in projects),
            burden_cost=dsum(p.burden_cost for p in projects),
            total_cost=dsum(p.total_cost for p in projects),
            projects=projects,
        )

    async def export_vista(
        self, start_date: date, end_date: date, project_id: str | None = None
    ) -> vista_export.VistaExport:
        vista_export.validate_range(start_date, end_date)
        if project_id:
            await self._require_project(project_id)
        rows = await self._repo.details(
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
            approved_only=True,
            order_by=[Employee.employee_number, TimeEntry.work_date, Project.number, CostCode.code],
        )
        approvers = await self._employees.get_many(
            e.approved_by_id for e, *_ in rows if e.approved_by_id
        )
        export = vista_export.build_export(
            [
                vista_export.VistaRow(entry, employee, project, cost_code, approvers.get(entry.approved_by_id))
                for entry, employee, project, cost_code in rows
            ],
            start_date,
            end_date,
        )
        logger.info(
            "Vista export %s: %d rows, %s hours", export.file_name, export.row_count, export.total_hours
        )
        return export
