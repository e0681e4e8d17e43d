"""Repositories for project assignments and time entries, plus the joined reads reports need."""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import or_, select, update

from groundwork.domain.cost_code import CostCode
from groundwork.domain.hr import Employee
from groundwork.domain.project import Project
from groundwork.domain.time_tracking import ProjectAssignment, TimeEntry, TimeEntryStatus
from groundwork.repositories.base import BaseRepository


class ProjectAssignmentRepository(BaseRepository[ProjectAssignment]):
    model = ProjectAssignment
    default_sort = "start_date"

    async def active_for(self, employee_id: str, project_id: str) -> ProjectAssignment | None:
        return await self.first(
            ProjectAssignment.employee_id == employee_id,
            ProjectAssignment.project_id == project_id,
            ProjectAssignment.is_active.is_(True),
        )

    async def covering(self, employee_id: str, project_id: str, work_date: date) -> ProjectAssignment | None:
        """The active assignment whose date range contains work_date."""
        candidates = await self.find(
            ProjectAssignment.employee_id == employee_id,
            ProjectAssignment.project_id == project_id,
            ProjectAssignment.is_active.is_(True),
        )
        return next((a for a in candidates if a.covers(work_date)), None)


class TimeEntryRepository(BaseRepository[TimeEntry]):
    model = TimeEntry
    default_sort = "work_date"

    async def duplicate_exists(
        self, work_date: date, employee_id: str, project_id: str, cost_code_id: str
    ) -> bool:
        return await self.exists(
            TimeEntry.work_date == work_date,
            TimeEntry.employee_id == employee_id,
            TimeEntry.project_id == project_id,
            TimeEntry.cost_code_id == cost_code_id,
        )

    async def payable(self, start_date: date, end_date: date, batch_id: str) -> list[TimeEntry]:
        """Approved entries in the window that no other live payroll batch has paid."""
        return await self.find(
            TimeEntry.status == TimeEntryStatus.APPROVED.value,
            TimeEntry.work_date >= start_date,
            TimeEntry.work_date <= end_date,
            or_(TimeEntry.payroll_batch_id.is_(None), TimeEntry.payroll_batch_id == batch_id),
        )

    async def release(self, batch_id: str) -> None:
        """Free every entry a payroll batch had claimed."""
        await self._session.execute(
            update(TimeEntry)
            .where(TimeEntry.tenant_id == self._tenant_id)
            .where(TimeEntry.payroll_batch_id == batch_id)
            .values(payroll_batch_id=None)
        )

    def _detail_query(self):
        """Time entries joined with their employee, project and cost code."""
        return (
            select(TimeEntry, Employee, Project, CostCode)
            .join(Employee, Employee.id == TimeEntry.employee_id)
            .join(Project, Project.id == TimeEntry.project_id)
            .join(CostCode, CostCode.id == TimeEntry.cost_code_id)
            .where(TimeEntry.tenant_id == self._tenant_id)
            .where(TimeEntry.deleted_at.is_(None))
        )

    async def details(
        self,
        *,
        project_id: str | None = None,
        employee_id: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        approved_only: bool = False,
        order_by: Any = None,
    ) -> list[tuple[TimeEntry, Employee, Project, CostCode]]:
        q = self._detail_query()
        if project_id:
            q = q.where(TimeEntry.project_id == project_id)
        if employee_id:
            q = q.where(TimeEntry.employee_id == employee_id)
        if start_date:
            q = q.where(TimeEntry.work_date >= start_date)
        if end_date:
            q = q.where(TimeEntry.work_date <= end_date)
        if approved_only:
            q = q.where(TimeEntry.status == TimeEntryStatus.APPROVED.value)
        if order_by is not None:
            q = q.order_by(*order_by)
        rows = (await self._session.execute(q)).all()
        return [tuple(row) for row in rows]
