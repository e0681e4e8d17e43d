"""Project service: CRUD plus the labor statistics shown on the project page."""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import ConflictError, NotFoundError, ValidationError
from groundwork.core.pagination import PaginationParams
from groundwork.domain.project import Project
from groundwork.domain.time_tracking import ProjectAssignment, TimeEntryStatus
from groundwork.repositories.project import ProjectRepository
from groundwork.repositories.time_tracking import ProjectAssignmentRepository, TimeEntryRepository
from groundwork.schemas.project import ProjectCreate, ProjectStatsOut, ProjectUpdate
from groundwork.services.labor_cost import LaborCostCalculator

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = ProjectRepository(session, tenant_id)
        self._entries = TimeEntryRepository(session, tenant_id)
        self._assignments = ProjectAssignmentRepository(session, tenant_id)

    async def list_projects(
        self,
        pagination: PaginationParams,
        *,
        search: str | None = None,
        status: str | None = None,
        project_type: str | None = None,
        project_manager_id: str | None = None,
    ):
        conditions = [ProjectRepository.search_condition(search)] if search else None
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order if pagination.sort else None,
            filters={"status": status, "type": project_type, "project_manager_id": project_manager_id},
            conditions=conditions,
        )

    async def get_project(self, project_id: str) -> Project:
        project = await self._repo.get_by_id(project_id)
        if not project:
            raise NotFoundError("Project", project_id)
        return project

    async def create_project(self, data: ProjectCreate) -> Project:
        if await self._repo.number_taken(data.number):
            raise ConflictError(
                f"Project number '{data.number}' already exists", code="DUPLICATE_NUMBER"
            )
        project = await self._repo.create(**data.model_dump(exclude_none=True))
        logger.info("Created project %s (%s)", project.number, project.id)
        return project

    async def update_project(self, project_id: str, data: ProjectUpdate) -> Project:
        project = await self.get_project(project_id)
        changes = self._repo.changes(data)
        start = changes.get("start_date", project.start_date)
        completion = changes.get("estimated_completion_date", project.estimated_completion_date)
        if start and completion and completion <= start:
            raise ValidationError("estimatedCompletionDate must be after startDate")
        if changes.get("number") and await self._repo.number_taken(changes["number"], exclude_id=project_id):
            raise ConflictError(
                f"Project number '{changes['number']}' already exists", code="DUPLICATE_NUMBER"
            )
        return await self._repo.update(project_id, **changes)  # type: ignore[return-value]

    async def delete_project(self, project_id: str) -> None:
        deleted = await self._repo.soft_delete(project_id)
        if not deleted:
            raise NotFoundError("Project", project_id)

    async def get_stats(self, project_id: str) -> ProjectStatsOut:
        project = await self.get_project(project_id)
        rows = await self._entries.details(project_id=project_id)
        entries = [entry for entry, *_ in rows]

        approved = [(e, emp.base_hourly_rate) for e, emp, _, _ in rows if e.status == TimeEntryStatus.APPROVED.value]
        labor = LaborCostCalculator().total(approved)

        assignments = await self._assignments.find(
            ProjectAssignment.project_id == project_id,
            ProjectAssignment.is_active.is_(True),
        )
        dates = [e.work_date for e in entries]

        return ProjectStatsOut(
            project_id=project.id,
            project_name=project.name,
            project_number=project.number,
            regular_hours=sum((Decimal(e.regular_hours) for e in entries), Decimal(0)),
            overtime_hours=sum((Decimal(e.overtime_hours) for e in entries), Decimal(0)),
            doubletime_hours=sum((Decimal(e.doubletime_hours) for e in entries), Decimal(0)),
            total_hours=sum((e.total_hours for e in entries), Decimal(0)),
            total_labor_cost=labor.base_wage_cost,
            time_entry_count=len(entries),
            approved_entry_count=len(approved),
            pending_entry_count=sum(1 for e in entries if e.status == TimeEntryStatus.SUBMITTED.value),
            assigned_employee_count=len({a.employee_id for a in assignments}),
            first_entry_date=min(dates) if dates else None,
            last_entry_date=max(dates) if dates else None,
        )
