"""Project assignment router — which employees may log time to which projects."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.response import DataResponse
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.time_tracking import ProjectAssignmentCreate, ProjectAssignmentOut
from groundwork.services.time_tracking import ProjectAssignmentService

router = APIRouter(prefix="/project-assignments", tags=["Time Tracking"])


def _svc(session: AsyncSession, tenant_id: str) -> ProjectAssignmentService:
    return ProjectAssignmentService(session, tenant_id)


@router.post("", response_model=DataResponse[ProjectAssignmentOut], status_code=status.HTTP_201_CREATED)
async def assign_employee(
    body: ProjectAssignmentCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    assignment = await _svc(session, tenant_id).assign(body)
    return {"data": assignment}


@router.get("/project/{project_id}", response_model=DataResponse[list[ProjectAssignmentOut]])
async def list_project_assignments(
    project_id: str,
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    assignments = await _svc(session, tenant_id).list_for_project(project_id, include_inactive)
    return {"data": assignments}


@router.delete(
    "/employee/{employee_id}/project/{project_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_employee_from_project(
    employee_id: str,
    project_id: str,
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """End the employee's active assignment to the project (defaults to today)."""
    await _svc(session, tenant_id).remove_by_ids(employee_id, project_id, end_date)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_assignment(
    assignment_id: str,
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).remove(assignment_id, end_date)
