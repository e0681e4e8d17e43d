"""Project CRUD router, plus per-project labor statistics."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.project import ProjectStatus, ProjectType
from groundwork.schemas.project import ProjectCreate, ProjectOut, ProjectStatsOut, ProjectUpdate
from groundwork.services.project import ProjectService

router = APIRouter(prefix="/projects", tags=["Projects"])


def _svc(session: AsyncSession, tenant_id: str) -> ProjectService:
    return ProjectService(session, tenant_id)


@router.get("", response_model=ListResponse[ProjectOut])
async def list_projects(
    search: Optional[str] = Query(default=None, description="Matches name, number or client"),
    filter_status: Optional[ProjectStatus] = Query(default=None, alias="status"),
    project_type: Optional[ProjectType] = Query(default=None, alias="type"),
    project_manager_id: Optional[str] = Query(default=None, alias="projectManagerId"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """List projects (paginated, ordered by name unless ?sort is given)."""
    items, total = await _svc(session, tenant_id).list_projects(
        pagination,
        search=search,
        status=filter_status.value if filter_status else None,
        project_type=project_type.value if project_type else None,
        project_manager_id=project_manager_id,
    )
    return paginated([ProjectOut.model_validate(p) for p in items], total, pagination)


@router.post("", response_model=DataResponse[ProjectOut], status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Create a project. New projects start in `bidding`."""
    project = await _svc(session, tenant_id).create_project(body)
    return {"data": ProjectOut.model_validate(project)}


@router.get("/{project_id}", response_model=DataResponse[ProjectOut])
async def get_project(
    project_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    project = await _svc(session, tenant_id).get_project(project_id)
    return {"data": ProjectOut.model_validate(project)}


@router.get("/{project_id}/stats", response_model=DataResponse[ProjectStatsOut])
async def get_project_stats(
    project_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Hours, labor cost and entry counts for a project."""
    stats = await _svc(session, tenant_id).get_stats(project_id)
    return {"data": stats}


@router.put("/{project_id}", response_model=DataResponse[ProjectOut])
async def update_project(
    project_id: str,
    body: ProjectUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    project = await _svc(session, tenant_id).update_project(project_id, body)
    return {"data": ProjectOut.model_validate(project)}


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_project(project_id)
