"""Employment episode router: hire-to-separation stretches of an employee's history."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.hr import (
    EmploymentEpisodeCreate,
    EmploymentEpisodeOut,
    EmploymentEpisodeUpdate,
)
from groundwork.services.employee_records import EmploymentEpisodeService

router = APIRouter(prefix="/employment-episodes", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> EmploymentEpisodeService:
    return EmploymentEpisodeService(session, tenant_id)


@router.get("", response_model=ListResponse[EmploymentEpisodeOut])
async def list_episodes(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_episodes(
        pagination,
        employee_id=employee_id,
    )
    return paginated([EmploymentEpisodeOut.model_validate(r) for r in items], total, pagination)


@router.post("", response_model=DataResponse[EmploymentEpisodeOut], status_code=status.HTTP_201_CREATED)
async def create_episode(
    body: EmploymentEpisodeCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Open a new episode. Fails while the employee still has an open one."""
    episode = await _svc(session, tenant_id).create_episode(body)
    return {"data": EmploymentEpisodeOut.model_validate(episode)}


@router.get("/{episode_id}", response_model=DataResponse[EmploymentEpisodeOut])
async def get_episode(
    episode_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    episode = await _svc(session, tenant_id).get_episode(episode_id)
    return {"data": EmploymentEpisodeOut.model_validate(episode)}


@router.put("/{episode_id}", response_model=DataResponse[EmploymentEpisodeOut])
async def update_episode(
    episode_id: str,
    body: EmploymentEpisodeUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    episode = await _svc(session, tenant_id).update_episode(episode_id, body)
    return {"data": EmploymentEpisodeOut.model_validate(episode)}


@router.delete("/{episode_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_episode(
    episode_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_episode(episode_id)
