"""RFI router, nested under the owning project."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.rfi import RfiStatus
from groundwork.schemas.rfi import RfiCreate, RfiOut, RfiUpdate
from groundwork.services.rfi import RfiService

router = APIRouter(prefix="/projects/{project_id}/rfis", tags=["RFIs"])


def _svc(session: AsyncSession, tenant_id: str) -> RfiService:
    return RfiService(session, tenant_id)


@router.get("", response_model=ListResponse[RfiOut])
async def list_rfis(
    project_id: str,
    filter_status: Optional[RfiStatus] = Query(default=None, alias="status"),
    search: Optional[str] = Query(default=None, description="Matches subject or question"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """List a project's RFIs, newest number first."""
    items, total = await _svc(session, tenant_id).list_rfis(
        project_id,
        pagination,
        status=filter_status.value if filter_status else None,
        search=search,
    )
    return paginated([RfiOut.model_validate(r) for r in items], total, pagination)


@router.post("", response_model=DataResponse[RfiOut], status_code=status.HTTP_201_CREATED)
async def create_rfi(
    project_id: str,
    body: RfiCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    rfi = await _svc(session, tenant_id).create_rfi(project_id, body)
    return {"data": RfiOut.model_validate(rfi)}


@router.get("/{rfi_id}", response_model=DataResponse[RfiOut])
async def get_rfi(
    project_id: str,
    rfi_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    rfi = await _svc(session, tenant_id).get_rfi(project_id, rfi_id)
    return {"data": RfiOut.model_validate(rfi)}


@router.put("/{rfi_id}", response_model=DataResponse[RfiOut])
async def update_rfi(
    project_id: str,
    rfi_id: str,
    body: RfiUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Update an RFI. Moving to answered or closed stamps the matching timestamp."""
    rfi = await _svc(session, tenant_id).update_rfi(project_id, rfi_id, body)
    return {"data": RfiOut.model_validate(rfi)}


@router.delete("/{rfi_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rfi(
    project_id: str,
    rfi_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_rfi(project_id, rfi_id)
