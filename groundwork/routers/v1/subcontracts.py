"""Subcontract router — thin HTTP layer over SubcontractService."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.contracts import SubcontractStatus
from groundwork.schemas.contracts import SubcontractCreate, SubcontractOut, SubcontractUpdate
from groundwork.services.contracts import SubcontractService

router = APIRouter(prefix="/subcontracts", tags=["Contracts"])


def _svc(session: AsyncSession, tenant_id: str) -> SubcontractService:
    return SubcontractService(session, tenant_id)


@router.get("", response_model=ListResponse[SubcontractOut])
async def list_subcontracts(
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    filter_status: Optional[SubcontractStatus] = Query(default=None, alias="status"),
    search: Optional[str] = Query(default=None, description="Matches number, subcontractor or scope"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_subcontracts(
        pagination,
        project_id=project_id,
        status=filter_status.value if filter_status else None,
        search=search,
    )
    return paginated([SubcontractOut.model_validate(s) for s in items], total, pagination)


@router.post("", response_model=DataResponse[SubcontractOut], status_code=status.HTTP_201_CREATED)
async def create_subcontract(
    body: SubcontractCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    subcontract = await _svc(session, tenant_id).create_subcontract(body)
    return {"data": SubcontractOut.model_validate(subcontract)}


@router.get("/{subcontract_id}", response_model=DataResponse[SubcontractOut])
async def get_subcontract(
    subcontract_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    subcontract = await _svc(session, tenant_id).get_subcontract(subcontract_id)
    return {"data": SubcontractOut.model_validate(subcontract)}


@router.put("/{subcontract_id}", response_model=DataResponse[SubcontractOut])
async def update_subcontract(
    subcontract_id: str,
    body: SubcontractUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    subcontract = await _svc(session, tenant_id).update_subcontract(subcontract_id, body)
    return {"data": SubcontractOut.model_validate(subcontract)}


@router.delete("/{subcontract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subcontract(
    subcontract_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_subcontract(subcontract_id)
