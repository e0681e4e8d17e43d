"""Cost code router — thin HTTP layer over CostCodeService."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.cost_code import CostType
from groundwork.schemas.cost_code import CostCodeCreate, CostCodeOut, CostCodeUpdate
from groundwork.services.cost_code import CostCodeService

router = APIRouter(prefix="/cost-codes", tags=["Time Tracking"])


def _svc(session: AsyncSession, tenant_id: str) -> CostCodeService:
    return CostCodeService(session, tenant_id)


@router.get("", response_model=ListResponse[CostCodeOut])
async def list_cost_codes(
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    cost_type: Optional[CostType] = Query(default=None, alias="costType"),
    search: Optional[str] = Query(default=None, description="Matches code or description"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_cost_codes(
        pagination,
        is_active=is_active,
        cost_type=cost_type.value if cost_type else None,
        search=search,
    )
    return paginated([CostCodeOut.model_validate(c) for c in items], total, pagination)


@router.post("", response_model=DataResponse[CostCodeOut], status_code=status.HTTP_201_CREATED)
async def create_cost_code(
    body: CostCodeCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    cost_code = await _svc(session, tenant_id).create_cost_code(body)
    return {"data": CostCodeOut.model_validate(cost_code)}


@router.get("/{cost_code_id}", response_model=DataResponse[CostCodeOut])
async def get_cost_code(
    cost_code_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    cost_code = await _svc(session, tenant_id).get_cost_code(cost_code_id)
    return {"data": CostCodeOut.model_validate(cost_code)}


@router.put("/{cost_code_id}", response_model=DataResponse[CostCodeOut])
async def update_cost_code(
    cost_code_id: str,
    body: CostCodeUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    cost_code = await _svc(session, tenant_id).update_cost_code(cost_code_id, body)
    return {"data": CostCodeOut.model_validate(cost_code)}


@router.delete("/{cost_code_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cost_code(
    cost_code_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_cost_code(cost_code_id)
