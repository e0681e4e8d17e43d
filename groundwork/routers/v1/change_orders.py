"""Change order router — thin HTTP layer over ChangeOrderService."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.contracts import ChangeOrderStatus
from groundwork.schemas.contracts import ChangeOrderCreate, ChangeOrderOut, ChangeOrderUpdate
from groundwork.services.contracts import ChangeOrderService

router = APIRouter(prefix="/change-orders", tags=["Contracts"])


def _svc(session: AsyncSession, tenant_id: str) -> ChangeOrderService:
    return ChangeOrderService(session, tenant_id)


@router.get("", response_model=ListResponse[ChangeOrderOut])
async def list_change_orders(
    subcontract_id: Optional[str] = Query(default=None, alias="subcontractId"),
    filter_status: Optional[ChangeOrderStatus] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_change_orders(
        pagination,
        subcontract_id=subcontract_id,
        status=filter_status.value if filter_status else None,
    )
    return paginated([ChangeOrderOut.model_validate(c) for c in items], total, pagination)


@router.post("", response_model=DataResponse[ChangeOrderOut], status_code=status.HTTP_201_CREATED)
async def create_change_order(
    body: ChangeOrderCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Create a change order. It starts `pending`, submitted today."""
    change_order = await _svc(session, tenant_id).create_change_order(body)
    return {"data": ChangeOrderOut.model_validate(change_order)}


@router.get("/{change_order_id}", response_model=DataResponse[ChangeOrderOut])
async def get_change_order(
    change_order_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    change_order = await _svc(session, tenant_id).get_change_order(change_order_id)
    return {"data": ChangeOrderOut.model_validate(change_order)}


@router.put("/{change_order_id}", response_model=DataResponse[ChangeOrderOut])
async def update_change_order(
    change_order_id: str,
    body: ChangeOrderUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Update a change order. Approving it adds its amount to the subcontract value."""
    change_order = await _svc(session, tenant_id).update_change_order(change_order_id, body)
    return {"data": ChangeOrderOut.model_validate(change_order)}


@router.delete("/{change_order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_change_order(
    change_order_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_change_order(change_order_id)
