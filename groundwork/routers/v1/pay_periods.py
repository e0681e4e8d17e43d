"""Pay period router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.payroll import PayPeriodStatus
from groundwork.schemas.payroll import ClosePayPeriodRequest, PayPeriodCreate, PayPeriodOut
from groundwork.services.payroll import PayPeriodService

router = APIRouter(prefix="/pay-periods", tags=["Payroll"])


def _svc(session: AsyncSession, tenant_id: str) -> PayPeriodService:
    return PayPeriodService(session, tenant_id)


@router.get("", response_model=ListResponse[PayPeriodOut])
async def list_pay_periods(
    filter_status: Optional[PayPeriodStatus] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_pay_periods(
        pagination, status=filter_status.value if filter_status else None
    )
    return paginated([PayPeriodOut.model_validate(p) for p in items], total, pagination)


@router.post("", response_model=DataResponse[PayPeriodOut], status_code=status.HTTP_201_CREATED)
async def create_pay_period(
    body: PayPeriodCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    period = await _svc(session, tenant_id).create_pay_period(body)
    return {"data": PayPeriodOut.model_validate(period)}


@router.get("/current", response_model=DataResponse[PayPeriodOut])
async def get_current_pay_period(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """The open period containing today, else the most recent open period."""
    period = await _svc(session, tenant_id).get_current()
    return {"data": PayPeriodOut.model_validate(period)}


@router.get("/{period_id}", response_model=DataResponse[PayPeriodOut])
async def get_pay_period(
    period_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    period = await _svc(session, tenant_id).get_pay_period(period_id)
    return {"data": PayPeriodOut.model_validate(period)}


@router.post("/{period_id}/close", response_model=DataResponse[PayPeriodOut])
async def close_pay_period(
    period_id: str,
    body: Optional[ClosePayPeriodRequest] = Body(default=None),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Close the period. Every batch in it must be posted or voided."""
    period = await _svc(session, tenant_id).close_pay_period(
        period_id, closed_by=body.closed_by if body else None
    )
    return {"data": PayPeriodOut.model_validate(period)}
