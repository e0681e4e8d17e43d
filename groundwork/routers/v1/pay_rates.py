"""Pay rate router, including the rate lookup payroll uses."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.hr import PayRateCreate, PayRateOut, PayRateUpdate, ResolvedRateOut
from groundwork.services.hr import PayRateService

router = APIRouter(prefix="/pay-rates", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> PayRateService:
    return PayRateService(session, tenant_id)


@router.get("", response_model=ListResponse[PayRateOut])
async def list_pay_rates(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_pay_rates(pagination, employee_id=employee_id)
    return paginated([PayRateOut.model_validate(r) for r in items], total, pagination)


@router.get("/resolve", response_model=DataResponse[ResolvedRateOut])
async def resolve_pay_rate(
    employee_id: str = Query(alias="employeeId"),
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    as_of: Optional[date] = Query(default=None, alias="asOf"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """The hourly rate that applies to an employee's work on a project on a date."""
    resolved = await _svc(session, tenant_id).resolve_rate(employee_id, project_id, as_of)
    return {"data": resolved}


@router.get("/employee/{employee_id}/active", response_model=DataResponse[list[PayRateOut]])
async def list_active_pay_rates(
    employee_id: str,
    as_of: Optional[date] = Query(default=None, alias="asOf"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    rates = await _svc(session, tenant_id).active_rates(employee_id, as_of)
    return {"data": [PayRateOut.model_validate(r) for r in rates]}


@router.post("", response_model=DataResponse[PayRateOut], status_code=status.HTTP_201_CREATED)
async def create_pay_rate(
    body: PayRateCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    pay_rate = await _svc(session, tenant_id).create_pay_rate(body)
    return {"data": PayRateOut.model_validate(pay_rate)}


@router.get("/{pay_rate_id}", response_model=DataResponse[PayRateOut])
async def get_pay_rate(
    pay_rate_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    pay_rate = await _svc(session, tenant_id).get_pay_rate(pay_rate_id)
    return {"data": PayRateOut.model_validate(pay_rate)}


@router.put("/{pay_rate_id}", response_model=DataResponse[PayRateOut])
async def update_pay_rate(
    pay_rate_id: str,
    body: PayRateUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    pay_rate = await _svc(session, tenant_id).update_pay_rate(pay_rate_id, body)
    return {"data": PayRateOut.model_validate(pay_rate)}


@router.delete("/{pay_rate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pay_rate(
    pay_rate_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_pay_rate(pay_rate_id)
