"""Payroll deduction router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.employee_records import (
    DeductionCreate,
    DeductionOut,
    DeductionUpdate,
)
from groundwork.services.employee_records import DeductionService

router = APIRouter(prefix="/deductions", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> DeductionService:
    return DeductionService(session, tenant_id)


@router.get("", response_model=ListResponse[DeductionOut])
async def list_deductions(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    deduction_code: Optional[str] = Query(default=None, alias="deductionCode"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_deductions(
        pagination,
        employee_id=employee_id,
        deduction_code=deduction_code,
    )
    return paginated([DeductionOut.model_validate(r) for r in items], total, pagination)


@router.post("", response_model=DataResponse[DeductionOut], status_code=status.HTTP_201_CREATED)
async def create_deduction(
    body: DeductionCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    deduction = await _svc(session, tenant_id).create_deduction(body)
    return {"data": DeductionOut.model_validate(deduction)}


@router.get("/{deduction_id}", response_model=DataResponse[DeductionOut])
async def get_deduction(
    deduction_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    deduction = await _svc(session, tenant_id).get_deduction(deduction_id)
    return {"data": DeductionOut.model_validate(deduction)}


@router.put("/{deduction_id}", response_model=DataResponse[DeductionOut])
async def update_deduction(
    deduction_id: str,
    body: DeductionUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    deduction = await _svc(session, tenant_id).update_deduction(deduction_id, body)
    return {"data": DeductionOut.model_validate(deduction)}


@router.delete("/{deduction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_deduction(
    deduction_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_deduction(deduction_id)
