"""Payroll batch router — create, calculate, approve, post and void batches."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.payroll import PayrollBatchStatus
from groundwork.schemas.payroll import (
    PayrollActionRequest,
    PayrollBatchCreate,
    PayrollBatchOut,
    PayrollBatchSummaryOut,
)
from groundwork.services.payroll import PayrollBatchService

router = APIRouter(prefix="/payroll-batches", tags=["Payroll"])


def _svc(session: AsyncSession, tenant_id: str) -> PayrollBatchService:
    return PayrollBatchService(session, tenant_id)


def _actor(body: Optional[PayrollActionRequest]) -> Optional[str]:
    return body.performed_by if body else None


@router.get("", response_model=ListResponse[PayrollBatchSummaryOut])
async def list_payroll_batches(
    pay_period_id: Optional[str] = Query(default=None, alias="payPeriodId"),
    filter_status: Optional[PayrollBatchStatus] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_batches(
        pagination,
        pay_period_id=pay_period_id,
        status=filter_status.value if filter_status else None,
    )
    return paginated([PayrollBatchSummaryOut.model_validate(b) for b in items], total, pagination)


@router.post("", response_model=DataResponse[PayrollBatchOut], status_code=status.HTTP_201_CREATED)
async def create_payroll_batch(
    body: PayrollBatchCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    batch = await _svc(session, tenant_id).create_batch(body)
    return {"data": PayrollBatchOut.model_validate(batch)}


@router.get("/{batch_id}", response_model=DataResponse[PayrollBatchOut])
async def get_payroll_batch(
    batch_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """A batch with its per-employee entries."""
    batch = await _svc(session, tenant_id).get_batch(batch_id)
    return {"data": PayrollBatchOut.model_validate(batch)}


@router.post("/{batch_id}/calculate", response_model=DataResponse[PayrollBatchOut])
async def calculate_payroll_batch(
    batch_id: str,
    body: Optional[PayrollActionRequest] = Body(default=None),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """(Re)build the batch's entries from approved time in its pay period."""
    batch = await _svc(session, tenant_id).calculate_batch(batch_id, _actor(body))
    return {"data": PayrollBatchOut.model_validate(batch)}


@router.post("/{batch_id}/approve", response_model=DataResponse[PayrollBatchOut])
async def approve_payroll_batch(
    batch_id: str,
    body: Optional[PayrollActionRequest] = Body(default=None),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    batch = await _svc(session, tenant_id).approve_batch(batch_id, _actor(body))
    return {"data": PayrollBatchOut.model_validate(batch)}


@router.post("/{batch_id}/post", response_model=DataResponse[PayrollBatchOut])
async def post_payroll_batch(
    batch_id: str,
    body: Optional[PayrollActionRequest] = Body(default=None),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    batch = await _svc(session, tenant_id).post_batch(batch_id, _actor(body))
    return {"data": PayrollBatchOut.model_validate(batch)}


@router.post("/{batch_id}/void", response_model=DataResponse[PayrollBatchOut])
async def void_payroll_batch(
    batch_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    batch = await _svc(session, tenant_id).void_batch(batch_id)
    return {"data": PayrollBatchOut.model_validate(batch)}


@router.delete("/{batch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payroll_batch(
    batch_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_batch(batch_id)
