"""Form I-9 router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.domain.compliance import I9Status
from groundwork.db.base import get_db
from groundwork.schemas.compliance import (
    I9RecordCreate,
    I9RecordOut,
    I9RecordUpdate,
)
from groundwork.services.compliance import I9RecordService

router = APIRouter(prefix="/i9-records", tags=["Compliance"])


def _svc(session: AsyncSession, tenant_id: str) -> I9RecordService:
    return I9RecordService(session, tenant_id)


@router.get("", response_model=ListResponse[I9RecordOut])
async def list_records(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    filter_status: Optional[I9Status] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_records(
        pagination,
        employee_id=employee_id,
        status=filter_status.value if filter_status else None,
    )
    return paginated([I9RecordOut.model_validate(r) for r in items], total, pagination)


@router.get("/reverification-needed", response_model=DataResponse[list[I9RecordOut]])
async def list_reverification_needed(
    days: int = Query(default=90, ge=0, le=365),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """I-9s whose work authorization expires within `days`, soonest first."""
    records = await _svc(session, tenant_id).needing_reverification(days)
    return {"data": [I9RecordOut.model_validate(r) for r in records]}


@router.post("", response_model=DataResponse[I9RecordOut], status_code=status.HTTP_201_CREATED)
async def create_record(
    body: I9RecordCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Record section 1. An employee has at most one I-9."""
    record = await _svc(session, tenant_id).create_record(body)
    return {"data": I9RecordOut.model_validate(record)}


@router.get("/{record_id}", response_model=DataResponse[I9RecordOut])
async def get_record(
    record_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    record = await _svc(session, tenant_id).get_record(record_id)
    return {"data": I9RecordOut.model_validate(record)}


@router.put("/{record_id}", response_model=DataResponse[I9RecordOut])
async def update_record(
    record_id: str,
    body: I9RecordUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    record = await _svc(session, tenant_id).update_record(record_id, body)
    return {"data": I9RecordOut.model_validate(record)}


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    record_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_record(record_id)
