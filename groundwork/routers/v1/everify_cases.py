"""E-Verify case router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.domain.compliance import EVerifyStatus
from groundwork.db.base import get_db
from groundwork.schemas.compliance import (
    EVerifyCaseCreate,
    EVerifyCaseOut,
    EVerifyCaseUpdate,
)
from groundwork.services.compliance import EVerifyCaseService

router = APIRouter(prefix="/everify-cases", tags=["Compliance"])


def _svc(session: AsyncSession, tenant_id: str) -> EVerifyCaseService:
    return EVerifyCaseService(session, tenant_id)


@router.get("", response_model=ListResponse[EVerifyCaseOut])
async def list_cases(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    filter_status: Optional[EVerifyStatus] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_cases(
        pagination,
        employee_id=employee_id,
        status=filter_status.value if filter_status else None,
    )
    return paginated([EVerifyCaseOut.model_validate(r) for r in items], total, pagination)


@router.get("/needs-action", response_model=DataResponse[list[EVerifyCaseOut]])
async def list_cases_needing_action(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Tentative nonconfirmations still inside their contest window."""
    cases = await _svc(session, tenant_id).needing_action()
    return {"data": [EVerifyCaseOut.model_validate(c) for c in cases]}


@router.post("", response_model=DataResponse[EVerifyCaseOut], status_code=status.HTTP_201_CREATED)
async def create_case(
    body: EVerifyCaseCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    case = await _svc(session, tenant_id).create_case(body)
    return {"data": EVerifyCaseOut.model_validate(case)}


@router.get("/{case_id}", response_model=DataResponse[EVerifyCaseOut])
async def get_case(
    case_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    case = await _svc(session, tenant_id).get_case(case_id)
    return {"data": EVerifyCaseOut.model_validate(case)}


@router.put("/{case_id}", response_model=DataResponse[EVerifyCaseOut])
async def update_case(
    case_id: str,
    body: EVerifyCaseUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    case = await _svc(session, tenant_id).update_case(case_id, body)
    return {"data": EVerifyCaseOut.model_validate(case)}


@router.delete("/{case_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_case(
    case_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_case(case_id)
