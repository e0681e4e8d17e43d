"""Certification router — thin HTTP layer over CertificationService."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.hr import CertificationStatus
from groundwork.schemas.hr import CertificationCreate, CertificationOut, CertificationUpdate
from groundwork.services.hr import CertificationService

router = APIRouter(prefix="/certifications", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> CertificationService:
    return CertificationService(session, tenant_id)


@router.get("", response_model=ListResponse[CertificationOut])
async def list_certifications(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    filter_status: Optional[CertificationStatus] = Query(default=None, alias="status"),
    type_code: Optional[str] = Query(default=None, alias="typeCode"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_certifications(
        pagination,
        employee_id=employee_id,
        status=filter_status.value if filter_status else None,
        type_code=type_code,
    )
    return paginated([CertificationOut.model_validate(c) for c in items], total, pagination)


@router.get("/expiring", response_model=DataResponse[list[CertificationOut]])
async def list_expiring_certifications(
    days: int = Query(default=30, ge=0, le=365),
    include_expired: bool = Query(default=False, alias="includeExpired"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Certifications that expire within the next `days` days."""
    items = await _svc(session, tenant_id).list_expiring(days, include_expired)
    return {"data": [CertificationOut.model_validate(c) for c in items]}


@router.post("", response_model=DataResponse[CertificationOut], status_code=status.HTTP_201_CREATED)
async def create_certification(
    body: CertificationCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    certification = await _svc(session, tenant_id).create_certification(body)
    return {"data": CertificationOut.model_validate(certification)}


@router.get("/{certification_id}", response_model=DataResponse[CertificationOut])
async def get_certification(
    certification_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    certification = await _svc(session, tenant_id).get_certification(certification_id)
    return {"data": CertificationOut.model_validate(certification)}


@router.put("/{certification_id}", response_model=DataResponse[CertificationOut])
async def update_certification(
    certification_id: str,
    body: CertificationUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    certification = await _svc(session, tenant_id).update_certification(certification_id, body)
    return {"data": CertificationOut.model_validate(certification)}


@router.delete("/{certification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certification(
    certification_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_certification(certification_id)
