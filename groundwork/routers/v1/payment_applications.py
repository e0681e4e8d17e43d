"""Payment application router — thin HTTP layer over PaymentApplicationService."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.contracts import PaymentApplicationStatus
from groundwork.schemas.contracts import (
    PaymentApplicationCreate,
    PaymentApplicationOut,
    PaymentApplicationUpdate,
)
from groundwork.services.contracts import PaymentApplicationService

router = APIRouter(prefix="/payment-applications", tags=["Contracts"])


def _svc(session: AsyncSession, tenant_id: str) -> PaymentApplicationService:
    return PaymentApplicationService(session, tenant_id)


@router.get("", response_model=ListResponse[PaymentApplicationOut])
async def list_payment_applications(
    subcontract_id: Optional[str] = Query(default=None, alias="subcontractId"),
    filter_status: Optional[PaymentApplicationStatus] = Query(default=None, alias="status"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_payment_applications(
        pagination,
        subcontract_id=subcontract_id,
        status=filter_status.value if filter_status else None,
    )
    return paginated([PaymentApplicationOut.model_validate(a) for a in items], total, pagination)


@router.post(
    "", response_model=DataResponse[PaymentApplicationOut], status_code=status.HTTP_201_CREATED
)
async def create_payment_application(
    body: PaymentApplicationCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Create the next application for a subcontract; totals roll forward from the last one."""
    app = await _svc(session, tenant_id).create_payment_application(body)
    return {"data": PaymentApplicationOut.model_validate(app)}


@router.get("/{application_id}", response_model=DataResponse[PaymentApplicationOut])
async def get_payment_application(
    application_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    app = await _svc(session, tenant_id).get_payment_application(application_id)
    return {"data": PaymentApplicationOut.model_validate(app)}


@router.put("/{application_id}", response_model=DataResponse[PaymentApplicationOut])
async def update_payment_application(
    application_id: str,
    body: PaymentApplicationUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    app = await _svc(session, tenant_id).update_payment_application(application_id, body)
    return {"data": PaymentApplicationOut.model_validate(app)}


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment_application(
    application_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_payment_application(application_id)
