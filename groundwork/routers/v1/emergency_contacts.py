"""Emergency contact router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.employee_records import (
    EmergencyContactCreate,
    EmergencyContactOut,
    EmergencyContactUpdate,
)
from groundwork.services.employee_records import EmergencyContactService

router = APIRouter(prefix="/emergency-contacts", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> EmergencyContactService:
    return EmergencyContactService(session, tenant_id)


@router.get("", response_model=ListResponse[EmergencyContactOut])
async def list_contacts(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_contacts(
        pagination,
        employee_id=employee_id,
    )
    return paginated([EmergencyContactOut.model_validate(r) for r in items], total, pagination)


@router.post("", response_model=DataResponse[EmergencyContactOut], status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: EmergencyContactCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Add a contact. Without a priority it goes to the end of the call list."""
    contact = await _svc(session, tenant_id).create_contact(body)
    return {"data": EmergencyContactOut.model_validate(contact)}


@router.get("/{contact_id}", response_model=DataResponse[EmergencyContactOut])
async def get_contact(
    contact_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    contact = await _svc(session, tenant_id).get_contact(contact_id)
    return {"data": EmergencyContactOut.model_validate(contact)}


@router.put("/{contact_id}", response_model=DataResponse[EmergencyContactOut])
async def update_contact(
    contact_id: str,
    body: EmergencyContactUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    contact = await _svc(session, tenant_id).update_contact(contact_id, body)
    return {"data": EmergencyContactOut.model_validate(contact)}


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_contact(contact_id)
