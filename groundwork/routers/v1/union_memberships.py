"""Union membership router."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.employee_records import (
    UnionMembershipCreate,
    UnionMembershipOut,
    UnionMembershipUpdate,
)
from groundwork.services.employee_records import UnionMembershipService

router = APIRouter(prefix="/union-memberships", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> UnionMembershipService:
    return UnionMembershipService(session, tenant_id)


@router.get("", response_model=ListResponse[UnionMembershipOut])
async def list_memberships(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    union_local: Optional[str] = Query(default=None, alias="unionLocal"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_memberships(
        pagination,
        employee_id=employee_id,
        union_local=union_local,
    )
    return paginated([UnionMembershipOut.model_validate(r) for r in items], total, pagination)


@router.post("", response_model=DataResponse[UnionMembershipOut], status_code=status.HTTP_201_CREATED)
async def create_membership(
    body: UnionMembershipCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    membership = await _svc(session, tenant_id).create_membership(body)
    return {"data": UnionMembershipOut.model_validate(membership)}


@router.get("/{membership_id}", response_model=DataResponse[UnionMembershipOut])
async def get_membership(
    membership_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    membership = await _svc(session, tenant_id).get_membership(membership_id)
    return {"data": UnionMembershipOut.model_validate(membership)}


@router.put("/{membership_id}", response_model=DataResponse[UnionMembershipOut])
async def update_membership(
    membership_id: str,
    body: UnionMembershipUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    membership = await _svc(session, tenant_id).update_membership(membership_id, body)
    return {"data": UnionMembershipOut.model_validate(membership)}


@router.delete("/{membership_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_membership(
    membership_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_membership(membership_id)
