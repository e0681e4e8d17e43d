"""Tenant provisioning router. Not tenant-scoped: no tenant header is required here."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.db.base import get_db
from groundwork.schemas.tenant import TenantCreate, TenantOut
from groundwork.services.tenant import TenantService

router = APIRouter(prefix="/tenants", tags=["Tenants"])


@router.get("", response_model=ListResponse[TenantOut])
async def list_tenants(
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
):
    items, total = await TenantService(session).list_tenants(pagination)
    return paginated([TenantOut.model_validate(t) for t in items], total, pagination)


@router.post("", response_model=DataResponse[TenantOut], status_code=status.HTTP_201_CREATED)
async def create_tenant(
    body: TenantCreate,
    session: AsyncSession = Depends(get_db),
):
    """Create a tenant. The slug is derived from the name and must be unique."""
    tenant = await TenantService(session).create_tenant(body)
    return {"data": TenantOut.model_validate(tenant)}


@router.get("/{tenant_id}", response_model=DataResponse[TenantOut])
async def get_tenant(
    tenant_id: str,
    session: AsyncSession = Depends(get_db),
):
    tenant = await TenantService(session).get_tenant(tenant_id)
    return {"data": TenantOut.model_validate(tenant)}
