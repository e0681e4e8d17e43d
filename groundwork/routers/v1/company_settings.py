"""Company settings router: the tenant's profile and preferences."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.response import DataResponse
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.tenant import CompanySettingsOut, CompanySettingsUpdate
from groundwork.services.tenant import CompanySettingsService

router = APIRouter(prefix="/company-settings", tags=["Admin"])


@router.get("", response_model=DataResponse[CompanySettingsOut])
async def get_company_settings(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Saved settings, or the defaults if the company has not saved any yet."""
    return {"data": await CompanySettingsService(session, tenant_id).get_settings()}


@router.put("", response_model=DataResponse[CompanySettingsOut])
async def update_company_settings(
    body: CompanySettingsUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Create or update the settings; omitted fields keep their current values."""
    return {"data": await CompanySettingsService(session, tenant_id).update_settings(body)}
