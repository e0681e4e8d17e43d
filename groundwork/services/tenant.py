"""Tenant provisioning and company settings."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import ConflictError, NotFoundError
from groundwork.core.pagination import PaginationParams
from groundwork.domain.tenant import Tenant
from groundwork.repositories.tenant import CompanySettingsRepository, TenantRepository
from groundwork.schemas.tenant import (
    DEFAULT_COMPANY_NAME,
    CompanySettingsOut,
    CompanySettingsUpdate,
    TenantCreate,
)

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    """"Bob's Builders Inc" -> "bobs-builders-inc"."""
    return "-".join(name.lower().replace("'", "").split())


class TenantService:
    def __init__(self, session: AsyncSession):
        self._repo = TenantRepository(session)

    async def create_tenant(self, data: TenantCreate) -> Tenant:
        slug = slugify(data.name)
        if await self._repo.slug_exists(slug):
            raise ConflictError(f"A tenant with slug '{slug}' already exists", code="DUPLICATE_SLUG")
        tenant = await self._repo.create(name=data.name.strip(), slug=slug, plan=data.plan)
        logger.info("Provisioned tenant %s (%s)", tenant.slug, tenant.id)
        return tenant

    async def get_tenant(self, tenant_id: str) -> Tenant:
        tenant = await self._repo.get_by_id(tenant_id)
        if not tenant:
            raise NotFoundError("Tenant", tenant_id)
        return tenant

    async def list_tenants(self, pagination: PaginationParams):
        return await self._repo.list(offset=pagination.offset, limit=pagination.limit)


class CompanySettingsService:
    """The tenant's company profile. Reads fall back to defaults until the first save."""

    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = CompanySettingsRepository(session, tenant_id)

    async def get_settings(self) -> CompanySettingsOut:
        settings = await self._repo.current()
        if settings is None:
            return CompanySettingsOut()
        return CompanySettingsOut.model_validate(settings)

    async def update_settings(self, data: CompanySettingsUpdate) -> CompanySettingsOut:
        settings = await self._repo.current()
        changes = self._repo.changes(data)
        if settings is None:
            changes.setdefault("company_name", DEFAULT_COMPANY_NAME)
            settings = await self._repo.create(**changes)
            logger.info("Saved company settings for the first time (%s)", settings.company_name)
        else:
            settings = await self._repo.update(settings.id, **changes)
        return CompanySettingsOut.model_validate(settings)
