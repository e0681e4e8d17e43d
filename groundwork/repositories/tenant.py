"""Tenant repository. Tenants are the isolation boundary, so reads are not tenant-filtered."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.domain.tenant import CompanySettings, Tenant
from groundwork.repositories.base import BaseRepository


class TenantRepository:
    def __init__(self, session: AsyncSession):
        self._session = session

    def _base_query(self):
        return select(Tenant).where(Tenant.deleted_at.is_(None))

    async def get_by_id(self, tenant_id: str) -> Tenant | None:
        result = await self._session.execute(self._base_query().where(Tenant.id == tenant_id))
        return result.scalars().first()

    async def get_by_slug(self, slug: str) -> Tenant | None:
        result = await self._session.execute(self._base_query().where(Tenant.slug == slug))
        return result.scalars().first()

    async def slug_exists(self, slug: str) -> bool:
        result = await self._session.execute(select(Tenant.id).where(Tenant.slug == slug))
        return result.first() is not None

    async def list(self, *, offset: int = 0, limit: int = 20) -> tuple[list[Tenant], int]:
        q = self._base_query()
        total = (
            await self._session.execute(select(func.count()).select_from(q.subquery()))
        ).scalar_one()
        items = (
            await self._session.execute(q.order_by(Tenant.name).offset(offset).limit(limit))
        ).scalars().all()
        return list(items), total

    async def create(self, **kwargs) -> Tenant:
        tenant = Tenant(**kwargs)
        self._session.add(tenant)
        await self._session.flush()
        await self._session.refresh(tenant)
        return tenant


class CompanySettingsRepository(BaseRepository[CompanySettings]):
    model = CompanySettings

    async def current(self) -> CompanySettings | None:
        return await self.first()
