"""Per-request tenant resolution and the row-level-security session variable.

Resolution order:
  1. `X-Tenant-Id` header (must be a UUID)
  2. Subdomain of the Host header, looked up by tenant slug
     (acme.groundwork.app -> "acme")
  3. `DEFAULT_TENANT_ID` from settings (single-tenant deployments, local dev)

On PostgreSQL the resolved id is written to the `app.current_tenant`
setting so the row-level-security policies created by the initial
migration apply to every statement in the request's transaction.
"""

from __future__ import annotations

import logging
import uuid

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.config import settings
from groundwork.core.exceptions import BusinessRuleError, ForbiddenError, UnauthorizedError
from groundwork.db.base import get_db
from groundwork.domain.tenant import TenantStatus
from groundwork.repositories.tenant import TenantRepository

logger = logging.getLogger(__name__)

RLS_SETTING = "app.current_tenant"


def subdomain_of(host: str | None) -> str | None:
    """Return the left-most label of a host with at least three labels."""
    if not host:
        return None
    labels = host.split(":")[0].strip(".").split(".")
    if len(labels) < 3 or all(label.isdigit() for label in labels):
        return None
    return labels[0].lower()


async def resolve_tenant_id(request: Request, session: AsyncSession) -> str | None:
    header_value = request.headers.get(settings.tenant_header)
    if header_value:
        try:
            return str(uuid.UUID(header_value.strip()))
        except ValueError:
            raise BusinessRuleError(
                f"{settings.tenant_header} header must be a UUID", code="INVALID_TENANT"
            ) from None

    slug = subdomain_of(request.headers.get("host"))
    if slug:
        tenant = await TenantRepository(session).get_by_slug(slug)
        if tenant is not None:
            return tenant.id

    return settings.default_tenant_id


async def apply_tenant_context(session: AsyncSession, tenant_id: str) -> None:
    """Set the RLS tenant variable for the current transaction (PostgreSQL only)."""
    if session.bind.dialect.name != "postgresql":
        return
    # is_local=true: the value dies with the transaction, so a pooled
    # connection never carries one tenant's id into another request.
    await session.execute(
        text("SELECT set_config(:name, :tenant_id, true)"),
        {"name": RLS_SETTING, "tenant_id": tenant_id},
    )


async def get_tenant_id(request: Request, session: AsyncSession = Depends(get_db)) -> str:
    """FastAPI dependency: resolve the tenant and scope the request's session to it."""
    tenant_id = await resolve_tenant_id(request, session)
    if tenant_id is None:
        raise UnauthorizedError("Tenant could not be resolved for this request")

    tenant = await TenantRepository(session).get_by_id(tenant_id)
    if tenant is not None and tenant.status == TenantStatus.SUSPENDED.value:
        raise ForbiddenError("Tenant is suspended", code="TENANT_SUSPENDED")

    await apply_tenant_context(session, tenant_id)
    request.state.tenant_id = tenant_id
    logger.debug("Request scoped to tenant %s", tenant_id)
    return tenant_id
