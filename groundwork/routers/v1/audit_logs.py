"""Audit log router — read access to the request audit trail."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.audit import AuditTrailOut
from groundwork.services.audit import AuditService

router = APIRouter(prefix="/audit-logs", tags=["Audit"])


@router.get("", response_model=ListResponse[AuditTrailOut])
async def list_audit_logs(
    entity_type: Optional[str] = Query(default=None, alias="entityType"),
    entity_id: Optional[str] = Query(default=None, alias="entityId"),
    action: Optional[str] = Query(default=None),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Audit rows for the tenant, newest first."""
    items, total = await AuditService(session, tenant_id).list_audit_logs(
        pagination, entity_type=entity_type, entity_id=entity_id, action=action
    )
    return paginated([AuditTrailOut.model_validate(a) for a in items], total, pagination)
