from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.repositories.audit import AuditTrailRepository


class AuditService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = AuditTrailRepository(session, tenant_id)

    async def list_audit_logs(
        self,
        pagination: PaginationParams,
        *,
        entity_type: str | None = None,
        entity_id: str | None = None,
        action: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"entity_type": entity_type, "entity_id": entity_id, "action": action},
        )
