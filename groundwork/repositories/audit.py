from groundwork.domain.audit import AuditTrail
from groundwork.repositories.base import BaseRepository


class AuditTrailRepository(BaseRepository[AuditTrail]):
    """Read-only in practice: rows are written by the audit middleware."""

    model = AuditTrail
