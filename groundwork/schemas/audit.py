"""Audit trail schemas."""


from datetime import datetime
from typing import Any

from groundwork.schemas.common import CamelModel


class AuditTrailOut(CamelModel):
    id: str
    user_id: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    action: str
    method: str
    path: str
    status_code: int
    duration_ms: int | None = None
    entity_type: str
    entity_id: str | None = None
    old_value: Any | None = None
    new_value: Any | None = None
    description: str | None = None
    created_at: datetime
