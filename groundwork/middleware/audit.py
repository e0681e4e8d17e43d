"""Audit logging middleware — records every state-changing request to audit_trail."""


import asyncio
import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from groundwork.core.tenancy import apply_tenant_context
from groundwork.db.base import async_session_factory
from groundwork.domain.audit import AuditTrail

logger = logging.getLogger(__name__)

# Methods that mutate state
_WRITE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}

# Trailing path segments that name an action rather than a resource
_ACTIONS = {
    "approve",
    "reject",
    "calculate",
    "post",
    "void",
    "close",
    "terminate",
    "rehire",
    "convert-to-project",
}

_ID_LENGTH = 36


def _is_id(segment: str) -> bool:
    return len(segment) == _ID_LENGTH and segment.count("-") == 4


def _singular(name: str) -> str:
    if name.endswith("ies"):
        return name[:-3] + "y"
    return name[:-1] if name.endswith("s") else name


def entity_from_path(path: str) -> tuple[str, str | None]:
    """Infer (entity_type, entity_id) from a request path.

    /api/v1/bids/<id>/convert-to-project → ("bid", "<id>")
    /api/v1/projects/<id>/rfis            → ("rfi", None)
    """
    parts = [p for p in path.strip("/").split("/") if p]
    if parts[:2] == ["api", "v1"]:
        parts = parts[2:]
    if parts and parts[-1] in _ACTIONS:
        parts = parts[:-1]
    if not parts:
        return "unknown", None
    if _is_id(parts[-1]) and len(parts) >= 2:
        return _singular(parts[-2]), parts[-1]
    return _singular(parts[-1]), None


class AuditMiddleware(BaseHTTPMiddleware):
    """Logs all write operations.

    Each audit row is written in a background task AFTER the response is
    produced so it never adds latency to the request. Failures are logged,
    never raised to the caller. Requests with no resolved tenant are skipped.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = round((time.monotonic() - start) * 1000)

        if request.method in _WRITE_METHODS:
            tenant_id = getattr(request.state, "tenant_id", None)
            if tenant_id:
                asyncio.create_task(
                    self._record(request, tenant_id, response.status_code, duration_ms)
                )

        return response

    async def _record(
        self, request: Request, tenant_id: str, status_code: int, duration_ms: int
    ) -> None:
        path = request.url.path
        entity_type, entity_id = entity_from_path(path)
        try:
            async with async_session_factory() as session:
                await apply_tenant_context(session, tenant_id)
                session.add(
                    AuditTrail(
                        tenant_id=tenant_id,
                        ip_address=request.client.host if request.client else None,
                        user_agent=request.headers.get("user-agent"),
                        action=f"{request.method}:{status_code}",
                        method=request.method,
                        path=path[:500],
                        status_code=status_code,
                        duration_ms=duration_ms,
                        entity_type=entity_type,
                        entity_id=entity_id,
                        description=f"{request.method} {path} → {status_code} ({duration_ms}ms)",
                    )
                )
                await session.commit()
        except Exception:  # pragma: no cover
            logger.warning("Failed to write audit row for %s %s", request.method, path, exc_info=True)
