import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import NotFoundError
from groundwork.core.pagination import PaginationParams
from groundwork.domain.rfi import Rfi, RfiPriority, RfiStatus
from groundwork.repositories.project import ProjectRepository
from groundwork.repositories.rfi import RfiRepository
from groundwork.schemas.rfi import RfiCreate, RfiUpdate

logger = logging.getLogger(__name__)


class RfiService:
    """RFIs for one project. Every call checks the project exists first."""

    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = RfiRepository(session, tenant_id)
        self._projects = ProjectRepository(session, tenant_id)

    async def _require_project(self, project_id: str) -> None:
        if not await self._projects.get_by_id(project_id):
            raise NotFoundError("Project", project_id, code="PROJECT_NOT_FOUND")

    async def list_rfis(
        self,
        project_id: str,
        pagination: PaginationParams,
        *,
        status: str | None = None,
        search: str | None = None,
    ):
        await self._require_project(project_id)
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"project_id": project_id, "status": status},
            conditions=[RfiRepository.search_condition(search)] if search else None,
        )

    async def get_rfi(self, project_id: str, rfi_id: str) -> Rfi:
        await self._require_project(project_id)
        rfi = await self._repo.first(Rfi.id == rfi_id, Rfi.project_id == project_id)
        if not rfi:
            raise NotFoundError("RFI", rfi_id)
        return rfi

    async def create_rfi(self, project_id: str, data: RfiCreate) -> Rfi:
        await self._require_project(project_id)
        fields = data.model_dump(exclude_none=True)
        fields.setdefault("priority", RfiPriority.NORMAL.value)
        rfi = await self._repo.create(
            project_id=project_id,
            number=await self._repo.next_number(project_id),
            status=RfiStatus.OPEN.value,
            **fields,
        )
        logger.info("Opened RFI #%d on project %s", rfi.number, project_id)
        return rfi

    async def update_rfi(self, project_id: str, rfi_id: str, data: RfiUpdate) -> Rfi:
        rfi = await self.get_rfi(project_id, rfi_id)
        changes = self._repo.changes(data)
        new_status = changes.get("status")
        if new_status and new_status != rfi.status:
            now = datetime.now(timezone.utc)
            if new_status == RfiStatus.ANSWERED.value:
                rfi.answered_at = now
            elif new_status == RfiStatus.CLOSED.value:
                rfi.closed_at = now
            logger.info("RFI #%d moved %s -> %s", rfi.number, rfi.status, new_status)
        for field, value in changes.items():
            setattr(rfi, field, value)
        return await self._repo.save(rfi)

    async def delete_rfi(self, project_id: str, rfi_id: str) -> None:
        rfi = await self.get_rfi(project_id, rfi_id)
        await self._repo.soft_delete(rfi.id)
