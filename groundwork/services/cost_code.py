from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import ConflictError, NotFoundError
from groundwork.core.pagination import PaginationParams
from groundwork.domain.cost_code import CostCode
from groundwork.repositories.cost_code import CostCodeRepository
from groundwork.schemas.cost_code import CostCodeCreate, CostCodeUpdate


class CostCodeService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = CostCodeRepository(session, tenant_id)

    async def list_cost_codes(
        self,
        pagination: PaginationParams,
        *,
        is_active: bool | None = None,
        cost_type: str | None = None,
        search: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order if pagination.sort else None,
            filters={"is_active": is_active, "cost_type": cost_type},
            conditions=[CostCodeRepository.search_condition(search)] if search else None,
        )

    async def get_cost_code(self, cost_code_id: str) -> CostCode:
        cost_code = await self._repo.get_by_id(cost_code_id)
        if not cost_code:
            raise NotFoundError("Cost code", cost_code_id)
        return cost_code

    async def create_cost_code(self, data: CostCodeCreate) -> CostCode:
        if await self._repo.code_taken(data.code):
            raise ConflictError(f"Cost code '{data.code}' already exists", code="DUPLICATE_CODE")
        return await self._repo.create(**data.model_dump(exclude_none=True))

    async def update_cost_code(self, cost_code_id: str, data: CostCodeUpdate) -> CostCode:
        await self.get_cost_code(cost_code_id)
        return await self._repo.update(cost_code_id, **self._repo.changes(data))  # type: ignore[return-value]

    async def delete_cost_code(self, cost_code_id: str) -> None:
        deleted = await self._repo.soft_delete(cost_code_id)
        if not deleted:
            raise NotFoundError("Cost code", cost_code_id)
