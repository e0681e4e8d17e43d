from sqlalchemy import or_

from groundwork.domain.cost_code import CostCode
from groundwork.repositories.base import BaseRepository


class CostCodeRepository(BaseRepository[CostCode]):
    model = CostCode
    default_sort = "code"
    default_order = "asc"

    async def code_taken(self, code: str) -> bool:
        return await self.exists(CostCode.code == code, include_deleted=True)

    @staticmethod
    def search_condition(term: str):
        pattern = f"%{term.strip()}%"
        return or_(CostCode.code.ilike(pattern), CostCode.description.ilike(pattern))
