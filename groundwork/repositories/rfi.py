from sqlalchemy import func, or_, select

from groundwork.domain.rfi import Rfi
from groundwork.repositories.base import BaseRepository


class RfiRepository(BaseRepository[Rfi]):
    model = Rfi
    default_sort = "number"

    async def next_number(self, project_id: str) -> int:
        # Deleted RFIs keep their numbers
        result = await self._session.execute(
            select(func.max(Rfi.number))
            .where(Rfi.tenant_id == self._tenant_id)
            .where(Rfi.project_id == project_id)
        )
        return (result.scalar_one() or 0) + 1

    @staticmethod
    def search_condition(term: str):
        pattern = f"%{term.strip()}%"
        return or_(Rfi.subject.ilike(pattern), Rfi.question.ilike(pattern))
