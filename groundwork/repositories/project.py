from sqlalchemy import or_

from groundwork.domain.project import Project
from groundwork.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project
    default_sort = "name"
    default_order = "asc"

    async def number_taken(self, number: str, exclude_id: str | None = None) -> bool:
        conditions = [Project.number == number]
        if exclude_id:
            conditions.append(Project.id != exclude_id)
        return await self.exists(*conditions, include_deleted=True)

    @staticmethod
    def search_condition(term: str):
        pattern = f"%{term.strip()}%"
        return or_(
            Project.name.ilike(pattern),
            Project.number.ilike(pattern),
            Project.client_name.ilike(pattern),
        )
