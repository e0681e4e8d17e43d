from sqlalchemy import or_

from groundwork.domain.bid import Bid
from groundwork.repositories.base import BaseRepository


class BidRepository(BaseRepository[Bid]):
    model = Bid

    async def number_taken(self, number: str, exclude_id: str | None = None) -> bool:
        conditions = [Bid.number == number]
        if exclude_id:
            conditions.append(Bid.id != exclude_id)
        return await self.exists(*conditions, include_deleted=True)

    @staticmethod
    def search_condition(term: str):
        pattern = f"%{term.strip()}%"
        return or_(Bid.name.ilike(pattern), Bid.number.ilike(pattern), Bid.owner.ilike(pattern))
