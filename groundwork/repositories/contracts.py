from sqlalchemy import func, or_, select

from groundwork.domain.contracts import ChangeOrder, PaymentApplication, Subcontract
from groundwork.repositories.base import BaseRepository


class SubcontractRepository(BaseRepository[Subcontract]):
    model = Subcontract
    default_sort = "subcontract_number"
    default_order = "asc"

    async def number_taken(self, project_id: str, number: str, exclude_id: str | None = None) -> bool:
        conditions = [Subcontract.project_id == project_id, Subcontract.subcontract_number == number]
        if exclude_id:
            conditions.append(Subcontract.id != exclude_id)
        return await self.exists(*conditions, include_deleted=True)

    @staticmethod
    def search_condition(term: str):
        pattern = f"%{term.strip()}%"
        return or_(
            Subcontract.subcontract_number.ilike(pattern),
            Subcontract.subcontractor_name.ilike(pattern),
            Subcontract.scope_of_work.ilike(pattern),
        )


class ChangeOrderRepository(BaseRepository[ChangeOrder]):
    model = ChangeOrder

    async def number_taken(self, subcontract_id: str, number: str) -> bool:
        return await self.exists(
            ChangeOrder.subcontract_id == subcontract_id,
            ChangeOrder.change_order_number == number,
            include_deleted=True,
        )


class PaymentApplicationRepository(BaseRepository[PaymentApplication]):
    model = PaymentApplication
    default_sort = "application_number"

    async def next_application_number(self, subcontract_id: str) -> int:
        # Deleted applications keep their numbers
        result = await self._session.execute(
            select(func.max(PaymentApplication.application_number))
            .where(PaymentApplication.tenant_id == self._tenant_id)
            .where(PaymentApplication.subcontract_id == subcontract_id)
        )
        return (result.scalar_one() or 0) + 1

    async def previous(self, subcontract_id: str, before_number: int | None = None) -> PaymentApplication | None:
        """The latest live application for the subcontract, optionally before a given number."""
        conditions = [PaymentApplication.subcontract_id == subcontract_id]
        if before_number is not None:
            conditions.append(PaymentApplication.application_number < before_number)
        result = await self._session.execute(
            self._base_query()
            .where(*conditions)
            .order_by(PaymentApplication.application_number.desc())
            .limit(1)
        )
        return result.scalars().first()
