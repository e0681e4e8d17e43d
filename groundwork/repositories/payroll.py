from datetime import date

from sqlalchemy import func, select

from groundwork.domain.payroll import PayPeriod, PayPeriodStatus, PayrollBatch
from groundwork.repositories.base import BaseRepository


class PayPeriodRepository(BaseRepository[PayPeriod]):
    model = PayPeriod
    default_sort = "start_date"

    async def overlaps(self, start_date: date, end_date: date) -> bool:
        """True when a live period shares at least one day with [start_date, end_date]."""
        return await self.exists(PayPeriod.start_date <= end_date, PayPeriod.end_date >= start_date)

    async def current(self, today: date) -> PayPeriod | None:
        """The unclosed period containing today, else the latest unclosed one."""
        open_status = PayPeriod.status != PayPeriodStatus.CLOSED.value
        containing = await self.first(
            open_status, PayPeriod.start_date <= today, PayPeriod.end_date >= today
        )
        if containing is not None:
            return containing
        latest = await self.find(open_status, order_by=PayPeriod.start_date.desc())
        return latest[0] if latest else None


class PayrollBatchRepository(BaseRepository[PayrollBatch]):
    model = PayrollBatch

    async def next_sequence(self, pay_period_id: str) -> int:
        # Deleted batches keep their numbers
        result = await self._session.execute(
            select(func.count(PayrollBatch.id))
            .where(PayrollBatch.tenant_id == self._tenant_id)
            .where(PayrollBatch.pay_period_id == pay_period_id)
        )
        return result.scalar_one() + 1

    async def for_period(self, pay_period_id: str) -> list[PayrollBatch]:
        return await self.find(PayrollBatch.pay_period_id == pay_period_id)
