"""Subcontract, change order and payment application services.

Money flows between the three:
  * an approved change order adds its amount to the subcontract's current value
  * a paid payment application adds to the subcontract's billed/paid totals
    and sets the retainage held
Both are applied as deltas, so edits, reversals and deletes stay consistent.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.config import settings
from groundwork.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from groundwork.core.money import ZERO, to_cents
from groundwork.core.pagination import PaginationParams
from groundwork.domain.contracts import (
    ChangeOrder,
    ChangeOrderStatus,
    PaymentApplication,
    PaymentApplicationStatus,
    Subcontract,
)
from groundwork.repositories.contracts import (
    ChangeOrderRepository,
    PaymentApplicationRepository,
    SubcontractRepository,
)
from groundwork.repositories.project import ProjectRepository
from groundwork.schemas.contracts import (
    ChangeOrderCreate,
    ChangeOrderUpdate,
    PaymentApplicationCreate,
    PaymentApplicationUpdate,
    SubcontractCreate,
    SubcontractUpdate,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Subcontracts
# ---------------------------------------------------------------------------

class SubcontractService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = SubcontractRepository(session, tenant_id)
        self._projects = ProjectRepository(session, tenant_id)

    async def list_subcontracts(
        self,
        pagination: PaginationParams,
        *,
        project_id: str | None = None,
        status: str | None = None,
        search: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order if pagination.sort else None,
            filters={"project_id": project_id, "status": status},
            conditions=[SubcontractRepository.search_condition(search)] if search else None,
        )

    async def get_subcontract(self, subcontract_id: str) -> Subcontract:
        subcontract = await self._repo.get_by_id(subcontract_id)
        if not subcontract:
            raise NotFoundError("Subcontract", subcontract_id)
        return subcontract

    async def create_subcontract(self, data: SubcontractCreate) -> Subcontract:
        if not await self._projects.get_by_id(data.project_id):
            raise NotFoundError("Project", data.project_id, code="PROJECT_NOT_FOUND")
        if await self._repo.number_taken(data.project_id, data.subcontract_number):
            raise ConflictError(
                f"Subcontract number '{data.subcontract_number}' already exists on this project",
                code="DUPLICATE_NUMBER",
            )
        fields = data.model_dump(exclude_none=True)
        fields.setdefault("retainage_percent", Decimal(str(settings.default_retainage_percent)))
        return await self._repo.create(current_value=data.original_value, **fields)

    async def update_subcontract(self, subcontract_id: str, data: SubcontractUpdate) -> Subcontract:
        subcontract = await self.get_subcontract(subcontract_id)
        changes = self._repo.changes(data)
        number = changes.get("subcontract_number")
        if number and await self._repo.number_taken(subcontract.project_id, number, exclude_id=subcontract_id):
            raise ConflictError(
                f"Subcontract number '{number}' already exists on this project",
                code="DUPLICATE_NUMBER",
            )
        if changes.get("original_value") is not None:
            # current_value tracks the original value plus approved change orders
            changes["current_value"] = subcontract.current_value + (
                changes["original_value"] - subcontract.original_value
            )
        return await self._repo.update(subcontract_id, **changes)  # type: ignore[return-value]

    async def delete_subcontract(self, subcontract_id: str) -> None:
        deleted = await self._repo.soft_delete(subcontract_id)
        if not deleted:
            raise NotFoundError("Subcontract", subcontract_id)


# ---------------------------------------------------------------------------
# Change orders
# ---------------------------------------------------------------------------

def _approved_amount(status: str, amount: Decimal) -> Decimal:
    """What a change order contributes to its subcontract's current value."""
    return Decimal(amount) if status == ChangeOrderStatus.APPROVED.value else ZERO


class ChangeOrderService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = ChangeOrderRepository(session, tenant_id)
        self._subcontracts = SubcontractRepository(session, tenant_id)

    async def list_change_orders(
        self,
        pagination: PaginationParams,
        *,
        subcontract_id: str | None = None,
        status: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"subcontract_id": subcontract_id, "status": status},
        )

    async def get_change_order(self, change_order_id: str) -> ChangeOrder:
        change_order = await self._repo.get_by_id(change_order_id)
        if not change_order:
            raise NotFoundError("Change order", change_order_id)
        return change_order

    async def create_change_order(self, data: ChangeOrderCreate) -> ChangeOrder:
        if not await self._subcontracts.get_by_id(data.subcontract_id):
            raise NotFoundError("Subcontract", data.subcontract_id, code="SUBCONTRACT_NOT_FOUND")
        if await self._repo.number_taken(data.subcontract_id, data.change_order_number):
            raise ConflictError(
                f"Change order number '{data.change_order_number}' already exists on this subcontract",
                code="DUPLICATE_NUMBER",
            )
        return await self._repo.create(
            status=ChangeOrderStatus.PENDING.value,
            submitted_date=date.today(),
            **data.model_dump(exclude_none=True),
        )

    async def update_change_order(self, change_order_id: str, data: ChangeOrderUpdate) -> ChangeOrder:
        change_order = await self.get_change_order(change_order_id)
        changes = self._repo.changes(data)
        before = _approved_amount(change_order.status, change_order.amount)

        new_status = changes.get("status")
        if new_status and new_status != change_order.status:
            if new_status == ChangeOrderStatus.APPROVED.value:
                changes.setdefault("approved_date", date.today())
            elif new_status == ChangeOrderStatus.REJECTED.value:
                changes.setdefault("rejected_date", date.today())

        for field, value in changes.items():
            setattr(change_order, field, value)

        delta = _approved_amount(change_order.status, change_order.amount) - before
        if delta:
            subcontract = await self._subcontracts.get_by_id(change_order.subcontract_id)
            if subcontract is not None:
                subcontract.current_value = subcontract.current_value + delta
                logger.info(
                    "Change order %s moved subcontract %s value by %s",
                    change_order.change_order_number, subcontract.subcontract_number, delta,
                )
        return await self._repo.save(change_order)

    async def delete_change_order(self, change_order_id: str) -> None:
        change_order = await self.get_change_order(change_order_id)
        contribution = _approved_amount(change_order.status, change_order.amount)
        if contribution:
            subcontract = await self._subcontracts.get_by_id(change_order.subcontract_id)
            if subcontract is not None:
                subcontract.current_value = subcontract.current_value - contribution
                await self._subcontracts.save(subcontract)
        await self._repo.soft_delete(change_order_id)


# ---------------------------------------------------------------------------
# Payment applications
# ---------------------------------------------------------------------------

# Amounts are frozen once the owner has signed off on them.
_AMOUNTS_LOCKED = {
    PaymentApplicationStatus.APPROVED.value,
    PaymentApplicationStatus.PARTIALLY_APPROVED.value,
    PaymentApplicationStatus.PAID.value,
    PaymentApplicationStatus.VOID.value,
}

_STATUS_DATE_FIELDS = {
    PaymentApplicationStatus.SUBMITTED.value: "submitted_date",
    PaymentApplicationStatus.UNDER_REVIEW.value: "reviewed_date",
    PaymentApplicationStatus.APPROVED.value: "approved_date",
    PaymentApplicationStatus.PARTIALLY_APPROVED.value: "approved_date",
    PaymentApplicationStatus.PAID.value: "paid_date",
}


def running_totals(
    *,
    scheduled_value: Decimal,
    work_completed_this_period: Decimal,
    stored_materials: Decimal,
    retainage_percent: Decimal,
    previous: PaymentApplication | None,
) -> dict[str, Decimal]:
    """G702 continuation math for one application, given the one before it."""
    this_period = Decimal(work_completed_this_period)
    work_previous = Decimal(previous.work_completed_to_date) if previous else ZERO
    retainage_previous = Decimal(previous.total_retainage) if previous else ZERO
    previous_certificates = Decimal(previous.total_earned_less_retainage) if previous else ZERO

    to_date = work_previous + this_period
    completed_and_stored = to_date + Decimal(stored_materials)
    retainage_this_period = to_cents(this_period * Decimal(retainage_percent) / 100)
    total_retainage = retainage_previous + retainage_this_period
    earned_less_retainage = completed_and_stored - total_retainage

    return {
        "scheduled_value": Decimal(scheduled_value),
        "work_completed_previous": work_previous,
        "work_completed_this_period": this_period,
        "work_completed_to_date": to_date,
        "stored_materials": Decimal(stored_materials),
        "total_completed_and_stored": completed_and_stored,
        "retainage_percent": Decimal(retainage_percent),
        "retainage_this_period": retainage_this_period,
        "retainage_previous": retainage_previous,
        "total_retainage": total_retainage,
        "total_earned_less_retainage": earned_less_retainage,
        "less_previous_certificates": previous_certificates,
        "current_payment_due": earned_less_retainage - previous_certificates,
    }


def _paid_amounts(app: PaymentApplication) -> tuple[Decimal, Decimal]:
    """(billed, paid) an application has contributed to its subcontract."""
    if app.status != PaymentApplicationStatus.PAID.value:
        return ZERO, ZERO
    billed = Decimal(app.current_payment_due)
    paid = Decimal(app.approved_amount) if app.approved_amount is not None else billed
    return billed, paid


class PaymentApplicationService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = PaymentApplicationRepository(session, tenant_id)
        self._subcontracts = SubcontractRepository(session, tenant_id)

    async def list_payment_applications(
        self,
        pagination: PaginationParams,
        *,
        subcontract_id: str | None = None,
        status: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"subcontract_id": subcontract_id, "status": status},
        )

    async def get_payment_application(self, application_id: str) -> PaymentApplication:
        app = await self._repo.get_by_id(application_id)
        if not app:
            raise NotFoundError("Payment application", application_id)
        return app

    async def create_payment_application(self, data: PaymentApplicationCreate) -> PaymentApplication:
        subcontract = await self._subcontracts.get_by_id(data.subcontract_id)
        if not subcontract:
            raise NotFoundError("Subcontract", data.subcontract_id, code="SUBCONTRACT_NOT_FOUND")

        previous = await self._repo.previous(subcontract.id)
        retainage_percent = (
            data.retainage_percent if data.retainage_percent is not None else subcontract.retainage_percent
        )
        amounts = running_totals(
            scheduled_value=subcontract.current_value,
            work_completed_this_period=data.work_completed_this_period,
            stored_materials=data.stored_materials,
            retainage_percent=retainage_percent,
            previous=previous,
        )
        app = await self._repo.create(
            subcontract_id=subcontract.id,
            application_number=await self._repo.next_application_number(subcontract.id),
            period_start=data.period_start,
            period_end=data.period_end,
            status=PaymentApplicationStatus.DRAFT.value,
            invoice_number=data.invoice_number,
            notes=data.notes,
            **amounts,
        )
        logger.info(
            "Payment application #%d for subcontract %s: %s due",
            app.application_number, subcontract.subcontract_number, app.current_payment_due,
        )
        return app

    async def update_payment_application(
        self, application_id: str, data: PaymentApplicationUpdate
    ) -> PaymentApplication:
        app = await self.get_payment_application(application_id)
        changes = self._repo.changes(data)
        billed_before, paid_before = _paid_amounts(app)

        amount_fields = {"work_completed_this_period", "stored_materials", "retainage_percent"}
        amount_changes = {k: v for k, v in changes.items() if k in amount_fields and v is not None}
        if amount_changes:
            if app.status in _AMOUNTS_LOCKED:
                raise BusinessRuleError(
                    f"Amounts cannot be changed once the application is {app.status}",
                    code="INVALID_STATUS",
                )
            previous = await self._repo.previous(app.subcontract_id, before_number=app.application_number)
            changes.update(
                running_totals(
                    scheduled_value=app.scheduled_value,
                    work_completed_this_period=amount_changes.get(
                        "work_completed_this_period", app.work_completed_this_period
                    ),
                    stored_materials=amount_changes.get("stored_materials", app.stored_materials),
                    retainage_percent=amount_changes.get("retainage_percent", app.retainage_percent),
                    previous=previous,
                )
            )

        new_status = changes.get("status")
        if new_status and new_status != app.status and new_status in _STATUS_DATE_FIELDS:
            field = _STATUS_DATE_FIELDS[new_status]
            if getattr(app, field) is None:
                changes[field] = date.today()

        for field, value in changes.items():
            setattr(app, field, value)

        billed_after, paid_after = _paid_amounts(app)
        if (billed_after, paid_after) != (billed_before, paid_before):
            subcontract = await self._subcontracts.get_by_id(app.subcontract_id)
            if subcontract is not None:
                subcontract.billed_to_date = subcontract.billed_to_date + billed_after - billed_before
                subcontract.paid_to_date = subcontract.paid_to_date + paid_after - paid_before
                if app.status == PaymentApplicationStatus.PAID.value:
                    subcontract.retainage_held = app.total_retainage
                logger.info(
                    "Payment application #%d paid against subcontract %s",
                    app.application_number, subcontract.subcontract_number,
                )
        return await self._repo.save(app)

    async def delete_payment_application(self, application_id: str) -> None:
        app = await self.get_payment_application(application_id)
        if app.status == PaymentApplicationStatus.PAID.value:
            raise BusinessRuleError("Paid applications cannot be deleted", code="INVALID_STATUS")
        await self._repo.soft_delete(application_id)
