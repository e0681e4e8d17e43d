"""Subcontract, change order and payment application schemas."""


from datetime import date, datetime

from pydantic import Field, model_validator

from groundwork.domain.contracts import (
    ChangeOrderStatus,
    PaymentApplicationStatus,
    SubcontractStatus,
)
from groundwork.schemas.common import EMAIL_PATTERN, CamelModel, Money

# ---------------------------------------------------------------------------
# Subcontracts
# ---------------------------------------------------------------------------

class _SubcontractFields(CamelModel):
    subcontractor_contact: str | None = Field(default=None, max_length=200)
    subcontractor_email: str | None = Field(default=None, max_length=256, pattern=EMAIL_PATTERN)
    subcontractor_phone: str | None = Field(default=None, max_length=50)
    subcontractor_address: str | None = Field(default=None, max_length=500)
    trade_code: str | None = Field(default=None, max_length=50)
    execution_date: date | None = None
    start_date: date | None = None
    completion_date: date | None = None
    actual_completion_date: date | None = None
    insurance_expiration_date: date | None = None
    insurance_current: bool | None = None
    license_number: str | None = Field(default=None, max_length=100)
    notes: str | None = None


class SubcontractCreate(_SubcontractFields):
    project_id: str
    subcontract_number: str = Field(min_length=1, max_length=50)
    subcontractor_name: str = Field(min_length=1, max_length=200)
    scope_of_work: str = Field(min_length=1, max_length=4000)
    original_value: Money = Field(gt=0)
    retainage_percent: Money | None = Field(default=None, ge=0, le=100)


class SubcontractUpdate(_SubcontractFields):
    subcontract_number: str | None = Field(default=None, min_length=1, max_length=50)
    subcontractor_name: str | None = Field(default=None, min_length=1, max_length=200)
    scope_of_work: str | None = Field(default=None, min_length=1, max_length=4000)
    original_value: Money | None = Field(default=None, gt=0)
    retainage_percent: Money | None = Field(default=None, ge=0, le=100)
    status: SubcontractStatus | None = None


class SubcontractOut(CamelModel):
    id: str
    project_id: str
    subcontract_number: str
    subcontractor_name: str
    subcontractor_contact: str | None = None
    subcontractor_email: str | None = None
    subcontractor_phone: str | None = None
    subcontractor_address: str | None = None
    scope_of_work: str
    trade_code: str | None = None
    original_value: Money
    current_value: Money
    billed_to_date: Money
    paid_to_date: Money
    retainage_percent: Money
    retainage_held: Money
    execution_date: date | None = None
    start_date: date | None = None
    completion_date: date | None = None
    actual_completion_date: date | None = None
    status: SubcontractStatus
    insurance_expiration_date: date | None = None
    insurance_current: bool
    license_number: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

# ---------------------------------------------------------------------------
# Change orders
# ---------------------------------------------------------------------------

class ChangeOrderCreate(CamelModel):
    subcontract_id: str
    change_order_number: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=4000)
    reason: str | None = Field(default=None, max_length=500)
    amount: Money
    days_extension: int | None = Field(default=None, ge=0)
    reference_number: str | None = Field(default=None, max_length=100)


class ChangeOrderUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=4000)
    reason: str | None = Field(default=None, max_length=500)
    amount: Money | None = None
    days_extension: int | None = Field(default=None, ge=0)
    status: ChangeOrderStatus | None = None
    approved_by: str | None = Field(default=None, max_length=200)
    rejected_by: str | None = Field(default=None, max_length=200)
    rejection_reason: str | None = Field(default=None, max_length=1000)
    reference_number: str | None = Field(default=None, max_length=100)


class ChangeOrderOut(CamelModel):
    id: str
    subcontract_id: str
    change_order_number: str
    title: str
    description: str
    reason: str | None = None
    amount: Money
    days_extension: int | None = None
    status: ChangeOrderStatus
    submitted_date: date | None = None
    approved_date: date | None = None
    rejected_date: date | None = None
    approved_by: str | None = None
    rejected_by: str | None = None
    rejection_reason: str | None = None
    reference_number: str | None = None
    created_at: datetime
    updated_at: datetime

# ---------------------------------------------------------------------------
# Payment applications
# ---------------------------------------------------------------------------

class PaymentApplicationCreate(CamelModel):
    subcontract_id: str
    period_start: date
    period_end: date
    work_completed_this_period: Money = Field(ge=0)
    stored_materials: Money = Field(default=0, ge=0)
    retainage_percent: Money | None = Field(default=None, ge=0, le=100)
    invoice_number: str | None = Field(default=None, max_length=100)
    notes: str | None = None

    @model_validator(mode="after")
    def _period_order(self):
        if self.period_end < self.period_start:
            raise ValueError("periodEnd must not be before periodStart")
        return self


class PaymentApplicationUpdate(CamelModel):
    work_completed_this_period: Money | None = Field(default=None, ge=0)
    stored_materials: Money | None = Field(default=None, ge=0)
    retainage_percent: Money | None = Field(default=None, ge=0, le=100)
    status: PaymentApplicationStatus | None = None
    approved_by: str | None = Field(default=None, max_length=200)
    approved_amount: Money | None = Field(default=None, ge=0)
    invoice_number: str | None = Field(default=None, max_length=100)
    check_number: str | None = Field(default=None, max_length=50)
    notes: str | None = None


class PaymentApplicationOut(CamelModel):
    id: str
    subcontract_id: str
    application_number: int
    period_start: date
    period_end: date
    scheduled_value: Money
    work_completed_previous: Money
    work_completed_this_period: Money
    work_completed_to_date: Money
    stored_materials: Money
    total_completed_and_stored: Money
    retainage_percent: Money
    retainage_this_period: Money
    retainage_previous: Money
    total_retainage: Money
    total_earned_less_retainage: Money
    less_previous_certificates: Money
    current_payment_due: Money
    status: PaymentApplicationStatus
    submitted_date: date | None = None
    reviewed_date: date | None = None
    approved_date: date | None = None
    paid_date: date | None = None
    approved_by: str | None = None
    approved_amount: Money | None = None
    invoice_number: str | None = None
    check_number: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
