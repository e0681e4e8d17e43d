"""SQLAlchemy ORM models for subcontracts, change orders and payment applications."""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class SubcontractStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    ISSUED = "issued"
    EXECUTED = "executed"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"
    CLOSED_OUT = "closed_out"
    TERMINATED = "terminated"
    ON_HOLD = "on_hold"


class ChangeOrderStatus(str, enum.Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    VOID = "void"


class PaymentApplicationStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    PARTIALLY_APPROVED = "partially_approved"
    REJECTED = "rejected"
    PAID = "paid"
    VOID = "void"


class Subcontract(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "subcontracts"
    __table_args__ = (UniqueConstraint("project_id", "subcontract_number"),)

    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id"), nullable=False, index=True
    )
    subcontract_number: Mapped[str] = mapped_column(String(50), nullable=False)

    # Subcontractor
    subcontractor_name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    subcontractor_contact: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    subcontractor_email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    subcontractor_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    subcontractor_address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    scope_of_work: Mapped[str] = mapped_column(Text, nullable=False)
    trade_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Financials. current_value = original_value + approved change orders
    original_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    current_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    billed_to_date: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    paid_to_date: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    retainage_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=10, nullable=False)
    retainage_held: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)

    # Dates
    execution_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    actual_completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    status: Mapped[str] = mapped_column(
        String(30), default=SubcontractStatus.DRAFT.value, nullable=False, index=True
    )

    # Compliance
    insurance_expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    insurance_current: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    license_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ChangeOrder(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "change_orders"
    __table_args__ = (UniqueConstraint("subcontract_id", "change_order_number"),)

    subcontract_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("subcontracts.id"), nullable=False, index=True
    )
    change_order_number: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Negative amounts are deductive change orders
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    days_extension: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    status: Mapped[str] = mapped_column(
        String(30), default=ChangeOrderStatus.PENDING.value, nullable=False, index=True
    )
    submitted_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    approved_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    rejected_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    approved_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    rejected_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    # Owner's change order or RFI this one stems from
    reference_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)


class PaymentApplication(Base, IdMixin, TenantMixin, TimestampMixin):
    """AIA G702-style pay application. Amounts are running totals per subcontract."""

    __tablename__ = "payment_applications"
    __table_args__ = (UniqueConstraint("subcontract_id", "application_number"),)

    subcontract_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("subcontracts.id"), nullable=False, index=True
    )
    application_number: Mapped[int] = mapped_column(Integer, nullable=False)
    period_start: Mapped[date] = mapped_column(Date, nullable=False)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)

    scheduled_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    work_completed_previous: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    work_completed_this_period: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    work_completed_to_date: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    stored_materials: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    total_completed_and_stored: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)

    retainage_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    retainage_this_period: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    retainage_previous: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    total_retainage: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)

    total_earned_less_retainage: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    less_previous_certificates: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    current_payment_due: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)

    status: Mapped[str] = mapped_column(
        String(30), default=PaymentApplicationStatus.DRAFT.value, nullable=False, index=True
    )
    submitted_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    reviewed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    approved_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    paid_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    approved_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    approved_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    invoice_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    check_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
