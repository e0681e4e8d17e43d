"""SQLAlchemy ORM models for pay periods, payroll batches and per-employee payroll entries."""

from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class PayPeriodStatus(str, enum.Enum):
    OPEN = "open"
    PROCESSING = "processing"
    CLOSED = "closed"


class PayrollBatchStatus(str, enum.Enum):
    DRAFT = "draft"
    CALCULATED = "calculated"
    APPROVED = "approved"
    POSTED = "posted"
    VOIDED = "voided"


def _money() -> Mapped[Decimal]:
    return mapped_column(Numeric(18, 2), default=0, nullable=False)


def _hours() -> Mapped[Decimal]:
    return mapped_column(Numeric(8, 2), default=0, nullable=False)


class PayPeriod(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "pay_periods"

    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    pay_date: Mapped[date] = mapped_column(Date, nullable=False)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PayPeriodStatus.OPEN.value, nullable=False, index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    closed_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class PayrollBatch(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "payroll_batches"

    pay_period_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("pay_periods.id"), nullable=False, index=True
    )
    batch_number: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=PayrollBatchStatus.DRAFT.value, nullable=False, index=True
    )

    # Totals, refreshed on every calculation
    total_regular_hours: Mapped[Decimal] = _hours()
    total_overtime_hours: Mapped[Decimal] = _hours()
    total_doubletime_hours: Mapped[Decimal] = _hours()
    total_gross: Mapped[Decimal] = _money()
    total_deductions: Mapped[Decimal] = _money()
    total_net: Mapped[Decimal] = _money()
    total_employer_taxes: Mapped[Decimal] = _money()
    total_union_fringes: Mapped[Decimal] = _money()
    total_employer_cost: Mapped[Decimal] = _money()
    employee_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Workflow stamps
    created_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    calculated_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    calculated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    approved_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    posted_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    posted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    entries: Mapped[List["PayrollEntry"]] = relationship(
        back_populates="batch",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class PayrollEntry(Base, IdMixin, TenantMixin):
    """One employee's pay for a batch."""

    __tablename__ = "payroll_entries"

    payroll_batch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("payroll_batches.id", ondelete="CASCADE"), nullable=False, index=True
    )
    employee_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    regular_hours: Mapped[Decimal] = _hours()
    overtime_hours: Mapped[Decimal] = _hours()
    doubletime_hours: Mapped[Decimal] = _hours()
    hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)

    regular_pay: Mapped[Decimal] = _money()
    overtime_pay: Mapped[Decimal] = _money()
    doubletime_pay: Mapped[Decimal] = _money()
    gross_pay: Mapped[Decimal] = _money()

    federal_withholding: Mapped[Decimal] = _money()
    state_withholding: Mapped[Decimal] = _money()
    social_security: Mapped[Decimal] = _money()
    medicare: Mapped[Decimal] = _money()
    pre_tax_deductions: Mapped[Decimal] = _money()
    post_tax_deductions: Mapped[Decimal] = _money()
    total_deductions: Mapped[Decimal] = _money()
    net_pay: Mapped[Decimal] = _money()

    employer_taxes: Mapped[Decimal] = _money()
    union_fringes: Mapped[Decimal] = _money()
    employer_contributions: Mapped[Decimal] = _money()
    employer_cost: Mapped[Decimal] = _money()

    batch: Mapped["PayrollBatch"] = relationship(back_populates="entries", lazy="noload")
    deduction_lines: Mapped[List["PayrollDeductionLine"]] = relationship(
        back_populates="entry",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="PayrollDeductionLine.position",
    )


class PayrollDeductionLine(Base, IdMixin, TenantMixin):
    """One deduction taken from one payroll entry. Posting adds it to the deduction's YTD."""

    __tablename__ = "payroll_deduction_lines"

    payroll_entry_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("payroll_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    deduction_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    deduction_code: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(String(100), nullable=False)
    is_pre_tax: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    amount: Mapped[Decimal] = _money()
    employer_match: Mapped[Decimal] = _money()

    entry: Mapped["PayrollEntry"] = relationship(back_populates="deduction_lines", lazy="noload")
