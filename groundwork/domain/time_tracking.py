"""SQLAlchemy ORM models for project assignments and daily time entries."""

from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class AssignmentRole(str, enum.Enum):
    WORKER = "worker"
    FOREMAN = "foreman"
    SUPERINTENDENT = "superintendent"
    PROJECT_MANAGER = "project_manager"


class TimeEntryStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class ProjectAssignment(Base, IdMixin, TenantMixin, TimestampMixin):
    """Puts an employee on a project for a date range. Time can only be logged inside it."""

    __tablename__ = "project_assignments"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(
        String(30), default=AssignmentRole.WORKER.value, nullable=False
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    def covers(self, work_date: date) -> bool:
        if not self.is_active or work_date < self.start_date:
            return False
        return self.end_date is None or work_date <= self.end_date


class TimeEntry(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "time_entries"

    work_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id"), nullable=False, index=True
    )
    cost_code_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cost_codes.id"), nullable=False
    )

    regular_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=0, nullable=False)
    overtime_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=0, nullable=False)
    doubletime_hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=0, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=TimeEntryStatus.SUBMITTED.value, nullable=False, index=True
    )
    approved_by_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    approval_comments: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # The live payroll batch that paid these hours, if any
    payroll_batch_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    @property
    def total_hours(self) -> Decimal:
        return (
            Decimal(self.regular_hours or 0)
            + Decimal(self.overtime_hours or 0)
            + Decimal(self.doubletime_hours or 0)
        )
