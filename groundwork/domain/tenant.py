"""SQLAlchemy ORM models for tenants (construction companies using the system) and their settings."""

from __future__ import annotations

import enum
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class TenantStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class Tenant(Base, IdMixin, TimestampMixin):
    """A tenant is not itself tenant-scoped; it is the scope."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=TenantStatus.ACTIVE.value, nullable=False
    )
    plan: Mapped[str] = mapped_column(String(50), default="standard", nullable=False)


class CompanySettings(Base, IdMixin, TenantMixin, TimestampMixin):
    """Company profile and preferences. At most one row per tenant."""

    __tablename__ = "company_settings"
    __table_args__ = (UniqueConstraint("tenant_id"),)

    company_name: Mapped[str] = mapped_column(String(200), nullable=False)
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    primary_color: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    website: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Preferences
    timezone: Mapped[str] = mapped_column(String(50), default="America/Los_Angeles", nullable=False)
    date_format: Mapped[str] = mapped_column(String(20), default="MM/dd/yyyy", nullable=False)
    time_format: Mapped[str] = mapped_column(String(3), default="12h", nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    fiscal_year_start_month: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    work_week: Mapped[str] = mapped_column(String(30), default="Mon,Tue,Wed,Thu,Fri", nullable=False)
    default_work_hours_per_day: Mapped[Decimal] = mapped_column(Numeric(4, 2), default=8, nullable=False)
    overtime_threshold_weekly: Mapped[Decimal] = mapped_column(Numeric(5, 2), default=40, nullable=False)

    # Notifications
    notification_email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    email_notifications_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    digest_frequency: Mapped[str] = mapped_column(String(20), default="immediate", nullable=False)
