"""SQLAlchemy ORM model for construction projects."""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class ProjectStatus(str, enum.Enum):
    BIDDING = "bidding"
    PRE_CONSTRUCTION = "pre_construction"
    ACTIVE = "active"
    COMPLETED = "completed"
    CLOSED = "closed"
    ON_HOLD = "on_hold"


# Time can no longer be booked against these.
INACTIVE_PROJECT_STATUSES = {ProjectStatus.COMPLETED.value, ProjectStatus.CLOSED.value}


class ProjectType(str, enum.Enum):
    COMMERCIAL = "commercial"
    RESIDENTIAL = "residential"
    INDUSTRIAL = "industrial"
    INFRASTRUCTURE = "infrastructure"
    RENOVATION = "renovation"
    TENANT_IMPROVEMENT = "tenant_improvement"
    OTHER = "other"


class Project(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "projects"
    __table_args__ = (UniqueConstraint("tenant_id", "number"),)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    number: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30), default=ProjectStatus.BIDDING.value, nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(
        String(30), default=ProjectType.COMMERCIAL.value, nullable=False
    )

    # Location
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Owner / client
    client_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    client_contact: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    client_email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    client_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Schedule
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    estimated_completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    actual_completion_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Financials
    contract_amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    original_budget: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)

    # Bid this project was converted from, if any
    source_bid_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    # Key personnel (employee ids)
    project_manager_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)
    superintendent_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
