"""SQLAlchemy ORM models for bids and their line items."""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Date, ForeignKey, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class BidStatus(str, enum.Enum):
    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    WON = "won"
    LOST = "lost"
    NO_DECISION = "no_decision"
    WITHDRAWN = "withdrawn"


class BidItemCategory(str, enum.Enum):
    """CSI MasterFormat-style divisions."""

    GENERAL = "general"
    SITEWORK = "sitework"
    CONCRETE = "concrete"
    MASONRY = "masonry"
    METALS = "metals"
    WOOD_PLASTICS = "wood_plastics"
    THERMAL_MOISTURE = "thermal_moisture"
    DOORS_WINDOWS = "doors_windows"
    FINISHES = "finishes"
    SPECIALTIES = "specialties"
    EQUIPMENT = "equipment"
    FURNISHINGS = "furnishings"
    SPECIAL_CONSTRUCTION = "special_construction"
    CONVEYING = "conveying"
    MECHANICAL = "mechanical"
    ELECTRICAL = "electrical"
    OTHER = "other"


class Bid(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "bids"
    __table_args__ = (UniqueConstraint("tenant_id", "number"),)

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    number: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(30), default=BidStatus.DRAFT.value, nullable=False, index=True
    )
    owner: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    estimated_value: Mapped[Decimal] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    bid_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    due_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Set once the bid is won and converted
    project_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    items: Mapped[List["BidItem"]] = relationship(
        back_populates="bid",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="BidItem.position",
    )


class BidItem(Base, IdMixin, TenantMixin):
    __tablename__ = "bid_items"

    bid_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("bids.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(default=0, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(
        String(30), default=BidItemCategory.GENERAL.value, nullable=False
    )
    quantity: Mapped[Decimal] = mapped_column(Numeric(18, 4), nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    bid: Mapped["Bid"] = relationship(back_populates="items", lazy="noload")
