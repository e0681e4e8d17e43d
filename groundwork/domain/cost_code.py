"""SQLAlchemy ORM model for job cost codes."""

from __future__ import annotations

import enum
from typing import Optional

from sqlalchemy import Boolean, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class CostType(str, enum.Enum):
    LABOR = "labor"
    MATERIAL = "material"
    EQUIPMENT = "equipment"
    SUBCONTRACT = "subcontract"
    OTHER = "other"


class CostCode(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "cost_codes"
    __table_args__ = (UniqueConstraint("tenant_id", "code"),)

    code: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(String(200), nullable=False)
    division: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    cost_type: Mapped[str] = mapped_column(
        String(20), default=CostType.LABOR.value, nullable=False
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
