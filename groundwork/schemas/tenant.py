"""Tenant Pydantic schemas, plus each tenant's company settings."""


from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import Field, field_validator

from groundwork.domain.tenant import TenantStatus
from groundwork.schemas.common import EMAIL_PATTERN, PHONE_PATTERN, CamelModel, Money


class TenantCreate(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    plan: str = Field(default="standard", max_length=50)


class TenantOut(CamelModel):
    id: str
    name: str
    slug: str
    status: TenantStatus
    plan: str
    created_at: datetime


# ---------------------------------------------------------------------------
# Company settings
# ---------------------------------------------------------------------------

DEFAULT_COMPANY_NAME = "My Company"
WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class CompanySettingsUpdate(CamelModel):
    company_name: str | None = Field(default=None, min_length=1, max_length=200)
    logo_url: str | None = Field(default=None, max_length=500)
    primary_color: str | None = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    address: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    zip_code: str | None = Field(default=None, pattern=r"^\d{5}(-\d{4})?$")
    country: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    phone: str | None = Field(default=None, max_length=30, pattern=PHONE_PATTERN)
    website: str | None = Field(default=None, max_length=200)
    tax_id: str | None = Field(default=None, max_length=20)
    timezone: str | None = Field(default=None, max_length=50)
    date_format: str | None = Field(default=None, max_length=20)
    time_format: Literal["12h", "24h"] | None = None
    currency: str | None = Field(default=None, pattern=r"^[A-Z]{3}$")
    fiscal_year_start_month: int | None = Field(default=None, ge=1, le=12)
    work_week: str | None = Field(default=None, max_length=30)
    default_work_hours_per_day: Money | None = Field(default=None, gt=0, le=24)
    overtime_threshold_weekly: Money | None = Field(default=None, gt=0, le=168)
    notification_email: str | None = Field(default=None, max_length=256, pattern=EMAIL_PATTERN)
    email_notifications_enabled: bool | None = None
    digest_frequency: Literal["immediate", "daily", "weekly"] | None = None

    @field_validator("work_week")
    @classmethod
    def _weekdays(cls, value: str | None) -> str | None:
        if value is None:
            return value
        days = [d.strip() for d in value.split(",") if d.strip()]
        if not days or any(d not in WEEKDAYS for d in days):
            raise ValueError("workWeek must be a comma-separated list of Mon..Sun")
        return ",".join(days)


class CompanySettingsOut(CamelModel):
    # None until the company saves its settings for the first time
    id: str | None = None
    company_name: str = DEFAULT_COMPANY_NAME
    logo_url: str | None = None
    primary_color: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    phone: str | None = None
    website: str | None = None
    tax_id: str | None = None
    timezone: str = "America/Los_Angeles"
    date_format: str = "MM/dd/yyyy"
    time_format: str = "12h"
    currency: str = "USD"
    fiscal_year_start_month: int = 1
    work_week: str = "Mon,Tue,Wed,Thu,Fri"
    default_work_hours_per_day: Money = Decimal("8")
    overtime_threshold_weekly: Money = Decimal("40")
    notification_email: str | None = None
    email_notifications_enabled: bool = True
    digest_frequency: str = "immediate"
    updated_at: datetime | None = None
