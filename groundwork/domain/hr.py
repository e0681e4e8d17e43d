"""SQLAlchemy ORM models for HR: employees, episodes, certifications, pay rates and payroll setup."""

from __future__ import annotations

import enum
from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from groundwork.db.base import Base
from groundwork.domain.mixins import IdMixin, TenantMixin, TimestampMixin


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"
    PENDING = "pending"
    ON_CALL = "on_call"


class EmployeeClassification(str, enum.Enum):
    HOURLY = "hourly"
    SALARIED = "salaried"
    CONTRACTOR = "contractor"
    APPRENTICE = "apprentice"
    SUPERVISOR = "supervisor"


class WorkerType(str, enum.Enum):
    FIELD = "field"
    OFFICE = "office"
    HYBRID = "hybrid"


class FlsaStatus(str, enum.Enum):
    NON_EXEMPT = "non_exempt"
    EXEMPT = "exempt"


class EmploymentType(str, enum.Enum):
    FULL_TIME = "full_time"
    PART_TIME = "part_time"
    SEASONAL = "seasonal"
    TEMPORARY = "temporary"


class PayFrequency(str, enum.Enum):
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    SEMI_MONTHLY = "semi_monthly"
    MONTHLY = "monthly"


class PayType(str, enum.Enum):
    HOURLY = "hourly"
    SALARY = "salary"


class PaymentMethod(str, enum.Enum):
    DIRECT_DEPOSIT = "direct_deposit"
    CHECK = "check"
    PAY_CARD = "pay_card"


class SeparationReason(str, enum.Enum):
    RESIGNATION = "resignation"
    TERMINATION = "termination"
    LAYOFF = "layoff"
    SEASONAL_END = "seasonal_end"
    PROJECT_END = "project_end"
    RETIREMENT = "retirement"
    OTHER = "other"


class CertificationStatus(str, enum.Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    INVALID = "invalid"
    EXPIRED = "expired"
    REVOKED = "revoked"


class RateType(str, enum.Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    PIECE = "piece"
    SALARY = "salary"


class RateSource(str, enum.Enum):
    MANUAL = "manual"
    UNION_SCALE = "union_scale"
    WAGE_DETERMINATION = "wage_determination"
    PAYROLL_IMPORT = "payroll_import"
    CALCULATED = "calculated"


class FilingStatus(str, enum.Enum):
    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"
    QUALIFYING_WIDOWER = "qualifying_widower"


class DeductionMethod(str, enum.Enum):
    FLAT_AMOUNT = "flat_amount"
    PERCENT_OF_GROSS = "percent_of_gross"
    PERCENT_OF_NET = "percent_of_net"
    PER_HOUR = "per_hour"


class Employee(Base, IdMixin, TenantMixin, TimestampMixin):
    """A worker on the company's books. Time entries and payroll key on this row."""

    __tablename__ = "employees"
    __table_args__ = (UniqueConstraint("tenant_id", "employee_number"),)

    employee_number: Mapped[str] = mapped_column(String(50), nullable=False)

    # Name
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    middle_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    preferred_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    suffix: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Personal (full SSN is never stored)
    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    ssn_last4: Mapped[Optional[str]] = mapped_column(String(4), nullable=True)

    # Contact
    email: Mapped[Optional[str]] = mapped_column(String(256), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    zip_code: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    country: Mapped[str] = mapped_column(String(2), default="US", nullable=False)

    # Employment
    status: Mapped[str] = mapped_column(
        String(20), default=EmployeeStatus.ACTIVE.value, nullable=False, index=True
    )
    classification: Mapped[str] = mapped_column(
        String(20), default=EmployeeClassification.HOURLY.value, nullable=False
    )
    worker_type: Mapped[str] = mapped_column(
        String(20), default=WorkerType.FIELD.value, nullable=False
    )
    flsa_status: Mapped[str] = mapped_column(
        String(20), default=FlsaStatus.NON_EXEMPT.value, nullable=False
    )
    employment_type: Mapped[str] = mapped_column(
        String(20), default=EmploymentType.FULL_TIME.value, nullable=False
    )
    job_title: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    trade_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    workers_comp_class_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    supervisor_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    original_hire_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    most_recent_hire_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    termination_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    eligible_for_rehire: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Tax jurisdiction
    home_state: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    sui_state: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)

    # Payroll
    pay_frequency: Mapped[str] = mapped_column(
        String(20), default=PayFrequency.WEEKLY.value, nullable=False
    )
    default_pay_type: Mapped[str] = mapped_column(
        String(20), default=PayType.HOURLY.value, nullable=False
    )
    base_hourly_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String(20), default=PaymentMethod.DIRECT_DEPOSIT.value, nullable=False
    )
    is_union_member: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE.value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class EmploymentEpisode(Base, IdMixin, TenantMixin, TimestampMixin):
    """One continuous stretch of employment. Rehires open a new episode."""

    __tablename__ = "employment_episodes"
    __table_args__ = (UniqueConstraint("employee_id", "episode_number"),)

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    episode_number: Mapped[int] = mapped_column(Integer, nullable=False)
    hire_date: Mapped[date] = mapped_column(Date, nullable=False)
    termination_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    separation_reason: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    eligible_for_rehire: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)
    was_voluntary: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    # Snapshot at hire and at separation
    union_dispatch_reference: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    job_classification_at_hire: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    hourly_rate_at_hire: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    position_at_hire: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    position_at_termination: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    @property
    def is_current(self) -> bool:
        return self.termination_date is None


class Certification(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "certifications"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    type_code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    certificate_number: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    issuing_authority: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    issue_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True, index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=CertificationStatus.PENDING.value, nullable=False
    )
    verified_by: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    verified_at: Mapped[Optional[date]] = mapped_column(Date, nullable=True)


class PayRate(Base, IdMixin, TenantMixin, TimestampMixin):
    """A rate an employee earns, optionally scoped to a project, shift or state."""

    __tablename__ = "pay_rates"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    description: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    rate_type: Mapped[str] = mapped_column(
        String(20), default=RateType.HOURLY.value, nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), default="USD", nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Scope (null means applies everywhere)
    project_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    shift_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    work_state: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)

    # Lower number wins
    priority: Mapped[int] = mapped_column(Integer, default=10, nullable=False)

    # Union fringe benefits, per hour
    health_welfare_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    pension_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    training_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    other_fringe_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)

    source: Mapped[str] = mapped_column(
        String(30), default=RateSource.MANUAL.value, nullable=False
    )
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    @property
    def total_fringe_rate(self) -> Decimal:
        return (
            Decimal(self.health_welfare_rate or 0)
            + Decimal(self.pension_rate or 0)
            + Decimal(self.training_rate or 0)
            + Decimal(self.other_fringe_rate or 0)
        )

    @property
    def total_hourly_cost(self) -> Decimal:
        return Decimal(self.amount) + self.total_fringe_rate

    def is_active_on(self, as_of: date) -> bool:
        if self.effective_date > as_of:
            return False
        return self.expiration_date is None or self.expiration_date >= as_of


def _active_between(effective: date, expiration: date | None, start: date, end: date) -> bool:
    """True when [effective, expiration] shares at least one day with [start, end]."""
    return effective <= end and (expiration is None or expiration >= start)


class WithholdingElection(Base, IdMixin, TenantMixin, TimestampMixin):
    """A W-4 (or state equivalent) election. One current election per jurisdiction."""

    __tablename__ = "withholding_elections"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    # "FEDERAL" or a two-letter state code
    tax_jurisdiction: Mapped[str] = mapped_column(String(10), default="FEDERAL", nullable=False)
    filing_status: Mapped[str] = mapped_column(
        String(30), default=FilingStatus.SINGLE.value, nullable=False
    )
    allowances: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    additional_withholding: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0, nullable=False)
    is_exempt: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    multiple_jobs_or_spouse_works: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Annual amounts from the form
    dependent_credits: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    other_income: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    deductions: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)

    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    signed_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    @property
    def is_current(self) -> bool:
        return self.expiration_date is None or self.expiration_date >= date.today()

    def applies_on(self, as_of: date) -> bool:
        return _active_between(self.effective_date, self.expiration_date, as_of, as_of)


class UnionMembership(Base, IdMixin, TenantMixin, TimestampMixin):
    """Membership in a union local, with the employer-paid fringe rates per hour."""

    __tablename__ = "union_memberships"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    union_local: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    membership_number: Mapped[str] = mapped_column(String(50), nullable=False)
    classification: Mapped[str] = mapped_column(String(50), nullable=False)
    apprentice_level: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    join_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    dues_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    dues_paid_through: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Hiring hall dispatch
    dispatch_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    dispatch_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    dispatch_list_position: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Fringes, per hour worked
    fringe_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4), nullable=True)
    health_welfare_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4), nullable=True)
    pension_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4), nullable=True)
    training_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4), nullable=True)

    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    @property
    def is_active(self) -> bool:
        return self.expiration_date is None or self.expiration_date >= date.today()

    @property
    def total_fringe_rate(self) -> Decimal:
        return (
            Decimal(self.fringe_rate or 0)
            + Decimal(self.health_welfare_rate or 0)
            + Decimal(self.pension_rate or 0)
            + Decimal(self.training_rate or 0)
        )

    def active_between(self, start: date, end: date) -> bool:
        return _active_between(self.effective_date, self.expiration_date, start, end)


class Deduction(Base, IdMixin, TenantMixin, TimestampMixin):
    """A recurring payroll deduction: benefits, 401(k), garnishments, union dues."""

    __tablename__ = "deductions"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    deduction_code: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(String(100), nullable=False)
    method: Mapped[str] = mapped_column(
        String(20), default=DeductionMethod.FLAT_AMOUNT.value, nullable=False
    )
    # Dollars for flat and per-hour methods, a percentage for the percent methods
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 4), nullable=False)
    max_per_period: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    annual_max: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    ytd_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)

    # Lower number is taken first
    priority: Mapped[int] = mapped_column(Integer, default=50, nullable=False, index=True)
    is_pre_tax: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Employer match, as a percentage of the amount deducted
    employer_match: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 4), nullable=True)
    employer_match_max: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)

    effective_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiration_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Garnishments
    case_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    garnishment_payee: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    @property
    def is_active(self) -> bool:
        return self.expiration_date is None or self.expiration_date >= date.today()

    def active_between(self, start: date, end: date) -> bool:
        return _active_between(self.effective_date, self.expiration_date, start, end)


class EmergencyContact(Base, IdMixin, TenantMixin, TimestampMixin):
    __tablename__ = "emergency_contacts"

    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("employees.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    relationship: Mapped[str] = mapped_column(String(50), nullable=False)
    primary_phone: Mapped[str] = mapped_column(String(20), nullable=False)
    secondary_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    # 1 is called first
    priority: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
