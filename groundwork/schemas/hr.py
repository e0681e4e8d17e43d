"""HR schemas: employees, employment episodes, certifications and pay rates."""


from datetime import date, datetime, timedelta

from pydantic import Field, model_validator

from groundwork.domain.hr import (
    CertificationStatus,
    EmployeeClassification,
    EmployeeStatus,
    EmploymentType,
    FlsaStatus,
    PayFrequency,
    PaymentMethod,
    PayType,
    RateSource,
    RateType,
    SeparationReason,
    WorkerType,
)
from groundwork.schemas.common import EMAIL_PATTERN, PHONE_PATTERN, CamelModel, Hours, Money

MIN_WORKING_AGE = 14
MAX_AGE = 120
MAX_HIRE_LEAD_DAYS = 92  # roughly three months
MAX_EPISODE_LEAD_DAYS = 30


def _age_on(born: date, today: date) -> int:
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

class _EmployeeFields(CamelModel):
    middle_name: str | None = Field(default=None, max_length=100)
    preferred_name: str | None = Field(default=None, max_length=100)
    suffix: str | None = Field(default=None, max_length=20)
    date_of_birth: date | None = None
    ssn_last4: str | None = Field(default=None, pattern=r"^\d{4}$")
    email: str | None = Field(default=None, max_length=256, pattern=EMAIL_PATTERN)
    phone: str | None = Field(default=None, max_length=30, pattern=PHONE_PATTERN)
    address: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, max_length=100)
    state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    zip_code: str | None = Field(default=None, pattern=r"^\d{5}(-\d{4})?$")
    country: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    classification: EmployeeClassification | None = None
    worker_type: WorkerType | None = None
    flsa_status: FlsaStatus | None = None
    employment_type: EmploymentType | None = None
    job_title: str | None = Field(default=None, max_length=100)
    trade_code: str | None = Field(default=None, max_length=50)
    workers_comp_class_code: str | None = Field(default=None, max_length=20)
    supervisor_id: str | None = None
    home_state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    sui_state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    pay_frequency: PayFrequency | None = None
    default_pay_type: PayType | None = None
    base_hourly_rate: Money | None = Field(default=None, gt=0, le=1000)
    payment_method: PaymentMethod | None = None
    is_union_member: bool | None = None
    notes: str | None = Field(default=None, max_length=4000)

    @model_validator(mode="after")
    def _check_dates(self):
        today = date.today()
        if self.date_of_birth is not None:
            age = _age_on(self.date_of_birth, today)
            if age < MIN_WORKING_AGE:
                raise ValueError(f"Employee must be at least {MIN_WORKING_AGE} years old")
            if age > MAX_AGE:
                raise ValueError("dateOfBirth is not plausible")
        hire_date = getattr(self, "original_hire_date", None)
        if hire_date is not None and hire_date > today + timedelta(days=MAX_HIRE_LEAD_DAYS):
            raise ValueError("Hire date cannot be more than three months in the future")
        return self


class EmployeeCreate(_EmployeeFields):
    employee_number: str = Field(min_length=1, max_length=50, pattern=r"^[A-Za-z0-9\-]+$")
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    original_hire_date: date | None = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE


class EmployeeUpdate(_EmployeeFields):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    # Termination goes through /terminate so episodes stay in step
    status: EmployeeStatus | None = None

    @model_validator(mode="after")
    def _no_direct_termination(self):
        if self.status == EmployeeStatus.TERMINATED.value:
            raise ValueError("Use the terminate endpoint to terminate an employee")
        return self


class EmployeeOut(CamelModel):
    id: str
    employee_number: str
    first_name: str
    middle_name: str | None = None
    last_name: str
    preferred_name: str | None = None
    suffix: str | None = None
    full_name: str
    date_of_birth: date | None = None
    ssn_last4: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str
    status: EmployeeStatus
    is_active: bool
    classification: EmployeeClassification
    worker_type: WorkerType
    flsa_status: FlsaStatus
    employment_type: EmploymentType
    job_title: str | None = None
    trade_code: str | None = None
    workers_comp_class_code: str | None = None
    supervisor_id: str | None = None
    original_hire_date: date | None = None
    most_recent_hire_date: date | None = None
    termination_date: date | None = None
    eligible_for_rehire: bool
    home_state: str | None = None
    sui_state: str | None = None
    pay_frequency: PayFrequency
    default_pay_type: PayType
    base_hourly_rate: Money
    payment_method: PaymentMethod
    is_union_member: bool
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class TerminateEmployeeRequest(CamelModel):
    termination_date: date = Field(default_factory=date.today)
    separation_reason: SeparationReason
    eligible_for_rehire: bool = True
    notes: str | None = Field(default=None, max_length=1000)


class RehireEmployeeRequest(CamelModel):
    hire_date: date = Field(default_factory=date.today)
    notes: str | None = Field(default=None, max_length=1000)


class _EpisodeFields(CamelModel):
    union_dispatch_reference: str | None = Field(default=None, max_length=50)
    job_classification_at_hire: str | None = Field(default=None, max_length=100)
    hourly_rate_at_hire: Money | None = Field(default=None, ge=0, le=500)
    position_at_hire: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=1000)


class EmploymentEpisodeCreate(_EpisodeFields):
    employee_id: str
    hire_date: date

    @model_validator(mode="after")
    def _check_hire_date(self):
        if self.hire_date > date.today() + timedelta(days=MAX_EPISODE_LEAD_DAYS):
            raise ValueError(f"hireDate cannot be more than {MAX_EPISODE_LEAD_DAYS} days in the future")
        return self


class EmploymentEpisodeUpdate(_EpisodeFields):
    termination_date: date | None = None
    separation_reason: SeparationReason | None = None
    eligible_for_rehire: bool | None = None
    was_voluntary: bool | None = None
    position_at_termination: str | None = Field(default=None, max_length=100)


class EmploymentEpisodeOut(CamelModel):
    id: str
    employee_id: str
    episode_number: int
    hire_date: date
    termination_date: date | None = None
    separation_reason: SeparationReason | None = None
    eligible_for_rehire: bool | None = None
    was_voluntary: bool | None = None
    union_dispatch_reference: str | None = None
    job_classification_at_hire: str | None = None
    hourly_rate_at_hire: Money | None = None
    position_at_hire: str | None = None
    position_at_termination: str | None = None
    is_current: bool
    notes: str | None = None


class EmployeeStatsOut(CamelModel):
    employee_id: str
    employee_name: str
    total_hours: Hours
    regular_hours: Hours
    overtime_hours: Hours
    doubletime_hours: Hours
    total_earnings: Money
    project_count: int
    time_entry_count: int
    approved_entry_count: int
    pending_entry_count: int
    first_entry_date: date | None = None
    last_entry_date: date | None = None


# ---------------------------------------------------------------------------
# Certifications
# ---------------------------------------------------------------------------

class _CertificationFields(CamelModel):
    certificate_number: str | None = Field(default=None, max_length=100)
    issuing_authority: str | None = Field(default=None, max_length=200)
    issue_date: date | None = None
    expiration_date: date | None = None
    verified_by: str | None = Field(default=None, max_length=200)
    verified_at: date | None = None

    @model_validator(mode="after")
    def _check_dates(self):
        if self.issue_date and self.issue_date > date.today():
            raise ValueError("issueDate cannot be in the future")
        if self.issue_date and self.expiration_date and self.expiration_date <= self.issue_date:
            raise ValueError("expirationDate must be after issueDate")
        return self


class CertificationCreate(_CertificationFields):
    employee_id: str
    type_code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    status: CertificationStatus = CertificationStatus.PENDING


class CertificationUpdate(_CertificationFields):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    status: CertificationStatus | None = None


class CertificationOut(CamelModel):
    id: str
    employee_id: str
    type_code: str
    name: str
    certificate_number: str | None = None
    issuing_authority: str | None = None
    issue_date: date | None = None
    expiration_date: date | None = None
    status: CertificationStatus
    verified_by: str | None = None
    verified_at: date | None = None
    is_expired: bool = False
    days_until_expiration: int | None = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def _expiry(self):
        if self.expiration_date is not None:
            self.days_until_expiration = (self.expiration_date - date.today()).days
            self.is_expired = self.days_until_expiration < 0
        return self


# ---------------------------------------------------------------------------
# Pay rates
# ---------------------------------------------------------------------------

class _PayRateFields(CamelModel):
    description: str | None = Field(default=None, max_length=200)
    expiration_date: date | None = None
    project_id: str | None = None
    shift_code: str | None = Field(default=None, max_length=20)
    work_state: str | None = Field(default=None, pattern=r"^[A-Z]{2}$")
    priority: int | None = Field(default=None, ge=0, le=1000)
    health_welfare_rate: Money | None = Field(default=None, ge=0)
    pension_rate: Money | None = Field(default=None, ge=0)
    training_rate: Money | None = Field(default=None, ge=0)
    other_fringe_rate: Money | None = Field(default=None, ge=0)
    source: RateSource | None = None
    notes: str | None = Field(default=None, max_length=500)


class PayRateCreate(_PayRateFields):
    employee_id: str
    rate_type: RateType = RateType.HOURLY
    amount: Money = Field(gt=0)
    currency: str = Field(default="USD", pattern=r"^[A-Z]{3}$")
    effective_date: date

    @model_validator(mode="after")
    def _check_window(self):
        if self.expiration_date and self.expiration_date < self.effective_date:
            raise ValueError("expirationDate must not be before effectiveDate")
        return self


class PayRateUpdate(_PayRateFields):
    amount: Money | None = Field(default=None, gt=0)
    effective_date: date | None = None


class PayRateOut(CamelModel):
    id: str
    employee_id: str
    description: str | None = None
    rate_type: RateType
    amount: Money
    currency: str
    effective_date: date
    expiration_date: date | None = None
    project_id: str | None = None
    shift_code: str | None = None
    work_state: str | None = None
    priority: int
    health_welfare_rate: Money
    pension_rate: Money
    training_rate: Money
    other_fringe_rate: Money
    total_hourly_cost: Money
    source: RateSource
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ResolvedRateOut(CamelModel):
    employee_id: str
    project_id: str | None = None
    as_of: date
    hourly_rate: Money
    pay_rate_id: str | None = None
    # "pay_rate" when a configured rate matched, else "base_rate"
    source: str
