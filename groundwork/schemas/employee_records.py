"""Schemas for the payroll setup kept per employee: withholding, union, deductions, emergency contacts."""


from datetime import date, datetime

from pydantic import Field, field_validator, model_validator

from groundwork.domain.hr import DeductionMethod, FilingStatus
from groundwork.schemas.common import EMAIL_PATTERN, PHONE_PATTERN, CamelModel, Money

US_STATES = frozenset(
    "AL AK AZ AR CA CO CT DE DC FL GA HI ID IL IN IA KS KY LA ME MD MA MI MN MS MO MT NE NV NH "
    "NJ NM NY NC ND OH OK OR PA RI SC SD TN TX UT VT VA WA WV WI WY".split()
)
FEDERAL = "FEDERAL"


def _check_window(effective: date | None, expiration: date | None) -> None:
    if effective and expiration and expiration < effective:
        raise ValueError("expirationDate must not be before effectiveDate")


# ---------------------------------------------------------------------------
# Withholding elections
# ---------------------------------------------------------------------------

class _WithholdingFields(CamelModel):
    allowances: int | None = Field(default=None, ge=0, le=99)
    additional_withholding: Money | None = Field(default=None, ge=0)
    is_exempt: bool | None = None
    multiple_jobs_or_spouse_works: bool | None = None
    dependent_credits: Money | None = Field(default=None, ge=0)
    other_income: Money | None = Field(default=None, ge=0)
    deductions: Money | None = Field(default=None, ge=0)
    expiration_date: date | None = None
    signed_date: date | None = None
    notes: str | None = Field(default=None, max_length=500)


class WithholdingElectionCreate(_WithholdingFields):
    employee_id: str
    tax_jurisdiction: str = FEDERAL
    filing_status: FilingStatus = FilingStatus.SINGLE
    effective_date: date = Field(default_factory=date.today)

    @field_validator("tax_jurisdiction")
    @classmethod
    def _jurisdiction(cls, value: str) -> str:
        value = value.strip().upper()
        if value != FEDERAL and value not in US_STATES:
            raise ValueError("taxJurisdiction must be FEDERAL or a two-letter state code")
        return value

    @model_validator(mode="after")
    def _check_dates(self):
        _check_window(self.effective_date, self.expiration_date)
        return self


class WithholdingElectionUpdate(_WithholdingFields):
    filing_status: FilingStatus | None = None


class WithholdingElectionOut(CamelModel):
    id: str
    employee_id: str
    tax_jurisdiction: str
    filing_status: FilingStatus
    allowances: int
    additional_withholding: Money
    is_exempt: bool
    multiple_jobs_or_spouse_works: bool
    dependent_credits: Money | None = None
    other_income: Money | None = None
    deductions: Money | None = None
    effective_date: date
    expiration_date: date | None = None
    signed_date: date | None = None
    is_current: bool
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Union memberships
# ---------------------------------------------------------------------------

class _UnionFields(CamelModel):
    apprentice_level: int | None = Field(default=None, ge=1, le=10)
    join_date: date | None = None
    dues_paid: bool | None = None
    dues_paid_through: date | None = None
    dispatch_number: str | None = Field(default=None, max_length=50)
    dispatch_date: date | None = None
    dispatch_list_position: int | None = Field(default=None, ge=1)
    fringe_rate: Money | None = Field(default=None, ge=0)
    health_welfare_rate: Money | None = Field(default=None, ge=0)
    pension_rate: Money | None = Field(default=None, ge=0)
    training_rate: Money | None = Field(default=None, ge=0)
    expiration_date: date | None = None
    notes: str | None = Field(default=None, max_length=500)


class UnionMembershipCreate(_UnionFields):
    employee_id: str
    union_local: str = Field(min_length=1, max_length=100)
    membership_number: str = Field(min_length=1, max_length=50)
    classification: str = Field(min_length=1, max_length=50)
    effective_date: date

    @model_validator(mode="after")
    def _check_dates(self):
        _check_window(self.effective_date, self.expiration_date)
        return self


class UnionMembershipUpdate(_UnionFields):
    union_local: str | None = Field(default=None, min_length=1, max_length=100)
    membership_number: str | None = Field(default=None, min_length=1, max_length=50)
    classification: str | None = Field(default=None, min_length=1, max_length=50)


class UnionMembershipOut(CamelModel):
    id: str
    employee_id: str
    union_local: str
    membership_number: str
    classification: str
    apprentice_level: int | None = None
    join_date: date | None = None
    dues_paid: bool
    dues_paid_through: date | None = None
    dispatch_number: str | None = None
    dispatch_date: date | None = None
    dispatch_list_position: int | None = None
    fringe_rate: Money | None = None
    health_welfare_rate: Money | None = None
    pension_rate: Money | None = None
    training_rate: Money | None = None
    total_fringe_rate: Money
    effective_date: date
    expiration_date: date | None = None
    is_active: bool
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Deductions
# ---------------------------------------------------------------------------

class _DeductionFields(CamelModel):
    max_per_period: Money | None = Field(default=None, ge=0)
    annual_max: Money | None = Field(default=None, ge=0)
    priority: int | None = Field(default=None, ge=1, le=999)
    is_pre_tax: bool | None = None
    employer_match: Money | None = Field(default=None, ge=0, le=100)
    employer_match_max: Money | None = Field(default=None, ge=0)
    expiration_date: date | None = None
    case_number: str | None = Field(default=None, max_length=50)
    garnishment_payee: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None, max_length=500)


def _check_percentage(method, amount) -> None:
    percent = (DeductionMethod.PERCENT_OF_GROSS.value, DeductionMethod.PERCENT_OF_NET.value)
    if method in percent and amount is not None and amount > 100:
        raise ValueError("A percentage deduction cannot exceed 100")


class DeductionCreate(_DeductionFields):
    employee_id: str
    deduction_code: str = Field(min_length=1, max_length=20)
    description: str = Field(min_length=1, max_length=100)
    method: DeductionMethod = DeductionMethod.FLAT_AMOUNT
    amount: Money = Field(ge=0)
    effective_date: date = Field(default_factory=date.today)

    @field_validator("deduction_code")
    @classmethod
    def _upper(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _check(self):
        _check_window(self.effective_date, self.expiration_date)
        _check_percentage(self.method, self.amount)
        return self


class DeductionUpdate(_DeductionFields):
    description: str | None = Field(default=None, min_length=1, max_length=100)
    method: DeductionMethod | None = None
    amount: Money | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check(self):
        _check_percentage(self.method, self.amount)
        return self


class DeductionOut(CamelModel):
    id: str
    employee_id: str
    deduction_code: str
    description: str
    method: DeductionMethod
    amount: Money
    max_per_period: Money | None = None
    annual_max: Money | None = None
    ytd_amount: Money
    priority: int
    is_pre_tax: bool
    employer_match: Money | None = None
    employer_match_max: Money | None = None
    effective_date: date
    expiration_date: date | None = None
    is_active: bool
    case_number: str | None = None
    garnishment_payee: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Emergency contacts
# ---------------------------------------------------------------------------

class _ContactFields(CamelModel):
    secondary_phone: str | None = Field(default=None, max_length=20, pattern=PHONE_PATTERN)
    email: str | None = Field(default=None, max_length=100, pattern=EMAIL_PATTERN)
    priority: int | None = Field(default=None, ge=1, le=10)
    notes: str | None = Field(default=None, max_length=500)


class EmergencyContactCreate(_ContactFields):
    employee_id: str
    name: str = Field(min_length=1, max_length=100)
    relationship: str = Field(min_length=1, max_length=50)
    primary_phone: str = Field(min_length=1, max_length=20, pattern=PHONE_PATTERN)


class EmergencyContactUpdate(_ContactFields):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    relationship: str | None = Field(default=None, min_length=1, max_length=50)
    primary_phone: str | None = Field(default=None, min_length=1, max_length=20, pattern=PHONE_PATTERN)


class EmergencyContactOut(CamelModel):
    id: str
    employee_id: str
    name: str
    relationship: str
    primary_phone: str
    secondary_phone: str | None = None
    email: str | None = None
    priority: int
    notes: str | None = None
    created_at: datetime
    updated_at: datetime
