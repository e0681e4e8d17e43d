"""Payroll schemas: pay periods, batches and per-employee entries."""


from datetime import date, datetime

from pydantic import Field, model_validator

from groundwork.domain.hr import PayFrequency
from groundwork.domain.payroll import PayPeriodStatus, PayrollBatchStatus
from groundwork.schemas.common import CamelModel, Hours, Money


# ---------------------------------------------------------------------------
# Pay periods
# ---------------------------------------------------------------------------

class PayPeriodCreate(CamelModel):
    start_date: date
    end_date: date
    pay_date: date
    frequency: PayFrequency = PayFrequency.WEEKLY
    notes: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _check_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("endDate must be after startDate")
        if self.pay_date < self.end_date:
            raise ValueError("payDate must be on or after endDate")
        return self


class ClosePayPeriodRequest(CamelModel):
    closed_by: str | None = Field(default=None, max_length=200)


class PayPeriodOut(CamelModel):
    id: str
    start_date: date
    end_date: date
    pay_date: date
    frequency: PayFrequency
    status: PayPeriodStatus
    notes: str | None = None
    closed_by: str | None = None
    closed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Payroll batches
# ---------------------------------------------------------------------------

class PayrollBatchCreate(CamelModel):
    pay_period_id: str
    notes: str | None = Field(default=None, max_length=2000)
    created_by: str | None = Field(default=None, max_length=200)


class PayrollActionRequest(CamelModel):
    """Who is calculating, approving or posting a batch."""

    performed_by: str | None = Field(default=None, max_length=200)


class PayrollDeductionLineOut(CamelModel):
    deduction_id: str | None = None
    deduction_code: str
    description: str
    is_pre_tax: bool
    amount: Money
    employer_match: Money


class PayrollEntryOut(CamelModel):
    id: str
    employee_id: str
    regular_hours: Hours
    overtime_hours: Hours
    doubletime_hours: Hours
    hourly_rate: Money
    regular_pay: Money
    overtime_pay: Money
    doubletime_pay: Money
    gross_pay: Money
    federal_withholding: Money
    state_withholding: Money
    social_security: Money
    medicare: Money
    pre_tax_deductions: Money
    post_tax_deductions: Money
    total_deductions: Money
    net_pay: Money
    employer_taxes: Money
    union_fringes: Money
    employer_contributions: Money
    employer_cost: Money
    deduction_lines: list[PayrollDeductionLineOut] = []


class PayrollBatchSummaryOut(CamelModel):
    id: str
    pay_period_id: str
    batch_number: str
    status: PayrollBatchStatus
    total_regular_hours: Hours
    total_overtime_hours: Hours
    total_doubletime_hours: Hours
    total_gross: Money
    total_deductions: Money
    total_net: Money
    total_employer_taxes: Money
    total_union_fringes: Money
    total_employer_cost: Money
    employee_count: int
    created_by: str | None = None
    calculated_by: str | None = None
    calculated_at: datetime | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    posted_by: str | None = None
    posted_at: datetime | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime


class PayrollBatchOut(PayrollBatchSummaryOut):
    entries: list[PayrollEntryOut] = []
