"""Payroll: pay periods and the batch lifecycle (draft → calculated → approved → posted).

Pay is computed from approved time entries in the batch's pay period. Each
entry is priced at the pay rate that applied to its project on its work
date, falling back to the employee's base hourly rate.

A calculated batch claims the time entries it paid, so a second batch in
the same period only picks up hours nobody has paid yet. Voiding releases
the claim. Withholding follows the employee's current federal and state
elections; active deductions and union fringes are applied per employee.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.config import settings
from groundwork.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from groundwork.core.money import ZERO, dsum, to_cents
from groundwork.core.pagination import PaginationParams
from groundwork.domain.hr import Deduction, DeductionMethod, PayFrequency, WithholdingElection
from groundwork.domain.payroll import (
    PayPeriod,
    PayPeriodStatus,
    PayrollBatch,
    PayrollBatchStatus,
    PayrollDeductionLine,
    PayrollEntry,
)
from groundwork.domain.time_tracking import TimeEntry
from groundwork.repositories.hr import (
    DeductionRepository,
    EmployeeRepository,
    PayRateRepository,
    UnionMembershipRepository,
    WithholdingElectionRepository,
)
from groundwork.repositories.payroll import PayPeriodRepository, PayrollBatchRepository
from groundwork.repositories.time_tracking import TimeEntryRepository
from groundwork.schemas.payroll import PayPeriodCreate, PayrollBatchCreate
from groundwork.services.hr import select_rate
from groundwork.services.labor_cost import DOUBLETIME_MULTIPLIER, OVERTIME_MULTIPLIER

logger = logging.getLogger(__name__)

SOCIAL_SECURITY_RATE = Decimal("0.062")
MEDICARE_RATE = Decimal("0.0145")
FUTA_RATE = Decimal("0.006")

DEFAULT_ACTOR = "system"


# ---------------------------------------------------------------------------
# Pay computation (pure)
# ---------------------------------------------------------------------------

PERIODS_PER_YEAR = {
    PayFrequency.WEEKLY.value: 52,
    PayFrequency.BI_WEEKLY.value: 26,
    PayFrequency.SEMI_MONTHLY.value: 24,
    PayFrequency.MONTHLY.value: 12,
}


@dataclass(frozen=True)
class PayLine:
    """Hours worked at a single rate."""

    regular_hours: Decimal
    overtime_hours: Decimal
    doubletime_hours: Decimal
    hourly_rate: Decimal
    fringe_rate: Decimal = ZERO


@dataclass(frozen=True)
class Withholding:
    """How one jurisdiction withholds income tax for one period.

    `credit` comes off the computed tax (dependent credits spread over the
    year). `taxable_adjustment` is added to taxable wages (other income
    less extra deductions, per period).
    """

    rate: Decimal
    additional: Decimal = ZERO
    exempt: bool = False
    credit: Decimal = ZERO
    taxable_adjustment: Decimal = ZERO


@dataclass(frozen=True)
class DeductionTerms:
    code: str
    description: str
    method: str
    amount: Decimal
    is_pre_tax: bool = False
    priority: int = 50
    max_per_period: Decimal | None = None
    # Annual max less what has already been taken this year
    remaining_annual: Decimal | None = None
    employer_match: Decimal | None = None
    employer_match_max: Decimal | None = None
    deduction_id: str | None = None


@dataclass(frozen=True)
class DeductionTaken:
    deduction_id: str | None
    deduction_code: str
    description: str
    is_pre_tax: bool
    amount: Decimal
    employer_match: Decimal


@dataclass(frozen=True)
class PayCalculation:
    regular_hours: Decimal
    overtime_hours: Decimal
    doubletime_hours: Decimal
    hourly_rate: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    doubletime_pay: Decimal
    gross_pay: Decimal
    federal_withholding: Decimal
    state_withholding: Decimal
    social_security: Decimal
    medicare: Decimal
    pre_tax_deductions: Decimal
    post_tax_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    employer_taxes: Decimal
    union_fringes: Decimal
    employer_contributions: Decimal
    employer_cost: Decimal
    deduction_lines: tuple[DeductionTaken, ...] = ()


def _withhold(taxable: Decimal, withholding: Withholding) -> Decimal:
    if withholding.exempt:
        return ZERO
    base = max(taxable + Decimal(withholding.taxable_adjustment or 0), ZERO)
    tax = max(to_cents(base * Decimal(withholding.rate)) - Decimal(withholding.credit or 0), ZERO)
    return to_cents(tax + Decimal(withholding.additional or 0))


def _deduction_amount(terms: DeductionTerms, *, gross: Decimal, net: Decimal, hours: Decimal, available: Decimal) -> Decimal:
    amount = Decimal(terms.amount or 0)
    if terms.method == DeductionMethod.PERCENT_OF_GROSS.value:
        value = gross * amount / 100
    elif terms.method == DeductionMethod.PERCENT_OF_NET.value:
        value = net * amount / 100
    elif terms.method == DeductionMethod.PER_HOUR.value:
        value = hours * amount
    else:
        value = amount
    value = to_cents(value)
    if terms.max_per_period is not None:
        value = min(value, Decimal(terms.max_per_period))
    if terms.remaining_annual is not None:
        value = min(value, Decimal(terms.remaining_annual))
    return to_cents(max(min(value, available), ZERO))


def _match(terms: DeductionTerms, taken: Decimal) -> Decimal:
    if not terms.employer_match:
        return ZERO
    value = to_cents(taken * Decimal(terms.employer_match) / 100)
    if terms.employer_match_max is not None:
        value = min(value, Decimal(terms.employer_match_max))
    return value


def calculate_pay(
    lines: Iterable[PayLine],
    *,
    union_member: bool = False,
    federal: Withholding | None = None,
    state: Withholding | None = None,
    deductions: Iterable[DeductionTerms] = (),
) -> PayCalculation:
    """One employee's pay for a period.

    Wages are rounded to cents per line, then summed. Pre-tax deductions
    lower the wages income tax is withheld on; FICA is always figured on
    gross. Post-tax deductions come out of what is left, lowest priority
    number first, and never take net pay below zero. Fringes only accrue
    for union members.
    """
    federal = federal or Withholding(rate=Decimal(str(settings.federal_withholding_rate)))
    state = state or Withholding(rate=Decimal(str(settings.state_withholding_rate)))

    regular_hours = overtime_hours = doubletime_hours = ZERO
    regular_pay = overtime_pay = doubletime_pay = fringes = ZERO
    last_rate = ZERO
    for line in lines:
        rate = Decimal(line.hourly_rate or 0)
        regular_hours += Decimal(line.regular_hours or 0)
        overtime_hours += Decimal(line.overtime_hours or 0)
        doubletime_hours += Decimal(line.doubletime_hours or 0)
        regular_pay += to_cents(Decimal(line.regular_hours or 0) * rate)
        overtime_pay += to_cents(Decimal(line.overtime_hours or 0) * rate * OVERTIME_MULTIPLIER)
        doubletime_pay += to_cents(Decimal(line.doubletime_hours or 0) * rate * DOUBLETIME_MULTIPLIER)
        if union_member:
            hours = Decimal(line.regular_hours or 0) + Decimal(line.overtime_hours or 0) + Decimal(line.doubletime_hours or 0)
            fringes += to_cents(hours * Decimal(line.fringe_rate or 0))
        last_rate = rate

    # Blended straight-time rate when the period mixes rates
    hourly_rate = to_cents(regular_pay / regular_hours) if regular_hours else last_rate
    total_hours = regular_hours + overtime_hours + doubletime_hours

    gross = regular_pay + overtime_pay + doubletime_pay
    ordered = sorted(deductions, key=lambda d: (d.priority, d.code))
    taken: list[DeductionTaken] = []

    def take(terms: DeductionTerms, amount: Decimal) -> None:
        if amount > ZERO:
            taken.append(DeductionTaken(
                deduction_id=terms.deduction_id,
                deduction_code=terms.code,
                description=terms.description,
                is_pre_tax=terms.is_pre_tax,
                amount=amount,
                employer_match=_match(terms, amount),
            ))

    pre_tax = ZERO
    for terms in (d for d in ordered if d.is_pre_tax):
        amount = _deduction_amount(terms, gross=gross, net=gross - pre_tax, hours=total_hours, available=gross - pre_tax)
        pre_tax += amount
        take(terms, amount)

    taxable = gross - pre_tax
    federal_withholding = _withhold(taxable, federal)
    state_withholding = _withhold(taxable, state)
    social_security = to_cents(gross * SOCIAL_SECURITY_RATE)
    medicare = to_cents(gross * MEDICARE_RATE)
    taxes = federal_withholding + state_withholding + social_security + medicare

    net_before = max(gross - pre_tax - taxes, ZERO)
    post_tax = ZERO
    for terms in (d for d in ordered if not d.is_pre_tax):
        amount = _deduction_amount(terms, gross=gross, net=net_before, hours=total_hours, available=net_before - post_tax)
        post_tax += amount
        take(terms, amount)

    deductions_total = taxes + pre_tax + post_tax
    employer_taxes = social_security + medicare + to_cents(gross * FUTA_RATE)
    contributions = dsum(t.employer_match for t in taken)

    return PayCalculation(
        regular_hours=regular_hours,
        overtime_hours=overtime_hours,
        doubletime_hours=doubletime_hours,
        hourly_rate=hourly_rate,
        regular_pay=regular_pay,
        overtime_pay=overtime_pay,
        doubletime_pay=doubletime_pay,
        gross_pay=gross,
        federal_withholding=federal_withholding,
        state_withholding=state_withholding,
        social_security=social_security,
        medicare=medicare,
        pre_tax_deductions=pre_tax,
        post_tax_deductions=post_tax,
        total_deductions=deductions_total,
        net_pay=gross - deductions_total,
        employer_taxes=employer_taxes,
        union_fringes=fringes,
        employer_contributions=contributions,
        employer_cost=gross + employer_taxes + fringes + contributions,
        deduction_lines=tuple(taken),
    )


def withholding_from(election: WithholdingElection | None, rate: Decimal, periods_per_year: int) -> Withholding:
    """Per-period withholding terms for an employee's election (or the flat rate without one)."""
    if election is None:
        return Withholding(rate=rate)
    periods = Decimal(periods_per_year)
    credit = Decimal(election.dependent_credits or 0) / periods
    adjustment = (Decimal(election.other_income or 0) - Decimal(election.deductions or 0)) / periods
    return Withholding(
        rate=rate,
        additional=Decimal(election.additional_withholding or 0),
        exempt=election.is_exempt,
        credit=to_cents(credit),
        taxable_adjustment=to_cents(adjustment),
    )


def deduction_terms(deduction: Deduction) -> DeductionTerms:
    remaining = None
    if deduction.annual_max is not None:
        remaining = max(Decimal(deduction.annual_max) - Decimal(deduction.ytd_amount or 0), ZERO)
    return DeductionTerms(
        code=deduction.deduction_code,
        description=deduction.description,
        method=deduction.method,
        amount=Decimal(deduction.amount),
        is_pre_tax=deduction.is_pre_tax,
        priority=deduction.priority,
        max_per_period=deduction.max_per_period,
        remaining_annual=remaining,
        employer_match=deduction.employer_match,
        employer_match_max=deduction.employer_match_max,
        deduction_id=deduction.id,
    )


def _election_for(elections, jurisdiction: str | None, as_of: date) -> WithholdingElection | None:
    if not jurisdiction:
        return None
    matching = [
        e for e in elections
        if e.tax_jurisdiction == jurisdiction.upper() and e.applies_on(as_of)
    ]
    return max(matching, key=lambda e: e.effective_date, default=None)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Pay periods
# ---------------------------------------------------------------------------

class PayPeriodService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = PayPeriodRepository(session, tenant_id)
        self._batches = PayrollBatchRepository(session, tenant_id)

    async def list_pay_periods(self, pagination: PaginationParams, *, status: str | None = None):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"status": status},
        )

    async def get_pay_period(self, period_id: str) -> PayPeriod:
        period = await self._repo.get_by_id(period_id)
        if not period:
            raise NotFoundError("Pay period", period_id)
        return period

    async def get_current(self) -> PayPeriod:
        period = await self._repo.current(date.today())
        if not period:
            raise NotFoundError("Open pay period")
        return period

    async def create_pay_period(self, data: PayPeriodCreate) -> PayPeriod:
        if await self._repo.overlaps(data.start_date, data.end_date):
            raise ConflictError("Pay period overlaps with an existing period", code="OVERLAP")
        period = await self._repo.create(**data.model_dump(exclude_none=True))
        logger.info("Opened pay period %s to %s", period.start_date, period.end_date)
        return period

    async def close_pay_period(self, period_id: str, closed_by: str | None = None) -> PayPeriod:
        period = await self.get_pay_period(period_id)
        if period.status == PayPeriodStatus.CLOSED.value:
            raise BusinessRuleError("Pay period is already closed", code="ALREADY_CLOSED")
        batches = await self._batches.for_period(period_id)
        if any(
            b.status not in (PayrollBatchStatus.POSTED.value, PayrollBatchStatus.VOIDED.value)
            for b in batches
        ):
            raise BusinessRuleError(
                "All batches must be posted before closing the period", code="BATCHES_NOT_POSTED"
            )
        period.status = PayPeriodStatus.CLOSED.value
        period.closed_by = closed_by or DEFAULT_ACTOR
        period.closed_at = _now()
        period = await self._repo.save(period)
        logger.info("Closed pay period %s (%d batches)", period.id, len(batches))
        return period


# ---------------------------------------------------------------------------
# Payroll batches
# ---------------------------------------------------------------------------

class PayrollBatchService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._tenant_id = tenant_id
        self._repo = PayrollBatchRepository(session, tenant_id)
        self._periods = PayPeriodRepository(session, tenant_id)
        self._entries = TimeEntryRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)
        self._rates = PayRateRepository(session, tenant_id)
        self._elections = WithholdingElectionRepository(session, tenant_id)
        self._memberships = UnionMembershipRepository(session, tenant_id)
        self._deductions = DeductionRepository(session, tenant_id)

    async def list_batches(
        self,
        pagination: PaginationParams,
        *,
        pay_period_id: str | None = None,
        status: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"pay_period_id": pay_period_id, "status": status},
        )

    async def get_batch(self, batch_id: str) -> PayrollBatch:
        batch = await self._repo.get_by_id(batch_id)
        if not batch:
            raise NotFoundError("Payroll batch", batch_id)
        return batch

    async def create_batch(self, data: PayrollBatchCreate) -> PayrollBatch:
        period = await self._periods.get_by_id(data.pay_period_id)
        if not period:
            raise NotFoundError("Pay period", data.pay_period_id, code="PERIOD_NOT_FOUND")
        if period.status == PayPeriodStatus.CLOSED.value:
            raise BusinessRuleError("Pay period is closed", code="PERIOD_CLOSED")

        sequence = await self._repo.next_sequence(period.id)
        batch = await self._repo.add(
            PayrollBatch(
                pay_period_id=period.id,
                batch_number=f"{period.end_date:%Y%m%d}-{sequence:02d}",
                status=PayrollBatchStatus.DRAFT.value,
                notes=data.notes,
                entries=[],
                created_by=data.created_by or DEFAULT_ACTOR,
            )
        )
        if period.status == PayPeriodStatus.OPEN.value:
            period.status = PayPeriodStatus.PROCESSING.value
            await self._periods.save(period)
        logger.info("Created payroll batch %s", batch.batch_number)
        return batch

    async def calculate_batch(self, batch_id: str, performed_by: str | None = None) -> PayrollBatch:
        batch = await self.get_batch(batch_id)
        if batch.status not in (PayrollBatchStatus.DRAFT.value, PayrollBatchStatus.CALCULATED.value):
            raise BusinessRuleError(
                f"Cannot calculate a {batch.status} batch", code="INVALID_STATUS"
            )
        period = await self._periods.get_by_id(batch.pay_period_id)
        if not period:
            raise NotFoundError("Pay period", batch.pay_period_id, code="PERIOD_NOT_FOUND")

        # Hours another live batch already paid stay with that batch
        time_entries = await self._entries.payable(period.start_date, period.end_date, batch.id)
        await self._entries.release(batch.id)
        by_employee: dict[str, list[TimeEntry]] = defaultdict(list)
        for entry in time_entries:
            by_employee[entry.employee_id].append(entry)

        employees = await self._employees.get_many(by_employee)
        rates = await self._rates.find_for_employees(by_employee)
        elections = await self._elections.find_for_employees(by_employee)
        memberships = await self._memberships.find_for_employees(by_employee)
        deductions = await self._deductions.find_for_employees(by_employee)
        periods_per_year = PERIODS_PER_YEAR.get(period.frequency, 26)
        federal_rate = Decimal(str(settings.federal_withholding_rate))
        state_rate = Decimal(str(settings.state_withholding_rate))

        entries: list[PayrollEntry] = []
        for employee_id in sorted(by_employee):
            employee = employees.get(employee_id)
            if employee is None:
                continue
            membership = next(
                (m for m in memberships.get(employee_id, []) if m.active_between(period.start_date, period.end_date)),
                None,
            )
            lines = []
            for entry in by_employee[employee_id]:
                rate = select_rate(rates.get(employee_id, []), project_id=entry.project_id, as_of=entry.work_date)
                fringe = rate.total_fringe_rate if rate else ZERO
                if not fringe and membership is not None:
                    fringe = membership.total_fringe_rate
                lines.append(
                    PayLine(
                        regular_hours=entry.regular_hours,
                        overtime_hours=entry.overtime_hours,
                        doubletime_hours=entry.doubletime_hours,
                        hourly_rate=rate.amount if rate else employee.base_hourly_rate,
                        fringe_rate=fringe,
                    )
                )
                entry.payroll_batch_id = batch.id

            employee_elections = elections.get(employee_id, [])
            pay = calculate_pay(
                lines,
                union_member=employee.is_union_member or membership is not None,
                federal=withholding_from(
                    _election_for(employee_elections, "FEDERAL", period.end_date), federal_rate, periods_per_year
                ),
                state=withholding_from(
                    _election_for(employee_elections, employee.home_state or employee.state, period.end_date),
                    state_rate,
                    periods_per_year,
                ),
                deductions=[
                    deduction_terms(d)
                    for d in deductions.get(employee_id, [])
                    if d.active_between(period.start_date, period.end_date)
                ],
            )
            fields = asdict(pay)
            taken = fields.pop("deduction_lines")
            entries.append(
                PayrollEntry(
                    tenant_id=self._tenant_id,
                    employee_id=employee_id,
                    deduction_lines=[
                        PayrollDeductionLine(tenant_id=self._tenant_id, position=i, **line)
                        for i, line in enumerate(taken)
                    ],
                    **fields,
                )
            )

        batch.entries = entries
        batch.total_regular_hours = dsum(e.regular_hours for e in entries)
        batch.total_overtime_hours = dsum(e.overtime_hours for e in entries)
        batch.total_doubletime_hours = dsum(e.doubletime_hours for e in entries)
        batch.total_gross = dsum(e.gross_pay for e in entries)
        batch.total_deductions = dsum(e.total_deductions for e in entries)
        batch.total_net = dsum(e.net_pay for e in entries)
        batch.total_employer_taxes = dsum(e.employer_taxes for e in entries)
        batch.total_union_fringes = dsum(e.union_fringes for e in entries)
        batch.total_employer_cost = dsum(e.employer_cost for e in entries)
        batch.employee_count = len(entries)
        batch.status = PayrollBatchStatus.CALCULATED.value
        batch.calculated_by = performed_by or DEFAULT_ACTOR
        batch.calculated_at = _now()
        batch = await self._repo.save(batch)
        logger.info(
            "Calculated payroll batch %s: %d employees, gross %s",
            batch.batch_number, batch.employee_count, batch.total_gross,
        )
        return batch

    async def approve_batch(self, batch_id: str, performed_by: str | None = None) -> PayrollBatch:
        batch = await self.get_batch(batch_id)
        if batch.status != PayrollBatchStatus.CALCULATED.value:
            raise BusinessRuleError("Batch must be calculated before approval", code="NOT_CALCULATED")
        batch.status = PayrollBatchStatus.APPROVED.value
        batch.approved_by = performed_by or DEFAULT_ACTOR
        batch.approved_at = _now()
        batch = await self._repo.save(batch)
        logger.info("Approved payroll batch %s", batch.batch_number)
        return batch

    async def post_batch(self, batch_id: str, performed_by: str | None = None) -> PayrollBatch:
        batch = await self.get_batch(batch_id)
        if batch.status != PayrollBatchStatus.APPROVED.value:
            raise BusinessRuleError("Batch must be approved before posting", code="NOT_APPROVED")
        batch.status = PayrollBatchStatus.POSTED.value
        batch.posted_by = performed_by or DEFAULT_ACTOR
        batch.posted_at = _now()
        await self._accrue_deductions(batch)
        batch = await self._repo.save(batch)
        logger.info("Posted payroll batch %s (net %s)", batch.batch_number, batch.total_net)
        return batch

    async def void_batch(self, batch_id: str) -> PayrollBatch:
        batch = await self.get_batch(batch_id)
        if batch.status == PayrollBatchStatus.POSTED.value:
            raise BusinessRuleError("Posted batches cannot be voided", code="ALREADY_POSTED")
        if batch.status == PayrollBatchStatus.VOIDED.value:
            raise BusinessRuleError("Batch is already voided", code="INVALID_STATUS")
        await self._entries.release(batch.id)
        batch.status = PayrollBatchStatus.VOIDED.value
        batch = await self._repo.save(batch)
        logger.info("Voided payroll batch %s", batch.batch_number)
        return batch

    async def _accrue_deductions(self, batch: PayrollBatch) -> None:
        """Add what the batch took to each deduction's year-to-date total."""
        taken: dict[str, Decimal] = defaultdict(Decimal)
        for entry in batch.entries:
            for line in entry.deduction_lines:
                if line.deduction_id:
                    taken[line.deduction_id] += Decimal(line.amount)
        for deduction_id, deduction in (await self._deductions.get_many(taken)).items():
            deduction.ytd_amount = Decimal(deduction.ytd_amount or 0) + taken[deduction_id]

    async def delete_batch(self, batch_id: str) -> None:
        batch = await self.get_batch(batch_id)
        if batch.status != PayrollBatchStatus.DRAFT.value:
            raise BusinessRuleError("Only draft batches can be deleted", code="INVALID_STATUS")
        await self._repo.soft_delete(batch_id)
