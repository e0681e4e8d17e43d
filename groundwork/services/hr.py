"""HR services: employee lifecycle (hire, terminate, rehire), certifications and pay rates."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import BusinessRuleError, ConflictError, NotFoundError
from groundwork.core.money import dsum
from groundwork.core.pagination import PaginationParams
from groundwork.domain.hr import (
    Certification,
    Employee,
    EmployeeStatus,
    EmploymentEpisode,
    PayRate,
    RateType,
)
from groundwork.domain.time_tracking import ProjectAssignment, TimeEntry, TimeEntryStatus
from groundwork.repositories.hr import (
    CertificationRepository,
    EmployeeRepository,
    EmploymentEpisodeRepository,
    PayRateRepository,
)
from groundwork.repositories.time_tracking import ProjectAssignmentRepository, TimeEntryRepository
from groundwork.schemas.hr import (
    CertificationCreate,
    CertificationUpdate,
    EmployeeCreate,
    EmployeeStatsOut,
    EmployeeUpdate,
    PayRateCreate,
    PayRateUpdate,
    RehireEmployeeRequest,
    ResolvedRateOut,
    TerminateEmployeeRequest,
)
from groundwork.services.labor_cost import LaborCostCalculator

logger = logging.getLogger(__name__)

# Friendly sort names accepted by the employee list
_EMPLOYEE_SORT_ALIASES = {"hire_date": "most_recent_hire_date", "name": "last_name"}


class EmployeeService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = EmployeeRepository(session, tenant_id)
        self._episodes = EmploymentEpisodeRepository(session, tenant_id)
        self._assignments = ProjectAssignmentRepository(session, tenant_id)
        self._entries = TimeEntryRepository(session, tenant_id)

    async def list_employees(
        self,
        pagination: PaginationParams,
        *,
        status: str | None = None,
        include_terminated: bool = False,
        classification: str | None = None,
        worker_type: str | None = None,
        trade_code: str | None = None,
        search: str | None = None,
    ):
        conditions = []
        if search:
            conditions.append(EmployeeRepository.search_condition(search))
        if not status and not include_terminated:
            conditions.append(Employee.status != EmployeeStatus.TERMINATED.value)
        sort = _EMPLOYEE_SORT_ALIASES.get(pagination.sort, pagination.sort) if pagination.sort else None
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=sort,
            order=pagination.order if sort else None,
            filters={
                "status": status,
                "classification": classification,
                "worker_type": worker_type,
                "trade_code": trade_code,
            },
            conditions=conditions,
        )

    async def get_employee(self, employee_id: str) -> Employee:
        employee = await self._repo.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def create_employee(self, data: EmployeeCreate) -> Employee:
        if await self._repo.number_taken(data.employee_number):
            raise ConflictError(
                f"Employee number '{data.employee_number}' already exists",
                code="DUPLICATE_EMPLOYEE_NUMBER",
            )
        fields = data.model_dump(exclude_none=True)
        hire_date = fields.setdefault("original_hire_date", date.today())
        fields.setdefault("most_recent_hire_date", hire_date)
        employee = await self._repo.create(**fields)
        await self._episodes.create(employee_id=employee.id, episode_number=1, hire_date=hire_date)
        logger.info("Hired employee %s (%s)", employee.employee_number, employee.id)
        return employee

    async def update_employee(self, employee_id: str, data: EmployeeUpdate) -> Employee:
        await self.get_employee(employee_id)
        return await self._repo.update(employee_id, **self._repo.changes(data))  # type: ignore[return-value]

    async def delete_employee(self, employee_id: str) -> None:
        deleted = await self._repo.soft_delete(employee_id)
        if not deleted:
            raise NotFoundError("Employee", employee_id)

    # ------------------------------------------------------------------
    # Employment episodes
    # ------------------------------------------------------------------

    async def list_episodes(self, employee_id: str) -> list[EmploymentEpisode]:
        await self.get_employee(employee_id)
        return await self._episodes.find(
            EmploymentEpisode.employee_id == employee_id,
            order_by=EmploymentEpisode.episode_number,
        )

    async def terminate_employee(self, employee_id: str, data: TerminateEmployeeRequest) -> Employee:
        employee = await self.get_employee(employee_id)
        if employee.status == EmployeeStatus.TERMINATED.value:
            raise BusinessRuleError("Employee is already terminated", code="ALREADY_TERMINATED")

        episode = await self._episodes.open_episode(employee_id)
        if episode is not None:
            episode.termination_date = data.termination_date
            episode.separation_reason = data.separation_reason
            episode.eligible_for_rehire = data.eligible_for_rehire
            episode.notes = data.notes

        # Terminated employees come off every project they were on
        for assignment in await self._assignments.find(
            ProjectAssignment.employee_id == employee_id,
            ProjectAssignment.is_active.is_(True),
        ):
            assignment.is_active = False
            assignment.end_date = max(data.termination_date, assignment.start_date)

        employee.status = EmployeeStatus.TERMINATED.value
        employee.termination_date = data.termination_date
        employee.eligible_for_rehire = data.eligible_for_rehire
        employee = await self._repo.save(employee)
        logger.info("Terminated employee %s (%s)", employee.employee_number, data.separation_reason)
        return employee

    async def rehire_employee(self, employee_id: str, data: RehireEmployeeRequest) -> Employee:
        employee = await self.get_employee(employee_id)
        if await self._episodes.open_episode(employee_id) is not None:
            raise ConflictError("Employee already has an open employment episode", code="ACTIVE_EPISODE_EXISTS")
        if employee.status != EmployeeStatus.TERMINATED.value or not employee.eligible_for_rehire:
            raise BusinessRuleError("Employee is not eligible for rehire", code="NOT_ELIGIBLE")

        await self._episodes.create(
            employee_id=employee_id,
            episode_number=await self._episodes.next_episode_number(employee_id),
            hire_date=data.hire_date,
            notes=data.notes,
        )
        employee.status = EmployeeStatus.ACTIVE.value
        employee.most_recent_hire_date = data.hire_date
        employee.termination_date = None
        employee = await self._repo.save(employee)
        logger.info("Rehired employee %s", employee.employee_number)
        return employee

    # ------------------------------------------------------------------
    # Time tracking views
    # ------------------------------------------------------------------

    async def get_stats(self, employee_id: str) -> EmployeeStatsOut:
        employee = await self.get_employee(employee_id)
        entries = await self._entries.find(TimeEntry.employee_id == employee_id)
        approved = [e for e in entries if e.status == TimeEntryStatus.APPROVED.value]
        earnings = LaborCostCalculator().total((e, employee.base_hourly_rate) for e in approved)
        dates = [e.work_date for e in entries]
        return EmployeeStatsOut(
            employee_id=employee.id,
            employee_name=employee.full_name,
            regular_hours=dsum(e.regular_hours for e in entries),
            overtime_hours=dsum(e.overtime_hours for e in entries),
            doubletime_hours=dsum(e.doubletime_hours for e in entries),
            total_hours=dsum(e.total_hours for e in entries),
            total_earnings=earnings.base_wage_cost,
            project_count=len({e.project_id for e in entries}),
            time_entry_count=len(entries),
            approved_entry_count=len(approved),
            pending_entry_count=sum(1 for e in entries if e.status == TimeEntryStatus.SUBMITTED.value),
            first_entry_date=min(dates) if dates else None,
            last_entry_date=max(dates) if dates else None,
        )


# ---------------------------------------------------------------------------
# Certifications
# ---------------------------------------------------------------------------

class CertificationService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = CertificationRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)

    async def list_certifications(
        self,
        pagination: PaginationParams,
        *,
        employee_id: str | None = None,
        status: str | None = None,
        type_code: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order if pagination.sort else None,
            filters={"employee_id": employee_id, "status": status, "type_code": type_code},
        )

    async def list_expiring(self, days: int = 30, include_expired: bool = False) -> list[Certification]:
        """Certifications expiring within `days`, soonest first."""
        today = date.today()
        conditions = [
            Certification.expiration_date.is_not(None),
            Certification.expiration_date <= today + timedelta(days=days),
        ]
        if not include_expired:
            conditions.append(Certification.expiration_date >= today)
        return await self._repo.find(*conditions, order_by=Certification.expiration_date)

    async def get_certification(self, certification_id: str) -> Certification:
        certification = await self._repo.get_by_id(certification_id)
        if not certification:
            raise NotFoundError("Certification", certification_id)
        return certification

    async def create_certification(self, data: CertificationCreate) -> Certification:
        if not await self._employees.get_by_id(data.employee_id):
            raise NotFoundError("Employee", data.employee_id, code="EMPLOYEE_NOT_FOUND")
        if await self._repo.exists(
            Certification.employee_id == data.employee_id,
            Certification.type_code == data.type_code,
        ):
            raise ConflictError(
                f"Employee already has a '{data.type_code}' certification",
                code="DUPLICATE_CERTIFICATION",
            )
        return await self._repo.create(**data.model_dump(exclude_none=True))

    async def update_certification(self, certification_id: str, data: CertificationUpdate) -> Certification:
        certification = await self.get_certification(certification_id)
        changes = self._repo.changes(data)
        issue = changes.get("issue_date", certification.issue_date)
        expiry = changes.get("expiration_date", certification.expiration_date)
        if issue and expiry and expiry <= issue:
            raise BusinessRuleError("expirationDate must be after issueDate", code="VALIDATION_ERROR")
        return await self._repo.update(certification_id, **changes)  # type: ignore[return-value]

    async def delete_certification(self, certification_id: str) -> None:
        deleted = await self._repo.soft_delete(certification_id)
        if not deleted:
            raise NotFoundError("Certification", certification_id)


# ---------------------------------------------------------------------------
# Pay rates
# ---------------------------------------------------------------------------

def select_rate(rates: list[PayRate], *, project_id: str | None, as_of: date) -> PayRate | None:
    """Pick the hourly rate that applies on `as_of` for work on `project_id`.

    Project-specific rates beat general ones; then lower priority number
    wins; then the most recently effective rate.
    """
    candidates = [
        r for r in rates
        if r.rate_type == RateType.HOURLY.value
        and r.is_active_on(as_of)
        and (r.project_id is None or r.project_id == project_id)
    ]
    if not candidates:
        return None
    candidates.sort(
        key=lambda r: (
            0 if project_id and r.project_id == project_id else 1,
            r.priority,
            -r.effective_date.toordinal(),
        )
    )
    return candidates[0]


class PayRateService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = PayRateRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)

    async def list_pay_rates(self, pagination: PaginationParams, *, employee_id: str | None = None):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"employee_id": employee_id},
        )

    async def get_pay_rate(self, pay_rate_id: str) -> PayRate:
        pay_rate = await self._repo.get_by_id(pay_rate_id)
        if not pay_rate:
            raise NotFoundError("Pay rate", pay_rate_id)
        return pay_rate

    async def create_pay_rate(self, data: PayRateCreate) -> PayRate:
        if not await self._employees.get_by_id(data.employee_id):
            raise NotFoundError("Employee", data.employee_id, code="EMPLOYEE_NOT_FOUND")
        return await self._repo.create(**data.model_dump(exclude_none=True))

    async def update_pay_rate(self, pay_rate_id: str, data: PayRateUpdate) -> PayRate:
        pay_rate = await self.get_pay_rate(pay_rate_id)
        changes = self._repo.changes(data)
        effective = changes.get("effective_date") or pay_rate.effective_date
        expiry = changes.get("expiration_date", pay_rate.expiration_date)
        if expiry and expiry < effective:
            raise BusinessRuleError("expirationDate must not be before effectiveDate", code="VALIDATION_ERROR")
        return await self._repo.update(pay_rate_id, **changes)  # type: ignore[return-value]

    async def delete_pay_rate(self, pay_rate_id: str) -> None:
        deleted = await self._repo.soft_delete(pay_rate_id)
        if not deleted:
            raise NotFoundError("Pay rate", pay_rate_id)

    async def active_rates(self, employee_id: str, as_of: date | None = None) -> list[PayRate]:
        as_of = as_of or date.today()
        rates = await self._repo.find(PayRate.employee_id == employee_id)
        active = [r for r in rates if r.is_active_on(as_of)]
        return sorted(active, key=lambda r: (r.priority, -r.effective_date.toordinal()))

    async def resolve_rate(
        self, employee_id: str, project_id: str | None = None, as_of: date | None = None
    ) -> ResolvedRateOut:
        employee = await self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id, code="EMPLOYEE_NOT_FOUND")
        as_of = as_of or date.today()
        rates = await self._repo.find(PayRate.employee_id == employee_id)
        rate = select_rate(rates, project_id=project_id, as_of=as_of)
        return ResolvedRateOut(
            employee_id=employee_id,
            project_id=project_id,
            as_of=as_of,
            hourly_rate=Decimal(rate.amount) if rate else Decimal(employee.base_hourly_rate),
            pay_rate_id=rate.id if rate else None,
            source="pay_rate" if rate else "base_rate",
        )
