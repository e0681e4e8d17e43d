"""Repositories for employees and the records hung off them."""

from __future__ import annotations

from sqlalchemy import func, or_, select

from groundwork.domain.hr import (
    Certification,
    Deduction,
    EmergencyContact,
    Employee,
    EmploymentEpisode,
    PayRate,
    UnionMembership,
    WithholdingElection,
)
from groundwork.repositories.base import BaseRepository


class EmployeeRepository(BaseRepository[Employee]):
    model = Employee
    default_sort = "last_name"
    default_order = "asc"

    async def number_taken(self, employee_number: str) -> bool:
        return await self.exists(Employee.employee_number == employee_number, include_deleted=True)

    async def get_many(self, employee_ids) -> dict[str, Employee]:
        ids = set(employee_ids)
        if not ids:
            return {}
        return {e.id: e for e in await self.find(Employee.id.in_(ids))}

    @staticmethod
    def search_condition(term: str):
        pattern = f"%{term.strip()}%"
        return or_(
            Employee.first_name.ilike(pattern),
            Employee.last_name.ilike(pattern),
            Employee.preferred_name.ilike(pattern),
            Employee.employee_number.ilike(pattern),
            Employee.email.ilike(pattern),
        )


class EmploymentEpisodeRepository(BaseRepository[EmploymentEpisode]):
    model = EmploymentEpisode
    default_sort = "episode_number"

    async def open_episode(self, employee_id: str) -> EmploymentEpisode | None:
        return await self.first(
            EmploymentEpisode.employee_id == employee_id,
            EmploymentEpisode.termination_date.is_(None),
        )

    async def next_episode_number(self, employee_id: str) -> int:
        result = await self._session.execute(
            select(func.max(EmploymentEpisode.episode_number))
            .where(EmploymentEpisode.tenant_id == self._tenant_id)
            .where(EmploymentEpisode.employee_id == employee_id)
        )
        return (result.scalar_one() or 0) + 1


class CertificationRepository(BaseRepository[Certification]):
    model = Certification
    default_sort = "expiration_date"
    default_order = "asc"


class PayRateRepository(BaseRepository[PayRate]):
    model = PayRate
    default_sort = "effective_date"

    async def find_for_employees(self, employee_ids) -> dict[str, list[PayRate]]:
        """Every live rate for the given employees, grouped by employee id."""
        ids = set(employee_ids)
        grouped: dict[str, list[PayRate]] = {i: [] for i in ids}
        if ids:
            for rate in await self.find(PayRate.employee_id.in_(ids)):
                grouped[rate.employee_id].append(rate)
        return grouped


def _grouped(rows, ids) -> dict[str, list]:
    grouped: dict[str, list] = {i: [] for i in ids}
    for row in rows:
        grouped[row.employee_id].append(row)
    return grouped


class WithholdingElectionRepository(BaseRepository[WithholdingElection]):
    model = WithholdingElection
    default_sort = "effective_date"

    async def open_election(self, employee_id: str, jurisdiction: str) -> WithholdingElection | None:
        """The election for a jurisdiction that has no expiration yet."""
        return await self.first(
            WithholdingElection.employee_id == employee_id,
            WithholdingElection.tax_jurisdiction == jurisdiction,
            WithholdingElection.expiration_date.is_(None),
        )

    async def find_for_employees(self, employee_ids) -> dict[str, list[WithholdingElection]]:
        ids = set(employee_ids)
        rows = await self.find(WithholdingElection.employee_id.in_(ids)) if ids else []
        return _grouped(rows, ids)


class UnionMembershipRepository(BaseRepository[UnionMembership]):
    model = UnionMembership
    default_sort = "effective_date"

    async def find_for_employees(self, employee_ids) -> dict[str, list[UnionMembership]]:
        ids = set(employee_ids)
        rows = await self.find(UnionMembership.employee_id.in_(ids)) if ids else []
        return _grouped(rows, ids)


class DeductionRepository(BaseRepository[Deduction]):
    model = Deduction
    default_sort = "priority"
    default_order = "asc"

    async def find_for_employees(self, employee_ids) -> dict[str, list[Deduction]]:
        ids = set(employee_ids)
        rows = await self.find(Deduction.employee_id.in_(ids)) if ids else []
        return _grouped(rows, ids)

    async def get_many(self, deduction_ids) -> dict[str, Deduction]:
        ids = set(deduction_ids)
        if not ids:
            return {}
        return {d.id: d for d in await self.find(Deduction.id.in_(ids))}


class EmergencyContactRepository(BaseRepository[EmergencyContact]):
    model = EmergencyContact
    default_sort = "priority"
    default_order = "asc"

    async def next_priority(self, employee_id: str) -> int:
        highest = await self.aggregate(
            func.max(EmergencyContact.priority), EmergencyContact.employee_id == employee_id
        )
        return (highest or 0) + 1
