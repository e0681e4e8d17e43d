"""Services for the records kept per employee beyond the core profile.

Employment episodes, tax withholding elections, union memberships,
payroll deductions and emergency contacts. Payroll reads the elections,
memberships and deductions when it calculates a batch.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from groundwork.core.pagination import PaginationParams
from groundwork.domain.hr import (
    Deduction,
    EmergencyContact,
    EmploymentEpisode,
    UnionMembership,
    WithholdingElection,
)
from groundwork.repositories.hr import (
    DeductionRepository,
    EmergencyContactRepository,
    EmployeeRepository,
    EmploymentEpisodeRepository,
    UnionMembershipRepository,
    WithholdingElectionRepository,
)
from groundwork.schemas.employee_records import (
    DeductionCreate,
    DeductionUpdate,
    EmergencyContactCreate,
    EmergencyContactUpdate,
    UnionMembershipCreate,
    UnionMembershipUpdate,
    WithholdingElectionCreate,
    WithholdingElectionUpdate,
)
from groundwork.schemas.hr import EmploymentEpisodeCreate, EmploymentEpisodeUpdate

logger = logging.getLogger(__name__)


def _check_window(changes: dict, current) -> None:
    effective = changes.get("effective_date", current.effective_date)
    expiration = changes.get("expiration_date", current.expiration_date)
    if effective and expiration and expiration < effective:
        raise ValidationError("expirationDate must not be before effectiveDate")


class _EmployeeScoped:
    """Shared plumbing for records that hang off one employee."""

    entity = "Record"

    def __init__(self, session: AsyncSession, tenant_id: str):
        self._employees = EmployeeRepository(session, tenant_id)

    async def _require_employee(self, employee_id: str) -> None:
        if not await self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee", employee_id, code="EMPLOYEE_NOT_FOUND")

    async def _get(self, record_id: str):
        record = await self._repo.get_by_id(record_id)
        if not record:
            raise NotFoundError(self.entity, record_id)
        return record

    async def _list(self, pagination: PaginationParams, **filters):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order if pagination.sort else None,
            filters=filters,
        )

    async def _delete(self, record_id: str) -> None:
        if not await self._repo.soft_delete(record_id):
            raise NotFoundError(self.entity, record_id)


# ---------------------------------------------------------------------------
# Employment episodes
# ---------------------------------------------------------------------------

class EmploymentEpisodeService(_EmployeeScoped):
    entity = "Employment episode"

    def __init__(self, session: AsyncSession, tenant_id: str):
        super().__init__(session, tenant_id)
        self._repo = EmploymentEpisodeRepository(session, tenant_id)

    async def list_episodes(self, pagination: PaginationParams, *, employee_id: str | None = None):
        return await self._list(pagination, employee_id=employee_id)

    async def get_episode(self, episode_id: str) -> EmploymentEpisode:
        return await self._get(episode_id)

    async def create_episode(self, data: EmploymentEpisodeCreate) -> EmploymentEpisode:
        await self._require_employee(data.employee_id)
        if await self._repo.open_episode(data.employee_id) is not None:
            raise ConflictError(
                "Employee already has an active employment episode", code="ACTIVE_EPISODE_EXISTS"
            )
        episode = await self._repo.create(
            episode_number=await self._repo.next_episode_number(data.employee_id),
            **data.model_dump(exclude_none=True),
        )
        logger.info("Opened employment episode %d for %s", episode.episode_number, episode.employee_id)
        return episode

    async def update_episode(self, episode_id: str, data: EmploymentEpisodeUpdate) -> EmploymentEpisode:
        episode = await self._get(episode_id)
        changes = self._repo.changes(data)
        termination = changes.get("termination_date")
        if termination is not None and termination < episode.hire_date:
            raise BusinessRuleError(
                "Termination date cannot be before hire date", code="INVALID_TERMINATION_DATE"
            )
        return await self._repo.update(episode_id, **changes)  # type: ignore[return-value]

    async def delete_episode(self, episode_id: str) -> None:
        await self._delete(episode_id)


# ---------------------------------------------------------------------------
# Withholding elections
# ---------------------------------------------------------------------------

class WithholdingElectionService(_EmployeeScoped):
    entity = "Withholding election"

    def __init__(self, session: AsyncSession, tenant_id: str):
        super().__init__(session, tenant_id)
        self._repo = WithholdingElectionRepository(session, tenant_id)

    async def list_elections(
        self,
        pagination: PaginationParams,
        *,
        employee_id: str | None = None,
        tax_jurisdiction: str | None = None,
    ):
        return await self._list(
            pagination,
            employee_id=employee_id,
            tax_jurisdiction=tax_jurisdiction.upper() if tax_jurisdiction else None,
        )

    async def current_elections(self, employee_id: str, as_of: date | None = None) -> list[WithholdingElection]:
        """The election in force for each jurisdiction on `as_of`."""
        await self._require_employee(employee_id)
        as_of = as_of or date.today()
        current: dict[str, WithholdingElection] = {}
        for election in await self._repo.find(WithholdingElection.employee_id == employee_id):
            if not election.applies_on(as_of):
                continue
            held = current.get(election.tax_jurisdiction)
            if held is None or election.effective_date > held.effective_date:
                current[election.tax_jurisdiction] = election
        return sorted(current.values(), key=lambda e: (e.tax_jurisdiction != "FEDERAL", e.tax_jurisdiction))

    async def get_election(self, election_id: str) -> WithholdingElection:
        return await self._get(election_id)

    async def create_election(self, data: WithholdingElectionCreate) -> WithholdingElection:
        """Record a new election; the open one for the same jurisdiction ends the day before."""
        await self._require_employee(data.employee_id)
        previous = await self._repo.open_election(data.employee_id, data.tax_jurisdiction)
        if previous is not None:
            if previous.effective_date >= data.effective_date:
                raise BusinessRuleError(
                    "A newer election must take effect after the current one", code="EFFECTIVE_DATE_CONFLICT"
                )
            previous.expiration_date = data.effective_date - timedelta(days=1)
            await self._repo.save(previous)
        election = await self._repo.create(**data.model_dump(exclude_none=True))
        logger.info(
            "Recorded %s withholding election for %s", election.tax_jurisdiction, election.employee_id
        )
        return election

    async def update_election(self, election_id: str, data: WithholdingElectionUpdate) -> WithholdingElection:
        election = await self._get(election_id)
        changes = self._repo.changes(data)
        _check_window(changes, election)
        return await self._repo.update(election_id, **changes)  # type: ignore[return-value]

    async def delete_election(self, election_id: str) -> None:
        await self._delete(election_id)


# ---------------------------------------------------------------------------
# Union memberships
# ---------------------------------------------------------------------------

class UnionMembershipService(_EmployeeScoped):
    entity = "Union membership"

    def __init__(self, session: AsyncSession, tenant_id: str):
        super().__init__(session, tenant_id)
        self._repo = UnionMembershipRepository(session, tenant_id)

    async def list_memberships(
        self,
        pagination: PaginationParams,
        *,
        employee_id: str | None = None,
        union_local: str | None = None,
    ):
        return await self._list(pagination, employee_id=employee_id, union_local=union_local)

    async def get_membership(self, membership_id: str) -> UnionMembership:
        return await self._get(membership_id)

    async def create_membership(self, data: UnionMembershipCreate) -> UnionMembership:
        await self._require_employee(data.employee_id)
        if await self._repo.exists(
            UnionMembership.employee_id == data.employee_id,
            UnionMembership.union_local == data.union_local,
            UnionMembership.expiration_date.is_(None),
        ):
            raise ConflictError(
                f"Employee already belongs to {data.union_local}", code="DUPLICATE_MEMBERSHIP"
            )
        return await self._repo.create(**data.model_dump(exclude_none=True))

    async def update_membership(self, membership_id: str, data: UnionMembershipUpdate) -> UnionMembership:
        membership = await self._get(membership_id)
        changes = self._repo.changes(data)
        _check_window(changes, membership)
        return await self._repo.update(membership_id, **changes)  # type: ignore[return-value]

    async def delete_membership(self, membership_id: str) -> None:
        await self._delete(membership_id)


# ---------------------------------------------------------------------------
# Deductions
# ---------------------------------------------------------------------------

class DeductionService(_EmployeeScoped):
    entity = "Deduction"

    def __init__(self, session: AsyncSession, tenant_id: str):
        super().__init__(session, tenant_id)
        self._repo = DeductionRepository(session, tenant_id)

    async def list_deductions(
        self,
        pagination: PaginationParams,
        *,
        employee_id: str | None = None,
        deduction_code: str | None = None,
    ):
        return await self._list(
            pagination,
            employee_id=employee_id,
            deduction_code=deduction_code.upper() if deduction_code else None,
        )

    async def get_deduction(self, deduction_id: str) -> Deduction:
        return await self._get(deduction_id)

    async def create_deduction(self, data: DeductionCreate) -> Deduction:
        await self._require_employee(data.employee_id)
        if await self._repo.exists(
            Deduction.employee_id == data.employee_id,
            Deduction.deduction_code == data.deduction_code,
            Deduction.expiration_date.is_(None),
        ):
            raise ConflictError(
                f"Employee already has an open '{data.deduction_code}' deduction", code="DUPLICATE_DEDUCTION"
            )
        deduction = await self._repo.create(**data.model_dump(exclude_none=True))
        logger.info("Added deduction %s for %s", deduction.deduction_code, deduction.employee_id)
        return deduction

    async def update_deduction(self, deduction_id: str, data: DeductionUpdate) -> Deduction:
        deduction = await self._get(deduction_id)
        changes = self._repo.changes(data)
        _check_window(changes, deduction)
        return await self._repo.update(deduction_id, **changes)  # type: ignore[return-value]

    async def delete_deduction(self, deduction_id: str) -> None:
        await self._delete(deduction_id)


# ---------------------------------------------------------------------------
# Emergency contacts
# ---------------------------------------------------------------------------

class EmergencyContactService(_EmployeeScoped):
    entity = "Emergency contact"

    def __init__(self, session: AsyncSession, tenant_id: str):
        super().__init__(session, tenant_id)
        self._repo = EmergencyContactRepository(session, tenant_id)

    async def list_contacts(self, pagination: PaginationParams, *, employee_id: str | None = None):
        return await self._list(pagination, employee_id=employee_id)

    async def get_contact(self, contact_id: str) -> EmergencyContact:
        return await self._get(contact_id)

    async def create_contact(self, data: EmergencyContactCreate) -> EmergencyContact:
        await self._require_employee(data.employee_id)
        fields = data.model_dump(exclude_none=True)
        if "priority" not in fields:
            fields["priority"] = await self._repo.next_priority(data.employee_id)
        return await self._repo.create(**fields)

    async def update_contact(self, contact_id: str, data: EmergencyContactUpdate) -> EmergencyContact:
        await self._get(contact_id)
        return await self._repo.update(contact_id, **self._repo.changes(data))  # type: ignore[return-value]

    async def delete_contact(self, contact_id: str) -> None:
        await self._delete(contact_id)
