"""Employment eligibility: one Form I-9 per employee, and the E-Verify cases opened against it."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.exceptions import ConflictError, NotFoundError
from groundwork.core.pagination import PaginationParams
from groundwork.domain.compliance import EVerifyCase, EVerifyStatus, I9Record, I9Status
from groundwork.repositories.compliance import EVerifyCaseRepository, I9RecordRepository
from groundwork.repositories.hr import EmployeeRepository
from groundwork.schemas.compliance import (
    REVERIFICATION_WINDOW_DAYS,
    EVerifyCaseCreate,
    EVerifyCaseUpdate,
    I9RecordCreate,
    I9RecordUpdate,
)

logger = logging.getLogger(__name__)

_SECTION2_FIELDS = (
    "section2_completed_date",
    "section2_completed_by",
    "list_a_document_type",
    "list_a_document_number",
    "list_a_expiration_date",
    "list_b_document_type",
    "list_b_document_number",
    "list_b_expiration_date",
    "list_c_document_type",
    "list_c_document_number",
    "list_c_expiration_date",
)


class I9RecordService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = I9RecordRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)

    async def list_records(
        self,
        pagination: PaginationParams,
        *,
        employee_id: str | None = None,
        status: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"employee_id": employee_id, "status": status},
        )

    async def needing_reverification(self, days: int = REVERIFICATION_WINDOW_DAYS) -> list[I9Record]:
        """Records whose work authorization runs out within `days` (or already has)."""
        return await self._repo.expiring_by(date.today() + timedelta(days=days))

    async def get_record(self, record_id: str) -> I9Record:
        record = await self._repo.get_by_id(record_id)
        if not record:
            raise NotFoundError("I-9 record", record_id)
        return record

    async def create_record(self, data: I9RecordCreate) -> I9Record:
        if not await self._employees.get_by_id(data.employee_id):
            raise NotFoundError("Employee", data.employee_id, code="EMPLOYEE_NOT_FOUND")
        if await self._repo.exists(I9Record.employee_id == data.employee_id):
            raise ConflictError("Employee already has an I-9 record", code="I9_EXISTS")
        record = await self._repo.create(
            status=I9Status.SECTION1_COMPLETE.value, **data.model_dump(exclude_none=True)
        )
        logger.info("Recorded I-9 section 1 for employee %s", record.employee_id)
        return record

    async def update_record(self, record_id: str, data: I9RecordUpdate) -> I9Record:
        record = await self.get_record(record_id)
        changes = self._repo.changes(data)
        if changes.get("section2_completed_date") is not None:
            # Section 2 is recorded as a whole; omitted document fields are cleared
            for field in _SECTION2_FIELDS:
                changes.setdefault(field, None)
            if "status" not in changes and record.status == I9Status.SECTION1_COMPLETE.value:
                changes["status"] = I9Status.SECTION2_COMPLETE.value
        return await self._repo.update(record_id, **changes)  # type: ignore[return-value]

    async def delete_record(self, record_id: str) -> None:
        if not await self._repo.soft_delete(record_id):
            raise NotFoundError("I-9 record", record_id)


class EVerifyCaseService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._repo = EVerifyCaseRepository(session, tenant_id)
        self._i9s = I9RecordRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)

    async def list_cases(
        self,
        pagination: PaginationParams,
        *,
        employee_id: str | None = None,
        status: str | None = None,
    ):
        return await self._repo.list(
            offset=pagination.offset,
            limit=pagination.limit,
            order_by=pagination.sort,
            order=pagination.order,
            filters={"employee_id": employee_id, "status": status},
        )

    async def needing_action(self) -> list[EVerifyCase]:
        """Tentative nonconfirmations whose contest deadline has not passed."""
        return await self._repo.find(
            EVerifyCase.status == EVerifyStatus.TENTATIVE_NONCONFIRMATION.value,
            EVerifyCase.tnc_deadline.is_not(None),
            EVerifyCase.tnc_deadline >= date.today(),
            order_by=EVerifyCase.tnc_deadline.asc(),
        )

    async def get_case(self, case_id: str) -> EVerifyCase:
        case = await self._repo.get_by_id(case_id)
        if not case:
            raise NotFoundError("E-Verify case", case_id)
        return case

    async def create_case(self, data: EVerifyCaseCreate) -> EVerifyCase:
        if not await self._employees.get_by_id(data.employee_id):
            raise NotFoundError("Employee", data.employee_id, code="EMPLOYEE_NOT_FOUND")
        if data.i9_record_id is not None:
            i9 = await self._i9s.get_by_id(data.i9_record_id)
            if i9 is None or i9.employee_id != data.employee_id:
                raise NotFoundError("I-9 record", data.i9_record_id, code="I9_NOT_FOUND")
        case = await self._repo.create(
            status=EVerifyStatus.PENDING.value, **data.model_dump(exclude_none=True)
        )
        logger.info("Opened E-Verify case %s for employee %s", case.case_number, case.employee_id)
        return case

    async def update_case(self, case_id: str, data: EVerifyCaseUpdate) -> EVerifyCase:
        case = await self.get_case(case_id)
        changes = self._repo.changes(data)
        closing = changes.get("status") == EVerifyStatus.CLOSED.value
        if closing and "closed_date" not in changes and not case.closed_date:
            changes["closed_date"] = date.today()
        return await self._repo.update(case_id, **changes)  # type: ignore[return-value]

    async def delete_case(self, case_id: str) -> None:
        if not await self._repo.soft_delete(case_id):
            raise NotFoundError("E-Verify case", case_id)
