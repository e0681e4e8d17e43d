"""Withholding election router (federal W-4 and state equivalents)."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.employee_records import (
    WithholdingElectionCreate,
    WithholdingElectionOut,
    WithholdingElectionUpdate,
)
from groundwork.services.employee_records import WithholdingElectionService

router = APIRouter(prefix="/withholding-elections", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> WithholdingElectionService:
    return WithholdingElectionService(session, tenant_id)


@router.get("", response_model=ListResponse[WithholdingElectionOut])
async def list_elections(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    tax_jurisdiction: Optional[str] = Query(default=None, alias="taxJurisdiction"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_elections(
        pagination,
        employee_id=employee_id,
        tax_jurisdiction=tax_jurisdiction,
    )
    return paginated([WithholdingElectionOut.model_validate(r) for r in items], total, pagination)


@router.get("/employee/{employee_id}/current", response_model=DataResponse[list[WithholdingElectionOut]])
async def list_current_elections(
    employee_id: str,
    as_of: Optional[date] = Query(default=None, alias="asOf"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """The election in force for each jurisdiction, federal first."""
    elections = await _svc(session, tenant_id).current_elections(employee_id, as_of)
    return {"data": [WithholdingElectionOut.model_validate(e) for e in elections]}


@router.post("", response_model=DataResponse[WithholdingElectionOut], status_code=status.HTTP_201_CREATED)
async def create_election(
    body: WithholdingElectionCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Record a new election. The open election for the same jurisdiction ends the day before."""
    election = await _svc(session, tenant_id).create_election(body)
    return {"data": WithholdingElectionOut.model_validate(election)}


@router.get("/{election_id}", response_model=DataResponse[WithholdingElectionOut])
async def get_election(
    election_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    election = await _svc(session, tenant_id).get_election(election_id)
    return {"data": WithholdingElectionOut.model_validate(election)}


@router.put("/{election_id}", response_model=DataResponse[WithholdingElectionOut])
async def update_election(
    election_id: str,
    body: WithholdingElectionUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    election = await _svc(session, tenant_id).update_election(election_id, body)
    return {"data": WithholdingElectionOut.model_validate(election)}


@router.delete("/{election_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_election(
    election_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_election(election_id)
