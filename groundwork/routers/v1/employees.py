"""Employee router — HR records, employment lifecycle and per-employee time views."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.hr import EmployeeClassification, EmployeeStatus, WorkerType
from groundwork.schemas.hr import (
    EmployeeCreate,
    EmployeeOut,
    EmployeeStatsOut,
    EmployeeUpdate,
    EmploymentEpisodeOut,
    RehireEmployeeRequest,
    TerminateEmployeeRequest,
)
from groundwork.schemas.time_tracking import ProjectAssignmentOut
from groundwork.services.hr import EmployeeService
from groundwork.services.time_tracking import ProjectAssignmentService

router = APIRouter(prefix="/employees", tags=["Employees"])


def _svc(session: AsyncSession, tenant_id: str) -> EmployeeService:
    return EmployeeService(session, tenant_id)


@router.get("", response_model=ListResponse[EmployeeOut])
async def list_employees(
    filter_status: Optional[EmployeeStatus] = Query(default=None, alias="status"),
    include_terminated: bool = Query(default=False, alias="includeTerminated"),
    classification: Optional[EmployeeClassification] = Query(default=None),
    worker_type: Optional[WorkerType] = Query(default=None, alias="workerType"),
    trade_code: Optional[str] = Query(default=None, alias="tradeCode"),
    search: Optional[str] = Query(default=None, description="Matches name, number or email"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """List employees by last name. Terminated employees are hidden unless asked for."""
    items, total = await _svc(session, tenant_id).list_employees(
        pagination,
        status=filter_status.value if filter_status else None,
        include_terminated=include_terminated,
        classification=classification.value if classification else None,
        worker_type=worker_type.value if worker_type else None,
        trade_code=trade_code,
        search=search,
    )
    return paginated([EmployeeOut.model_validate(e) for e in items], total, pagination)


@router.post("", response_model=DataResponse[EmployeeOut], status_code=status.HTTP_201_CREATED)
async def create_employee(
    body: EmployeeCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Hire an employee; opens their first employment episode."""
    employee = await _svc(session, tenant_id).create_employee(body)
    return {"data": EmployeeOut.model_validate(employee)}


@router.get("/{employee_id}", response_model=DataResponse[EmployeeOut])
async def get_employee(
    employee_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    employee = await _svc(session, tenant_id).get_employee(employee_id)
    return {"data": EmployeeOut.model_validate(employee)}


@router.put("/{employee_id}", response_model=DataResponse[EmployeeOut])
async def update_employee(
    employee_id: str,
    body: EmployeeUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    employee = await _svc(session, tenant_id).update_employee(employee_id, body)
    return {"data": EmployeeOut.model_validate(employee)}


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(
    employee_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_employee(employee_id)


@router.post("/{employee_id}/terminate", response_model=DataResponse[EmployeeOut])
async def terminate_employee(
    employee_id: str,
    body: TerminateEmployeeRequest,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Close the open employment episode and end all project assignments."""
    employee = await _svc(session, tenant_id).terminate_employee(employee_id, body)
    return {"data": EmployeeOut.model_validate(employee)}


@router.post("/{employee_id}/rehire", response_model=DataResponse[EmployeeOut])
async def rehire_employee(
    employee_id: str,
    body: RehireEmployeeRequest,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    employee = await _svc(session, tenant_id).rehire_employee(employee_id, body)
    return {"data": EmployeeOut.model_validate(employee)}


@router.get("/{employee_id}/episodes", response_model=DataResponse[list[EmploymentEpisodeOut]])
async def list_employment_episodes(
    employee_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    episodes = await _svc(session, tenant_id).list_episodes(employee_id)
    return {"data": [EmploymentEpisodeOut.model_validate(e) for e in episodes]}


@router.get("/{employee_id}/stats", response_model=DataResponse[EmployeeStatsOut])
async def get_employee_stats(
    employee_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    stats = await _svc(session, tenant_id).get_stats(employee_id)
    return {"data": stats}


@router.get("/{employee_id}/projects", response_model=DataResponse[list[ProjectAssignmentOut]])
async def list_employee_projects(
    employee_id: str,
    include_inactive: bool = Query(default=False, alias="includeInactive"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Projects the employee is (or was) assigned to."""
    assignments = await ProjectAssignmentService(session, tenant_id).list_for_employee(
        employee_id, include_inactive=include_inactive
    )
    return {"data": assignments}
