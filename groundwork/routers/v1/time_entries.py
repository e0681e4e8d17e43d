"""Time entry router — daily hours, the approval workflow, cost report and Vista export."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.pagination import PaginationParams
from groundwork.core.response import DataResponse, ListResponse, paginated
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.domain.time_tracking import TimeEntryStatus
from groundwork.schemas.time_tracking import (
    ApproveTimeEntryRequest,
    CostReportOut,
    RejectTimeEntryRequest,
    TimeEntryCreate,
    TimeEntryOut,
    TimeEntryUpdate,
    VistaExportOut,
)
from groundwork.services.time_tracking import TimeEntryService

router = APIRouter(prefix="/time-entries", tags=["Time Tracking"])


def _svc(session: AsyncSession, tenant_id: str) -> TimeEntryService:
    return TimeEntryService(session, tenant_id)


@router.get("", response_model=ListResponse[TimeEntryOut])
async def list_time_entries(
    employee_id: Optional[str] = Query(default=None, alias="employeeId"),
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    filter_status: Optional[TimeEntryStatus] = Query(default=None, alias="status"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """List time entries, newest work date first."""
    items, total = await _svc(session, tenant_id).list_time_entries(
        pagination,
        employee_id=employee_id,
        project_id=project_id,
        status=filter_status.value if filter_status else None,
        start_date=start_date,
        end_date=end_date,
    )
    return paginated([TimeEntryOut.model_validate(e) for e in items], total, pagination)


@router.post("", response_model=DataResponse[TimeEntryOut], status_code=status.HTTP_201_CREATED)
async def create_time_entry(
    body: TimeEntryCreate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Log hours. The employee must be assigned to the project on that date."""
    entry = await _svc(session, tenant_id).create_time_entry(body)
    return {"data": TimeEntryOut.model_validate(entry)}


@router.get("/cost-report", response_model=DataResponse[CostReportOut])
async def labor_cost_report(
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    approved_only: bool = Query(default=True, alias="approvedOnly"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Burdened labor cost grouped by project, then cost code."""
    report = await _svc(session, tenant_id).cost_report(
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        approved_only=approved_only,
    )
    return {"data": report}


@router.get("/export/vista")
async def export_vista(
    request: Request,
    start_date: date = Query(alias="startDate"),
    end_date: date = Query(alias="endDate"),
    project_id: Optional[str] = Query(default=None, alias="projectId"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Approved time as a Vista/Viewpoint import CSV.

    Clients sending `Accept: application/json` get the export metadata instead
    of the file, for previews.
    """
    export = await _svc(session, tenant_id).export_vista(start_date, end_date, project_id)
    if "application/json" in request.headers.get("accept", ""):
        return {"data": VistaExportOut.model_validate(export).model_dump(mode="json", by_alias=True)}

    return Response(
        content=export.csv_content,
        media_type="text/csv",
        headers={
            "Content-Disposition": f'attachment; filename="{export.file_name}"',
            "X-Row-Count": str(export.row_count),
            "X-Total-Hours": str(export.total_hours),
            "X-Employee-Count": str(export.employee_count),
            "X-Project-Count": str(export.project_count),
        },
    )


@router.get("/project/{project_id}", response_model=ListResponse[TimeEntryOut])
async def list_project_time_entries(
    project_id: str,
    filter_status: Optional[TimeEntryStatus] = Query(default=None, alias="status"),
    start_date: Optional[date] = Query(default=None, alias="startDate"),
    end_date: Optional[date] = Query(default=None, alias="endDate"),
    pagination: PaginationParams = Depends(),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    items, total = await _svc(session, tenant_id).list_by_project(
        project_id,
        pagination,
        status=filter_status.value if filter_status else None,
        start_date=start_date,
        end_date=end_date,
    )
    return paginated([TimeEntryOut.model_validate(e) for e in items], total, pagination)


@router.get("/{entry_id}", response_model=DataResponse[TimeEntryOut])
async def get_time_entry(
    entry_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    entry = await _svc(session, tenant_id).get_time_entry(entry_id)
    return {"data": TimeEntryOut.model_validate(entry)}


@router.put("/{entry_id}", response_model=DataResponse[TimeEntryOut])
async def update_time_entry(
    entry_id: str,
    body: TimeEntryUpdate,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Edit hours and/or move the entry through draft, submitted, approved and rejected."""
    entry = await _svc(session, tenant_id).update_time_entry(entry_id, body)
    return {"data": TimeEntryOut.model_validate(entry)}


@router.post("/{entry_id}/approve", response_model=DataResponse[TimeEntryOut])
async def approve_time_entry(
    entry_id: str,
    body: ApproveTimeEntryRequest,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    entry = await _svc(session, tenant_id).approve_time_entry(entry_id, body)
    return {"data": TimeEntryOut.model_validate(entry)}


@router.post("/{entry_id}/reject", response_model=DataResponse[TimeEntryOut])
async def reject_time_entry(
    entry_id: str,
    body: RejectTimeEntryRequest,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    entry = await _svc(session, tenant_id).reject_time_entry(entry_id, body)
    return {"data": TimeEntryOut.model_validate(entry)}


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_entry(
    entry_id: str,
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    await _svc(session, tenant_id).delete_time_entry(entry_id)
