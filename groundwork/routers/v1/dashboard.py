"""Dashboard router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.response import DataResponse
from groundwork.core.tenancy import get_tenant_id
from groundwork.db.base import get_db
from groundwork.schemas.dashboard import DashboardStatsOut, WeeklyHoursOut
from groundwork.services.dashboard import DEFAULT_WEEKS, DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DataResponse[DashboardStatsOut])
async def get_dashboard_stats(
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    stats = await DashboardService(session, tenant_id).get_stats()
    return {"data": stats}


@router.get("/weekly-hours", response_model=DataResponse[WeeklyHoursOut])
async def get_weekly_hours(
    weeks: int = Query(default=DEFAULT_WEEKS, description="Clamped to 1-52"),
    session: AsyncSession = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """Hours per Monday-start week, zero-filled, for the dashboard chart."""
    result = await DashboardService(session, tenant_id).get_weekly_hours(weeks)
    return {"data": result}
