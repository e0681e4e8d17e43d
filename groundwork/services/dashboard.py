"""Tenant-wide dashboard figures."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from groundwork.core.money import ZERO, dsum
from groundwork.domain.bid import Bid
from groundwork.domain.contracts import ChangeOrder, ChangeOrderStatus
from groundwork.domain.hr import Employee, EmployeeStatus
from groundwork.domain.project import Project
from groundwork.domain.time_tracking import TimeEntry, TimeEntryStatus
from groundwork.repositories.bid import BidRepository
from groundwork.repositories.contracts import ChangeOrderRepository
from groundwork.repositories.hr import EmployeeRepository
from groundwork.repositories.project import ProjectRepository
from groundwork.repositories.time_tracking import TimeEntryRepository
from groundwork.schemas.dashboard import DashboardStatsOut, WeeklyHoursOut, WeeklyHoursPoint

MIN_WEEKS = 1
MAX_WEEKS = 52
DEFAULT_WEEKS = 8

# Reported when the tenant has no activity at all
_NO_ACTIVITY_LOOKBACK = timedelta(days=30)


def monday_of(day: date) -> date:
    return day - timedelta(days=day.weekday())


def week_label(monday: date) -> str:
    return f"{monday:%b} {monday.day}"


def bucket_weekly_hours(entries, start: date, end: date) -> WeeklyHoursOut:
    """Sum entry hours into Monday-start weeks from start to end, zero-filling empty weeks."""
    weeks: dict[date, list] = {}
    monday = monday_of(start)
    while monday <= monday_of(end):
        weeks[monday] = []
        monday += timedelta(days=7)
    for entry in entries:
        bucket = weeks.get(monday_of(entry.work_date))
        if bucket is not None:
            bucket.append(entry)

    points = []
    for monday, week_entries in weeks.items():
        regular = dsum(e.regular_hours for e in week_entries)
        overtime = dsum(e.overtime_hours for e in week_entries)
        doubletime = dsum(e.doubletime_hours for e in week_entries)
        points.append(
            WeeklyHoursPoint(
                week_label=week_label(monday),
                week_start=monday,
                regular_hours=regular,
                overtime_hours=overtime,
                doubletime_hours=doubletime,
                total_hours=regular + overtime + doubletime,
            )
        )
    total = dsum(p.total_hours for p in points)
    return WeeklyHoursOut(
        data=points,
        total_hours=total,
        average_hours_per_week=(total / len(points)).quantize(Decimal("0.01")) if points else ZERO,
    )


class DashboardService:
    def __init__(self, session: AsyncSession, tenant_id: str):
        self._projects = ProjectRepository(session, tenant_id)
        self._bids = BidRepository(session, tenant_id)
        self._change_orders = ChangeOrderRepository(session, tenant_id)
        self._employees = EmployeeRepository(session, tenant_id)
        self._entries = TimeEntryRepository(session, tenant_id)

    async def get_stats(self) -> DashboardStatsOut:
        activity = [
            await self._projects.aggregate(func.max(Project.updated_at)),
            await self._bids.aggregate(func.max(Bid.updated_at)),
            await self._entries.aggregate(func.max(TimeEntry.updated_at)),
        ]
        activity = [a for a in activity if a is not None]

        return DashboardStatsOut(
            project_count=await self._projects.count(),
            total_project_value=Decimal(
                str(await self._projects.aggregate(func.coalesce(func.sum(Project.contract_amount), 0)))
            ),
            bid_count=await self._bids.count(),
            total_bid_value=Decimal(
                str(await self._bids.aggregate(func.coalesce(func.sum(Bid.estimated_value), 0)))
            ),
            pending_change_orders=await self._change_orders.count(
                ChangeOrder.status.in_(
                    [ChangeOrderStatus.PENDING.value, ChangeOrderStatus.UNDER_REVIEW.value]
                )
            ),
            active_employees=await self._employees.count(
                Employee.status == EmployeeStatus.ACTIVE.value
            ),
            pending_time_approvals=await self._entries.count(
                TimeEntry.status == TimeEntryStatus.SUBMITTED.value
            ),
            last_activity_date=(
                max(activity) if activity else datetime.now(timezone.utc) - _NO_ACTIVITY_LOOKBACK
            ),
        )

    async def get_weekly_hours(self, weeks: int = DEFAULT_WEEKS, today: date | None = None) -> WeeklyHoursOut:
        weeks = max(MIN_WEEKS, min(MAX_WEEKS, weeks))
        end = today or date.today()
        start = end - timedelta(days=7 * weeks)
        entries = await self._entries.find(
            TimeEntry.work_date >= monday_of(start),
            TimeEntry.work_date <= end,
        )
        return bucket_weekly_hours(entries, start, end)
