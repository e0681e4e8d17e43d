"""Dashboard schemas."""


from datetime import date, datetime

from groundwork.schemas.common import CamelModel, Hours, Money


class DashboardStatsOut(CamelModel):
    project_count: int
    total_project_value: Money
    bid_count: int
    total_bid_value: Money
    pending_change_orders: int
    active_employees: int
    pending_time_approvals: int
    last_activity_date: datetime


class WeeklyHoursPoint(CamelModel):
    week_label: str
    week_start: date
    regular_hours: Hours
    overtime_hours: Hours
    doubletime_hours: Hours
    total_hours: Hours


class WeeklyHoursOut(CamelModel):
    data: list[WeeklyHoursPoint]
    total_hours: Hours
    average_hours_per_week: Hours
