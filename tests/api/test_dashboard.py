"""
Dashboard statistics and the weekly hours chart.
"""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient

from groundwork.services.dashboard import monday_of

pytestmark = pytest.mark.asyncio


class TestDashboardStats:
    async def test_empty_tenant(self, client: AsyncClient):
        response = await client.get("/api/v1/dashboard/stats")
        assert response.status_code == 200
        stats = response.json()["data"]
        assert stats["projectCount"] == 0
        assert stats["totalProjectValue"] == 0
        assert stats["bidCount"] == 0
        assert stats["pendingTimeApprovals"] == 0
        assert stats["lastActivityDate"] is not None

    async def test_counts(self, client: AsyncClient, crew, log_time):
        team = await crew()
        await log_time(team)
        await client.post("/api/v1/bids", json={"name": "Clinic", "number": "B-1", "estimatedValue": 90000})
        sub = (
            await client.post(
                "/api/v1/subcontracts",
                json={
                    "projectId": team["project"]["id"],
                    "subcontractNumber": "SC-1",
                    "subcontractorName": "Drywall Pros",
                    "scopeOfWork": "Drywall",
                    "originalValue": 20000,
                },
            )
        ).json()["data"]
        await client.post(
            "/api/v1/change-orders",
            json={
                "subcontractId": sub["id"],
                "changeOrderNumber": "CO-1",
                "title": "Soffits",
                "description": "Add soffits at corridor",
                "amount": 1200,
            },
        )

        stats = (await client.get("/api/v1/dashboard/stats")).json()["data"]
        assert stats["projectCount"] == 1
        assert stats["totalProjectValue"] == 250000
        assert stats["bidCount"] == 1
        assert stats["totalBidValue"] == 90000
        assert stats["pendingChangeOrders"] == 1
        assert stats["activeEmployees"] == 2
        assert stats["pendingTimeApprovals"] == 1


class TestWeeklyHours:
    async def test_default_window(self, client: AsyncClient, crew, log_time):
        team = await crew()
        await log_time(team, regularHours=8, overtimeHours=2)

        response = await client.get("/api/v1/dashboard/weekly-hours")
        assert response.status_code == 200
        chart = response.json()["data"]
        assert len(chart["data"]) == 9
        assert chart["data"][-1]["weekStart"] == monday_of(date.today()).isoformat()
        assert chart["data"][-1]["totalHours"] == 10
        assert chart["data"][-1]["overtimeHours"] == 2
        assert chart["totalHours"] == 10
        assert chart["averageHoursPerWeek"] == 1.11

    async def test_old_entries_fall_outside(self, client: AsyncClient, crew, log_time):
        team = await crew()
        await log_time(team, work_date=date.today() - timedelta(weeks=12))
        chart = (await client.get("/api/v1/dashboard/weekly-hours", params={"weeks": 4})).json()["data"]
        assert len(chart["data"]) == 5
        assert chart["totalHours"] == 0

    @pytest.mark.parametrize("weeks,points", [(0, 2), (1, 2), (100, 53)])
    async def test_weeks_are_clamped(self, client: AsyncClient, weeks, points):
        chart = (await client.get("/api/v1/dashboard/weekly-hours", params={"weeks": weeks})).json()["data"]
        assert len(chart["data"]) == points
