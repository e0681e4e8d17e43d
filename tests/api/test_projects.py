"""
Project CRUD and project statistics.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestProjectCrud:
    async def test_create_defaults(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/projects",
            json={"name": "Riverside Clinic", "number": "24-001", "contractAmount": 1250000.5},
        )
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "bidding"
        assert data["type"] == "commercial"
        assert data["contractAmount"] == 1250000.5
        assert data["originalBudget"] == 0

    async def test_duplicate_number(self, client: AsyncClient, create_project):
        await create_project(number="24-002")
        response = await client.post("/api/v1/projects", json={"name": "Again", "number": "24-002"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_NUMBER"

    async def test_completion_must_follow_start(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/projects",
            json={
                "name": "Backwards",
                "number": "24-003",
                "startDate": "2025-06-01",
                "estimatedCompletionDate": "2025-05-01",
            },
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_missing_name_is_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/projects", json={"number": "24-004"})
        assert response.status_code == 422

    async def test_update_and_delete(self, client: AsyncClient, create_project):
        project = await create_project()

        response = await client.put(
            f"/api/v1/projects/{project['id']}", json={"status": "active", "city": "Austin"}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "active"
        assert data["city"] == "Austin"
        assert data["name"] == project["name"]

        assert (await client.delete(f"/api/v1/projects/{project['id']}")).status_code == 204
        assert (await client.get(f"/api/v1/projects/{project['id']}")).status_code == 404

    async def test_update_checks_dates_against_stored_start(self, client: AsyncClient, create_project):
        project = await create_project(startDate="2025-06-01")
        response = await client.put(
            f"/api/v1/projects/{project['id']}", json={"estimatedCompletionDate": "2025-01-01"}
        )
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

        response = await client.put(
            f"/api/v1/projects/{project['id']}", json={"estimatedCompletionDate": "2025-12-01"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["estimatedCompletionDate"] == "2025-12-01"

    async def test_update_moving_start_past_completion(self, client: AsyncClient, create_project):
        project = await create_project(startDate="2025-06-01", estimatedCompletionDate="2025-09-01")
        response = await client.put(f"/api/v1/projects/{project['id']}", json={"startDate": "2025-10-01"})
        assert response.status_code == 422

    async def test_null_name_keeps_name(self, client: AsyncClient, create_project):
        project = await create_project()
        response = await client.put(f"/api/v1/projects/{project['id']}", json={"name": None, "city": "Waco"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["name"] == project["name"]
        assert data["city"] == "Waco"

    async def test_deleted_number_stays_reserved(self, client: AsyncClient, create_project):
        project = await create_project(number="24-010")
        await client.delete(f"/api/v1/projects/{project['id']}")
        response = await client.post("/api/v1/projects", json={"name": "Reuse", "number": "24-010"})
        assert response.status_code == 409

    async def test_unknown_project(self, client: AsyncClient):
        response = await client.get("/api/v1/projects/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"


class TestProjectListing:
    async def test_filters_and_search(self, client: AsyncClient, create_project):
        await create_project(name="Harbor Lofts", type="residential", clientName="Bayview LLC")
        await create_project(name="Mill Street Bridge", type="infrastructure")
        await create_project(name="Data Center")

        everything = (await client.get("/api/v1/projects")).json()
        assert everything["meta"]["total"] == 3
        assert [p["name"] for p in everything["data"]] == ["Data Center", "Harbor Lofts", "Mill Street Bridge"]

        residential = (await client.get("/api/v1/projects", params={"type": "residential"})).json()
        assert [p["name"] for p in residential["data"]] == ["Harbor Lofts"]

        by_client = (await client.get("/api/v1/projects", params={"search": "bayview"})).json()
        assert [p["name"] for p in by_client["data"]] == ["Harbor Lofts"]

        active = (await client.get("/api/v1/projects", params={"status": "active"})).json()
        assert active["meta"]["total"] == 0

    async def test_pagination_meta(self, client: AsyncClient, create_project):
        for _ in range(3):
            await create_project()
        body = (await client.get("/api/v1/projects", params={"page": 2, "limit": 2})).json()
        assert len(body["data"]) == 1
        assert body["meta"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}


class TestProjectStats:
    async def test_empty_project(self, client: AsyncClient, create_project):
        project = await create_project()
        response = await client.get(f"/api/v1/projects/{project['id']}/stats")
        assert response.status_code == 200
        stats = response.json()["data"]
        assert stats["totalHours"] == 0
        assert stats["timeEntryCount"] == 0
        assert stats["firstEntryDate"] is None

    async def test_stats_count_entries_and_approved_cost(self, client: AsyncClient, crew, log_time, approve):
        team = await crew()
        first = await log_time(team, work_date="2025-03-03", regularHours=8, overtimeHours=2)
        await log_time(team, work_date="2025-03-04", regularHours=6)
        await approve(first["id"], team["supervisor"]["id"])

        stats = (await client.get(f"/api/v1/projects/{team['project']['id']}/stats")).json()["data"]
        assert stats["timeEntryCount"] == 2
        assert stats["approvedEntryCount"] == 1
        assert stats["pendingEntryCount"] == 1
        assert stats["totalHours"] == 16
        assert stats["regularHours"] == 14
        assert stats["overtimeHours"] == 2
        # 8 x 40 + 2 x 60, base wages of approved time only
        assert stats["totalLaborCost"] == 440
        assert stats["assignedEmployeeCount"] == 1
        assert stats["firstEntryDate"] == "2025-03-03"
        assert stats["lastEntryDate"] == "2025-03-04"
