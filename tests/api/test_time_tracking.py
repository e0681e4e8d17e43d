"""
Project assignments, time entries, the approval workflow and labor reports.

Tests cover:
- Assignment rules (active employee, duplicates, removal)
- Time entry creation rules (assignment on date, project status, duplicates)
- Approval permission and the status state machine
- Burdened labor cost report
- Vista CSV export and its JSON preview
"""

import csv
import io
from datetime import date, timedelta

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestProjectAssignments:
    async def test_assign_and_list(self, client: AsyncClient, create_employee, create_project, assign):
        employee = await create_employee(firstName="Lee", lastName="Park")
        project = await create_project()
        assignment = await assign(employee["id"], project["id"], role="foreman")
        assert assignment["isActive"] is True
        assert assignment["startDate"] == date.today().isoformat()
        assert assignment["projectNumber"] == project["number"]
        assert assignment["employeeName"] == "Lee Park"

        listed = (await client.get(f"/api/v1/project-assignments/project/{project['id']}")).json()["data"]
        assert [a["employeeId"] for a in listed] == [employee["id"]]

        projects = (await client.get(f"/api/v1/employees/{employee['id']}/projects")).json()["data"]
        assert [a["projectId"] for a in projects] == [project["id"]]

    async def test_duplicate_active_assignment(self, client: AsyncClient, create_employee, create_project, assign):
        employee = await create_employee()
        project = await create_project()
        await assign(employee["id"], project["id"])
        response = await client.post(
            "/api/v1/project-assignments", json={"employeeId": employee["id"], "projectId": project["id"]}
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ASSIGNMENT"

    async def test_unknown_project(self, client: AsyncClient, create_employee):
        employee = await create_employee()
        response = await client.post(
            "/api/v1/project-assignments", json={"employeeId": employee["id"], "projectId": "missing"}
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PROJECT_NOT_FOUND"

    async def test_end_before_start(self, client: AsyncClient, create_employee, create_project):
        employee = await create_employee()
        project = await create_project()
        response = await client.post(
            "/api/v1/project-assignments",
            json={
                "employeeId": employee["id"],
                "projectId": project["id"],
                "startDate": "2025-05-01",
                "endDate": "2025-04-01",
            },
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"

    async def test_remove_by_employee_and_project(self, client: AsyncClient, crew):
        team = await crew()
        url = (
            f"/api/v1/project-assignments/employee/{team['worker']['id']}"
            f"/project/{team['project']['id']}"
        )
        assert (await client.delete(url)).status_code == 204

        active = (
            await client.get(f"/api/v1/project-assignments/project/{team['project']['id']}")
        ).json()["data"]
        assert active == []
        history = (
            await client.get(
                f"/api/v1/project-assignments/project/{team['project']['id']}",
                params={"includeInactive": True},
            )
        ).json()["data"]
        assert history[0]["isActive"] is False
        assert history[0]["endDate"] == date.today().isoformat()

        response = await client.delete(url)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ASSIGNMENT_NOT_FOUND"

    async def test_remove_by_id(self, client: AsyncClient, create_employee, create_project, assign):
        employee = await create_employee()
        project = await create_project()
        assignment = await assign(employee["id"], project["id"])
        response = await client.delete(
            f"/api/v1/project-assignments/{assignment['id']}", params={"endDate": "2030-01-01"}
        )
        assert response.status_code == 204


class TestTimeEntryCreation:
    async def test_logged_entry_is_submitted(self, crew, log_time):
        team = await crew()
        entry = await log_time(team, regularHours=8, overtimeHours=1.5, description="Framing")
        assert entry["status"] == "submitted"
        assert entry["totalHours"] == 9.5
        assert entry["approvedById"] is None

    async def test_requires_assignment(self, client: AsyncClient, crew, create_project):
        team = await crew()
        elsewhere = await create_project()
        response = await client.post(
            "/api/v1/time-entries",
            json={
                "workDate": date.today().isoformat(),
                "employeeId": team["worker"]["id"],
                "projectId": elsewhere["id"],
                "costCodeId": team["cost_code"]["id"],
                "regularHours": 8,
            },
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NOT_ASSIGNED_TO_PROJECT"

    async def test_date_before_assignment_start(self, client: AsyncClient, crew):
        team = await crew()
        response = await client.post(
            "/api/v1/time-entries",
            json={
                "workDate": "2023-12-29",
                "employeeId": team["worker"]["id"],
                "projectId": team["project"]["id"],
                "costCodeId": team["cost_code"]["id"],
                "regularHours": 8,
            },
        )
        assert response.json()["error"]["code"] == "NOT_ASSIGNED_TO_PROJECT"

    @pytest.mark.parametrize("project_status", ["completed", "closed"])
    async def test_inactive_project(self, client: AsyncClient, crew, project_status):
        team = await crew()
        await client.put(f"/api/v1/projects/{team['project']['id']}", json={"status": project_status})
        response = await client.post(
            "/api/v1/time-entries",
            json={
                "workDate": date.today().isoformat(),
                "employeeId": team["worker"]["id"],
                "projectId": team["project"]["id"],
                "costCodeId": team["cost_code"]["id"],
                "regularHours": 8,
            },
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "PROJECT_INACTIVE"

    async def test_duplicate_entry(self, client: AsyncClient, crew, log_time):
        team = await crew()
        entry = await log_time(team)
        response = await client.post(
            "/api/v1/time-entries",
            json={
                "workDate": entry["workDate"],
                "employeeId": entry["employeeId"],
                "projectId": entry["projectId"],
                "costCodeId": entry["costCodeId"],
                "regularHours": 2,
            },
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"

    @pytest.mark.parametrize(
        "hours",
        [
            {"regularHours": 0},
            {"regularHours": 16, "overtimeHours": 9},
            {"regularHours": -1},
        ],
    )
    async def test_hour_limits(self, client: AsyncClient, crew, hours):
        team = await crew()
        payload = {
            "workDate": date.today().isoformat(),
            "employeeId": team["worker"]["id"],
            "projectId": team["project"]["id"],
            "costCodeId": team["cost_code"]["id"],
        }
        payload.update(hours)
        response = await client.post("/api/v1/time-entries", json=payload)
        assert response.status_code == 422

    async def test_future_date(self, client: AsyncClient, crew):
        team = await crew()
        response = await client.post(
            "/api/v1/time-entries",
            json={
                "workDate": (date.today() + timedelta(days=7)).isoformat(),
                "employeeId": team["worker"]["id"],
                "projectId": team["project"]["id"],
                "costCodeId": team["cost_code"]["id"],
                "regularHours": 8,
            },
        )
        assert response.status_code == 422


class TestApprovalWorkflow:
    async def test_supervisor_approves(self, client: AsyncClient, crew, log_time):
        team = await crew()
        entry = await log_time(team)
        response = await client.post(
            f"/api/v1/time-entries/{entry['id']}/approve",
            json={"approverId": team["supervisor"]["id"], "comments": "Looks right"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "approved"
        assert data["approvedById"] == team["supervisor"]["id"]
        assert data["approvedAt"] is not None
        assert data["approvalComments"] == "Looks right"

    async def test_hourly_peer_cannot_approve(self, client: AsyncClient, crew, log_time, create_employee):
        team = await crew()
        peer = await create_employee()
        entry = await log_time(team)
        response = await client.post(
            f"/api/v1/time-entries/{entry['id']}/approve", json={"approverId": peer["id"]}
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "UNAUTHORIZED_APPROVER"

    async def test_direct_supervisor_may_be_hourly(
        self, create_employee, create_project, create_cost_code, assign, log_time, approve
    ):
        lead = await create_employee()
        worker = await create_employee(supervisorId=lead["id"])
        project = await create_project()
        cost_code = await create_cost_code()
        await assign(worker["id"], project["id"], startDate="2024-01-01")
        entry = await log_time({"worker": worker, "project": project, "cost_code": cost_code})
        assert (await approve(entry["id"], lead["id"]))["status"] == "approved"

    async def test_approve_twice(self, client: AsyncClient, crew, log_time, approve):
        team = await crew()
        entry = await log_time(team)
        await approve(entry["id"], team["supervisor"]["id"])
        response = await client.post(
            f"/api/v1/time-entries/{entry['id']}/approve", json={"approverId": team["supervisor"]["id"]}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ALREADY_APPROVED"

    async def test_reject_requires_reason(self, client: AsyncClient, crew, log_time):
        team = await crew()
        entry = await log_time(team)
        url = f"/api/v1/time-entries/{entry['id']}/reject"

        response = await client.post(url, json={"reviewerId": team["supervisor"]["id"], "reason": "  "})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "REASON_REQUIRED"

        response = await client.post(
            url, json={"reviewerId": team["supervisor"]["id"], "reason": "Wrong cost code"}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "rejected"
        assert data["rejectionReason"] == "Wrong cost code"

    async def test_status_changes_through_update(self, client: AsyncClient, crew, log_time):
        team = await crew()
        entry = await log_time(team)
        url = f"/api/v1/time-entries/{entry['id']}"

        response = await client.put(url, json={"status": "approved"})
        assert response.json()["error"]["code"] == "MISSING_APPROVER"

        response = await client.put(
            url, json={"status": "rejected", "approverId": team["supervisor"]["id"]}
        )
        assert response.json()["error"]["code"] == "MISSING_REJECTION_REASON"

        response = await client.put(url, json={"status": "draft"})
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "draft"

        response = await client.put(url, json={"status": "approved", "approverId": team["supervisor"]["id"]})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

        await client.put(url, json={"status": "submitted"})
        response = await client.put(
            url, json={"status": "approved", "approverId": team["supervisor"]["id"]}
        )
        assert response.json()["data"]["status"] == "approved"

        # Reopening an approved entry sends it back for review
        response = await client.put(url, json={"status": "submitted"})
        assert response.json()["data"]["status"] == "submitted"

    async def test_hours_locked_after_approval(self, client: AsyncClient, crew, log_time, approve):
        team = await crew()
        entry = await log_time(team)
        await approve(entry["id"], team["supervisor"]["id"])

        response = await client.put(f"/api/v1/time-entries/{entry['id']}", json={"regularHours": 6})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"

    async def test_edit_hours_while_submitted(self, client: AsyncClient, crew, log_time):
        team = await crew()
        entry = await log_time(team)
        response = await client.put(
            f"/api/v1/time-entries/{entry['id']}", json={"regularHours": 6, "overtimeHours": 1}
        )
        assert response.status_code == 200
        assert response.json()["data"]["totalHours"] == 7

    async def test_delete(self, client: AsyncClient, crew, log_time, approve):
        team = await crew()
        pending = await log_time(team, work_date=date.today() - timedelta(days=1))
        approved = await log_time(team)
        await approve(approved["id"], team["supervisor"]["id"])

        assert (await client.delete(f"/api/v1/time-entries/{pending['id']}")).status_code == 204
        response = await client.delete(f"/api/v1/time-entries/{approved['id']}")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"

    async def test_list_filters(self, client: AsyncClient, crew, log_time, approve):
        team = await crew()
        first = await log_time(team, work_date="2025-02-03")
        await log_time(team, work_date="2025-02-04")
        await approve(first["id"], team["supervisor"]["id"])

        body = (await client.get("/api/v1/time-entries", params={"status": "approved"})).json()
        assert [e["id"] for e in body["data"]] == [first["id"]]

        body = (
            await client.get(
                f"/api/v1/time-entries/project/{team['project']['id']}",
                params={"startDate": "2025-02-04"},
            )
        ).json()
        assert body["meta"]["total"] == 1


class TestCostReport:
    async def test_burdened_cost_by_project_and_code(self, client: AsyncClient, crew, log_time, approve):
        team = await crew()
        entry = await log_time(team, work_date="2025-02-03", regularHours=8, overtimeHours=2)
        await log_time(team, work_date="2025-02-04", regularHours=8)
        await approve(entry["id"], team["supervisor"]["id"])

        report = (await client.get("/api/v1/time-entries/cost-report")).json()["data"]
        assert report["approvedOnly"] is True
        assert report["burdenRate"] == 0.35
        assert report["entryCount"] == 1
        assert report["totalHours"] == 10
        # 8 x 40 + 2 x 60 = 440, burden 35%
        assert report["baseWageCost"] == 440
        assert report["burdenCost"] == 154
        assert report["totalCost"] == 594

        [project] = report["projects"]
        assert project["projectId"] == team["project"]["id"]
        [code] = project["costCodes"]
        assert code["costCode"] == team["cost_code"]["code"]
        assert code["totalCost"] == 594

    async def test_include_unapproved(self, client: AsyncClient, crew, log_time):
        team = await crew()
        await log_time(team)
        report = (
            await client.get("/api/v1/time-entries/cost-report", params={"approvedOnly": False})
        ).json()["data"]
        assert report["entryCount"] == 1
        assert report["totalCost"] == 432

    async def test_unknown_project(self, client: AsyncClient):
        response = await client.get("/api/v1/time-entries/cost-report", params={"projectId": "missing"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PROJECT_NOT_FOUND"


class TestVistaExport:
    async def _approved_week(self, crew, log_time, approve) -> dict:
        team = await crew(employeeNumber="E-7001", firstName="Rosa", lastName="Vega", baseHourlyRate=32.5)
        monday = await log_time(team, work_date="2025-02-03", regularHours=8, overtimeHours=1)
        tuesday = await log_time(team, work_date="2025-02-04", regularHours=7.5)
        await log_time(team, work_date="2025-02-05", regularHours=8)
        await approve(monday["id"], team["supervisor"]["id"])
        await approve(tuesday["id"], team["supervisor"]["id"])
        return team

    async def test_csv_download(self, client: AsyncClient, crew, log_time, approve):
        team = await self._approved_week(crew, log_time, approve)

        response = await client.get(
            "/api/v1/time-entries/export/vista", params={"startDate": "2025-02-01", "endDate": "2025-02-07"}
        )
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert (
            response.headers["content-disposition"]
            == 'attachment; filename="vista-timesheet-20250201-20250207.csv"'
        )
        assert response.headers["x-row-count"] == "2"
        assert response.headers["x-employee-count"] == "1"
        assert response.headers["x-project-count"] == "1"

        rows = list(csv.reader(io.StringIO(response.text)))
        assert rows[0][0] == "EmployeeNumber"
        assert len(rows) == 3
        first = dict(zip(rows[0], rows[1]))
        assert first["EmployeeNumber"] == "E-7001"
        assert first["EmployeeName"] == "Rosa Vega"
        assert first["WorkDate"] == "2025-02-03"
        assert first["ProjectNumber"] == team["project"]["number"]
        assert first["TotalHours"] == "9.00"
        assert first["RegularAmount"] == "260.00"
        assert first["OvertimeAmount"] == "48.75"
        assert first["TotalAmount"] == "308.75"
        assert first["ApprovalStatus"] == "Approved"
        assert first["ApprovedBy"] == "Sam Boss"

    async def test_json_preview(self, client: AsyncClient, crew, log_time, approve):
        await self._approved_week(crew, log_time, approve)
        response = await client.get(
            "/api/v1/time-entries/export/vista",
            params={"startDate": "2025-02-01", "endDate": "2025-02-07"},
            headers={"Accept": "application/json"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["fileName"] == "vista-timesheet-20250201-20250207.csv"
        assert data["rowCount"] == 2
        assert data["totalHours"] == 16.5
        assert data["employeeCount"] == 1

    async def test_empty_range_is_header_only(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/time-entries/export/vista", params={"startDate": "2025-02-01", "endDate": "2025-02-07"}
        )
        assert response.status_code == 200
        assert response.headers["x-row-count"] == "0"
        assert response.text.strip().startswith("EmployeeNumber")
        assert len(response.text.strip().splitlines()) == 1

    async def test_invalid_ranges(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/time-entries/export/vista", params={"startDate": "2025-02-07", "endDate": "2025-02-01"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_DATE_RANGE"

        response = await client.get(
            "/api/v1/time-entries/export/vista", params={"startDate": "2024-01-01", "endDate": "2025-06-01"}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DATE_RANGE_TOO_LARGE"

    async def test_dates_are_required(self, client: AsyncClient):
        response = await client.get("/api/v1/time-entries/export/vista")
        assert response.status_code == 422
