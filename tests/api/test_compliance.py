"""
Employment eligibility: Form I-9 records and E-Verify cases.
"""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
def create_i9(client: AsyncClient):
    async def _create(employee_id: str, **overrides) -> dict:
        payload = {
            "employeeId": employee_id,
            "section1CompletedDate": "2025-03-03",
            "citizenshipStatus": "citizen",
            "employmentStartDate": "2025-03-03",
        }
        payload.update(overrides)
        response = await client.post("/api/v1/i9-records", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


class TestI9Records:
    async def test_section1_then_section2(self, client: AsyncClient, create_employee, create_i9):
        employee = await create_employee()
        record = await create_i9(employee["id"])
        assert record["status"] == "section1_complete"
        assert record["needsReverification"] is False

        response = await client.put(
            f"/api/v1/i9-records/{record['id']}",
            json={
                "section2CompletedDate": "2025-03-05",
                "section2CompletedBy": "HR Manager",
                "listADocumentType": "U.S. Passport",
                "listADocumentNumber": "X1234567",
            },
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "section2_complete"
        assert data["listADocumentType"] == "U.S. Passport"

    async def test_one_record_per_employee(self, client: AsyncClient, create_employee, create_i9):
        employee = await create_employee()
        await create_i9(employee["id"])
        response = await client.post(
            "/api/v1/i9-records",
            json={
                "employeeId": employee["id"],
                "section1CompletedDate": "2025-03-03",
                "citizenshipStatus": "citizen",
                "employmentStartDate": "2025-03-03",
            },
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "I9_EXISTS"

    async def test_status_specific_documents(self, client: AsyncClient, create_employee):
        employee = await create_employee()
        base = {"employeeId": employee["id"], "section1CompletedDate": "2025-03-03", "employmentStartDate": "2025-03-03"}

        response = await client.post("/api/v1/i9-records", json={**base, "citizenshipStatus": "permanent_resident"})
        assert response.status_code == 422

        response = await client.post("/api/v1/i9-records", json={**base, "citizenshipStatus": "authorized_alien"})
        assert response.status_code == 422

    async def test_reverification_window(self, client: AsyncClient, create_employee, create_i9):
        soon = await create_employee()
        later = await create_employee()
        await create_i9(
            soon["id"],
            citizenshipStatus="authorized_alien",
            workAuthorizationExpires=(date.today() + timedelta(days=30)).isoformat(),
        )
        await create_i9(
            later["id"],
            citizenshipStatus="authorized_alien",
            workAuthorizationExpires=(date.today() + timedelta(days=200)).isoformat(),
        )

        due = (await client.get("/api/v1/i9-records/reverification-needed")).json()["data"]
        assert [r["employeeId"] for r in due] == [soon["id"]]
        assert due[0]["needsReverification"] is True

        wider = (await client.get("/api/v1/i9-records/reverification-needed", params={"days": 365})).json()["data"]
        assert len(wider) == 2


class TestEVerifyCases:
    async def test_case_linked_to_i9(self, client: AsyncClient, create_employee, create_i9):
        employee = await create_employee()
        record = await create_i9(employee["id"])
        response = await client.post(
            "/api/v1/everify-cases",
            json={
                "employeeId": employee["id"],
                "i9RecordId": record["id"],
                "caseNumber": "2025062123456",
                "submittedBy": "HR Manager",
            },
        )
        assert response.status_code == 201
        case = response.json()["data"]
        assert case["status"] == "pending"
        assert case["needsAction"] is False

    async def test_unknown_i9(self, client: AsyncClient, create_employee):
        employee = await create_employee()
        response = await client.post(
            "/api/v1/everify-cases",
            json={"employeeId": employee["id"], "i9RecordId": "missing", "caseNumber": "1", "submittedBy": "HR"},
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "I9_NOT_FOUND"

    async def test_tentative_nonconfirmation_needs_action(self, client: AsyncClient, create_employee):
        employee = await create_employee()
        case = (
            await client.post(
                "/api/v1/everify-cases",
                json={"employeeId": employee["id"], "caseNumber": "2025-1", "submittedBy": "HR"},
            )
        ).json()["data"]

        response = await client.put(
            f"/api/v1/everify-cases/{case['id']}",
            json={
                "status": "tentative_nonconfirmation",
                "tncDeadline": (date.today() + timedelta(days=8)).isoformat(),
                "ssaResult": "tentative_nonconfirmation",
            },
        )
        assert response.status_code == 200
        assert response.json()["data"]["needsAction"] is True

        pending = (await client.get("/api/v1/everify-cases/needs-action")).json()["data"]
        assert [c["id"] for c in pending] == [case["id"]]

    async def test_closing_stamps_closed_date(self, client: AsyncClient, create_employee):
        employee = await create_employee()
        case = (
            await client.post(
                "/api/v1/everify-cases",
                json={"employeeId": employee["id"], "caseNumber": "2025-2", "submittedBy": "HR"},
            )
        ).json()["data"]
        closed = (
            await client.put(f"/api/v1/everify-cases/{case['id']}", json={"status": "closed"})
        ).json()["data"]
        assert closed["closedDate"] == date.today().isoformat()
