"""
Subcontracts, change orders and payment applications.

Tests cover:
- Subcontract defaults and numbering per project
- Approved change orders moving the subcontract's current value
- G702 running totals across successive payment applications
- Paid applications rolling up into the subcontract
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
def create_subcontract(client: AsyncClient, create_project):
    async def _create(**overrides) -> dict:
        project_id = overrides.pop("projectId", None) or (await create_project())["id"]
        payload = {
            "projectId": project_id,
            "subcontractNumber": "SC-001",
            "subcontractorName": "Lone Star Electric",
            "scopeOfWork": "Electrical rough-in and trim",
            "originalValue": 100000,
        }
        payload.update(overrides)
        response = await client.post("/api/v1/subcontracts", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


async def _get_subcontract(client: AsyncClient, subcontract_id: str) -> dict:
    response = await client.get(f"/api/v1/subcontracts/{subcontract_id}")
    assert response.status_code == 200
    return response.json()["data"]


class TestSubcontracts:
    async def test_create_defaults(self, create_subcontract):
        sub = await create_subcontract()
        assert sub["status"] == "draft"
        assert sub["currentValue"] == 100000
        assert sub["retainagePercent"] == 10
        assert sub["billedToDate"] == 0
        assert sub["insuranceCurrent"] is False

    async def test_unknown_project(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/subcontracts",
            json={
                "projectId": "missing",
                "subcontractNumber": "SC-9",
                "subcontractorName": "Nobody",
                "scopeOfWork": "Nothing",
                "originalValue": 10,
            },
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PROJECT_NOT_FOUND"

    async def test_number_unique_within_project(self, client: AsyncClient, create_subcontract, create_project):
        first = await create_subcontract()
        response = await client.post(
            "/api/v1/subcontracts",
            json={
                "projectId": first["projectId"],
                "subcontractNumber": "SC-001",
                "subcontractorName": "Second",
                "scopeOfWork": "Plumbing",
                "originalValue": 5000,
            },
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_NUMBER"

        # The same number on another project is fine
        await create_subcontract()

    async def test_original_value_must_be_positive(self, client: AsyncClient, create_project):
        project = await create_project()
        response = await client.post(
            "/api/v1/subcontracts",
            json={
                "projectId": project["id"],
                "subcontractNumber": "SC-2",
                "subcontractorName": "Zero",
                "scopeOfWork": "None",
                "originalValue": 0,
            },
        )
        assert response.status_code == 422

    async def test_list_by_project(self, client: AsyncClient, create_subcontract):
        first = await create_subcontract()
        await create_subcontract()
        body = (await client.get("/api/v1/subcontracts", params={"projectId": first["projectId"]})).json()
        assert body["meta"]["total"] == 1


class TestChangeOrders:
    async def _create(self, client: AsyncClient, subcontract_id: str, number: str, amount) -> dict:
        response = await client.post(
            "/api/v1/change-orders",
            json={
                "subcontractId": subcontract_id,
                "changeOrderNumber": number,
                "title": "Added circuits",
                "description": "Two extra 20A circuits in the break room",
                "amount": amount,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    async def test_pending_change_order_does_not_move_value(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        co = await self._create(client, sub["id"], "CO-1", 2500)
        assert co["status"] == "pending"
        assert (await _get_subcontract(client, sub["id"]))["currentValue"] == 100000

    async def test_approval_adds_and_rejection_reverses(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        co = await self._create(client, sub["id"], "CO-1", 2500)

        response = await client.put(
            f"/api/v1/change-orders/{co['id']}", json={"status": "approved", "approvedBy": "PM"}
        )
        assert response.status_code == 200
        assert response.json()["data"]["approvedDate"] is not None
        assert (await _get_subcontract(client, sub["id"]))["currentValue"] == 102500

        await client.put(f"/api/v1/change-orders/{co['id']}", json={"status": "rejected"})
        assert (await _get_subcontract(client, sub["id"]))["currentValue"] == 100000

    async def test_credit_change_order(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        co = await self._create(client, sub["id"], "CO-2", -1500)
        await client.put(f"/api/v1/change-orders/{co['id']}", json={"status": "approved"})
        assert (await _get_subcontract(client, sub["id"]))["currentValue"] == 98500

    async def test_deleting_approved_change_order_restores_value(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        co = await self._create(client, sub["id"], "CO-3", 4000)
        await client.put(f"/api/v1/change-orders/{co['id']}", json={"status": "approved"})

        assert (await client.delete(f"/api/v1/change-orders/{co['id']}")).status_code == 204
        assert (await _get_subcontract(client, sub["id"]))["currentValue"] == 100000

    async def test_unknown_subcontract(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/change-orders",
            json={
                "subcontractId": "missing",
                "changeOrderNumber": "CO-1",
                "title": "x",
                "description": "x",
                "amount": 1,
            },
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SUBCONTRACT_NOT_FOUND"


class TestPaymentApplications:
    async def _create(self, client: AsyncClient, subcontract_id: str, work, stored=0, start="2025-01-01", end="2025-01-31") -> dict:
        response = await client.post(
            "/api/v1/payment-applications",
            json={
                "subcontractId": subcontract_id,
                "periodStart": start,
                "periodEnd": end,
                "workCompletedThisPeriod": work,
                "storedMaterials": stored,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    async def test_running_totals_across_applications(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        first = await self._create(client, sub["id"], 20000, stored=5000)
        assert first["applicationNumber"] == 1
        assert first["status"] == "draft"
        assert first["scheduledValue"] == 100000
        assert first["retainageThisPeriod"] == 2000
        assert first["currentPaymentDue"] == 23000

        second = await self._create(client, sub["id"], 30000, start="2025-02-01", end="2025-02-28")
        assert second["applicationNumber"] == 2
        assert second["workCompletedPrevious"] == 20000
        assert second["workCompletedToDate"] == 50000
        assert second["totalRetainage"] == 5000
        assert second["lessPreviousCertificates"] == 23000
        assert second["currentPaymentDue"] == 22000

    async def test_period_end_before_start(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        response = await client.post(
            "/api/v1/payment-applications",
            json={
                "subcontractId": sub["id"],
                "periodStart": "2025-02-01",
                "periodEnd": "2025-01-01",
                "workCompletedThisPeriod": 10,
            },
        )
        assert response.status_code == 422

    async def test_paid_application_rolls_into_subcontract(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        app = await self._create(client, sub["id"], 20000, stored=5000)

        response = await client.put(f"/api/v1/payment-applications/{app['id']}", json={"status": "paid"})
        assert response.status_code == 200
        assert response.json()["data"]["paidDate"] is not None

        refreshed = await _get_subcontract(client, sub["id"])
        assert refreshed["billedToDate"] == 23000
        assert refreshed["paidToDate"] == 23000
        assert refreshed["retainageHeld"] == 2000

    async def test_approved_amount_is_what_gets_paid(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        app = await self._create(client, sub["id"], 10000)
        await client.put(
            f"/api/v1/payment-applications/{app['id']}",
            json={"status": "paid", "approvedAmount": 8500},
        )
        refreshed = await _get_subcontract(client, sub["id"])
        assert refreshed["billedToDate"] == 9000
        assert refreshed["paidToDate"] == 8500

    async def test_amounts_locked_after_approval(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        app = await self._create(client, sub["id"], 10000)
        await client.put(f"/api/v1/payment-applications/{app['id']}", json={"status": "approved"})

        response = await client.put(
            f"/api/v1/payment-applications/{app['id']}", json={"workCompletedThisPeriod": 12000}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"

    async def test_draft_amounts_are_recalculated(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        app = await self._create(client, sub["id"], 10000)
        response = await client.put(
            f"/api/v1/payment-applications/{app['id']}", json={"workCompletedThisPeriod": 12000}
        )
        data = response.json()["data"]
        assert data["retainageThisPeriod"] == 1200
        assert data["currentPaymentDue"] == 10800

    async def test_paid_application_cannot_be_deleted(self, client: AsyncClient, create_subcontract):
        sub = await create_subcontract()
        app = await self._create(client, sub["id"], 1000)
        await client.put(f"/api/v1/payment-applications/{app['id']}", json={"status": "paid"})

        response = await client.delete(f"/api/v1/payment-applications/{app['id']}")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"
