"""
Pay periods and the payroll batch lifecycle: draft, calculated, approved, posted.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

WEEK = {"startDate": "2025-03-01", "endDate": "2025-03-07", "payDate": "2025-03-12", "frequency": "weekly"}


@pytest.fixture
def create_period(client: AsyncClient):
    async def _create(**overrides) -> dict:
        payload = dict(WEEK)
        payload.update(overrides)
        response = await client.post("/api/v1/pay-periods", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_batch(client: AsyncClient):
    async def _create(period_id: str) -> dict:
        response = await client.post("/api/v1/payroll-batches", json={"payPeriodId": period_id})
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


class TestPayPeriods:
    async def test_create_is_open(self, create_period):
        period = await create_period()
        assert period["status"] == "open"
        assert period["frequency"] == "weekly"

    async def test_overlap(self, client: AsyncClient, create_period):
        await create_period()
        response = await client.post(
            "/api/v1/pay-periods",
            json={"startDate": "2025-03-05", "endDate": "2025-03-12", "payDate": "2025-03-14"},
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "OVERLAP"

    async def test_adjacent_periods_are_fine(self, create_period):
        await create_period()
        await create_period(startDate="2025-03-08", endDate="2025-03-14", payDate="2025-03-19")

    async def test_pay_date_before_end(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/pay-periods",
            json={"startDate": "2025-03-01", "endDate": "2025-03-07", "payDate": "2025-03-06"},
        )
        assert response.status_code == 422

    async def test_current_period(self, client: AsyncClient, create_period):
        response = await client.get("/api/v1/pay-periods/current")
        assert response.status_code == 404

        await create_period()
        later = await create_period(startDate="2025-03-08", endDate="2025-03-14", payDate="2025-03-19")
        response = await client.get("/api/v1/pay-periods/current")
        assert response.status_code == 200
        assert response.json()["data"]["id"] == later["id"]

    async def test_close_empty_period(self, client: AsyncClient, create_period):
        period = await create_period()
        response = await client.post(f"/api/v1/pay-periods/{period['id']}/close", json={"closedBy": "controller"})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "closed"
        assert data["closedBy"] == "controller"
        assert data["closedAt"] is not None

        response = await client.post(f"/api/v1/pay-periods/{period['id']}/close")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ALREADY_CLOSED"


class TestPayrollBatches:
    async def test_batch_numbering_and_period_status(self, client: AsyncClient, create_period, create_batch):
        period = await create_period()
        first = await create_batch(period["id"])
        assert first["batchNumber"] == "20250307-01"
        assert first["status"] == "draft"
        assert first["entries"] == []
        assert first["createdBy"] == "system"

        assert (await client.delete(f"/api/v1/payroll-batches/{first['id']}")).status_code == 204
        second = await create_batch(period["id"])
        assert second["batchNumber"] == "20250307-02"

        refreshed = (await client.get(f"/api/v1/pay-periods/{period['id']}")).json()["data"]
        assert refreshed["status"] == "processing"

    async def test_unknown_period(self, client: AsyncClient):
        response = await client.post("/api/v1/payroll-batches", json={"payPeriodId": "missing"})
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PERIOD_NOT_FOUND"

    async def test_full_lifecycle(
        self, client: AsyncClient, crew, log_time, approve, create_period, create_batch
    ):
        team = await crew()
        approved = await log_time(team, work_date="2025-03-03", regularHours=8)
        await log_time(team, work_date="2025-03-04", regularHours=8)  # never approved
        outside = await log_time(team, work_date="2025-03-10", regularHours=8)
        await approve(approved["id"], team["supervisor"]["id"])
        await approve(outside["id"], team["supervisor"]["id"])

        period = await create_period()
        batch = await create_batch(period["id"])

        response = await client.post(
            f"/api/v1/payroll-batches/{batch['id']}/calculate", json={"performedBy": "payroll clerk"}
        )
        assert response.status_code == 200
        calculated = response.json()["data"]
        assert calculated["status"] == "calculated"
        assert calculated["calculatedBy"] == "payroll clerk"
        assert calculated["employeeCount"] == 1
        assert calculated["totalRegularHours"] == 8

        [entry] = calculated["entries"]
        assert entry["employeeId"] == team["worker"]["id"]
        assert entry["hourlyRate"] == 40
        assert entry["grossPay"] == 320
        assert entry["federalWithholding"] == 32
        assert entry["socialSecurity"] == 19.84
        assert entry["medicare"] == 4.64
        assert entry["netPay"] == 263.52
        assert entry["employerTaxes"] == 26.4
        assert entry["employerCost"] == 346.4
        assert calculated["totalNet"] == 263.52

        # Recalculating replaces the entries rather than adding to them
        again = (await client.post(f"/api/v1/payroll-batches/{batch['id']}/calculate")).json()["data"]
        assert len(again["entries"]) == 1
        assert again["totalGross"] == 320

        approved_batch = (await client.post(f"/api/v1/payroll-batches/{batch['id']}/approve")).json()["data"]
        assert approved_batch["status"] == "approved"
        assert approved_batch["approvedBy"] == "system"

        posted = (await client.post(f"/api/v1/payroll-batches/{batch['id']}/post")).json()["data"]
        assert posted["status"] == "posted"
        assert posted["postedAt"] is not None

        response = await client.post(f"/api/v1/payroll-batches/{batch['id']}/void")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ALREADY_POSTED"

        closed = await client.post(f"/api/v1/pay-periods/{period['id']}/close")
        assert closed.status_code == 200

        response = await client.post("/api/v1/payroll-batches", json={"payPeriodId": period["id"]})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "PERIOD_CLOSED"

    async def test_out_of_order_steps(self, client: AsyncClient, create_period, create_batch):
        period = await create_period()
        batch = await create_batch(period["id"])

        response = await client.post(f"/api/v1/payroll-batches/{batch['id']}/approve")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NOT_CALCULATED"

        response = await client.post(f"/api/v1/payroll-batches/{batch['id']}/post")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NOT_APPROVED"

        await client.post(f"/api/v1/payroll-batches/{batch['id']}/calculate")
        response = await client.delete(f"/api/v1/payroll-batches/{batch['id']}")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"

    async def test_period_close_waits_for_batches(self, client: AsyncClient, create_period, create_batch):
        period = await create_period()
        batch = await create_batch(period["id"])

        response = await client.post(f"/api/v1/pay-periods/{period['id']}/close")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BATCHES_NOT_POSTED"

        voided = (await client.post(f"/api/v1/payroll-batches/{batch['id']}/void")).json()["data"]
        assert voided["status"] == "voided"

        response = await client.post(f"/api/v1/payroll-batches/{batch['id']}/void")
        assert response.json()["error"]["code"] == "INVALID_STATUS"

        response = await client.post(f"/api/v1/pay-periods/{period['id']}/close")
        assert response.status_code == 200

    async def test_list_summaries(self, client: AsyncClient, create_period, create_batch):
        period = await create_period()
        await create_batch(period["id"])
        body = (await client.get("/api/v1/payroll-batches", params={"payPeriodId": period["id"]})).json()
        assert body["meta"]["total"] == 1
        assert "entries" not in body["data"][0]


class TestBatchClaims:
    async def test_second_batch_in_period_pays_nothing_twice(
        self, client: AsyncClient, crew, log_time, approve, create_period, create_batch
    ):
        team = await crew()
        entry = await log_time(team, work_date="2025-03-03", regularHours=8)
        await approve(entry["id"], team["supervisor"]["id"])
        period = await create_period()

        first = await create_batch(period["id"])
        paid = (await client.post(f"/api/v1/payroll-batches/{first['id']}/calculate")).json()["data"]
        assert paid["totalGross"] == 320

        second = await create_batch(period["id"])
        response = await client.post(f"/api/v1/payroll-batches/{second['id']}/calculate")
        assert response.status_code == 200
        repeat = response.json()["data"]
        assert repeat["totalGross"] == 0
        assert repeat["employeeCount"] == 0
        assert repeat["entries"] == []

        claimed = (await client.get(f"/api/v1/time-entries/{entry['id']}")).json()["data"]
        assert claimed["payrollBatchId"] == first["id"]

    async def test_voiding_releases_hours(
        self, client: AsyncClient, crew, log_time, approve, create_period, create_batch
    ):
        team = await crew()
        entry = await log_time(team, work_date="2025-03-03", regularHours=8)
        await approve(entry["id"], team["supervisor"]["id"])
        period = await create_period()

        first = await create_batch(period["id"])
        await client.post(f"/api/v1/payroll-batches/{first['id']}/calculate")
        second = await create_batch(period["id"])
        await client.post(f"/api/v1/payroll-batches/{second['id']}/calculate")

        assert (await client.post(f"/api/v1/payroll-batches/{first['id']}/void")).status_code == 200
        released = (await client.get(f"/api/v1/time-entries/{entry['id']}")).json()["data"]
        assert released["payrollBatchId"] is None

        recalculated = (await client.post(f"/api/v1/payroll-batches/{second['id']}/calculate")).json()["data"]
        assert recalculated["totalGross"] == 320


@pytest.fixture
def paid_week(client: AsyncClient, crew, log_time, approve, create_period, create_batch):
    """One worker with a single approved 8-hour day at $40, and a draft batch for that week."""

    async def _setup() -> tuple[dict, dict]:
        team = await crew()
        entry = await log_time(team, work_date="2025-03-03", regularHours=8)
        await approve(entry["id"], team["supervisor"]["id"])
        period = await create_period()
        batch = await create_batch(period["id"])
        return team, batch

    return _setup


async def _calculate(client: AsyncClient, batch: dict) -> dict:
    response = await client.post(f"/api/v1/payroll-batches/{batch['id']}/calculate")
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestPayrollUsesEmployeeSetup:
    async def test_exempt_federal_election(self, client: AsyncClient, paid_week):
        team, batch = await paid_week()
        response = await client.post(
            "/api/v1/withholding-elections",
            json={"employeeId": team["worker"]["id"], "isExempt": True, "effectiveDate": "2025-01-01"},
        )
        assert response.status_code == 201

        [entry] = (await _calculate(client, batch))["entries"]
        assert entry["federalWithholding"] == 0
        assert entry["netPay"] == 295.52

    async def test_additional_withholding(self, client: AsyncClient, paid_week):
        team, batch = await paid_week()
        await client.post(
            "/api/v1/withholding-elections",
            json={"employeeId": team["worker"]["id"], "additionalWithholding": 15, "effectiveDate": "2025-01-01"},
        )
        [entry] = (await _calculate(client, batch))["entries"]
        assert entry["federalWithholding"] == 47

    async def test_deductions_and_employer_match(self, client: AsyncClient, paid_week):
        team, batch = await paid_week()
        worker_id = team["worker"]["id"]
        retirement = await client.post(
            "/api/v1/deductions",
            json={
                "employeeId": worker_id,
                "deductionCode": "401k",
                "description": "Retirement plan",
                "method": "percent_of_gross",
                "amount": 5,
                "isPreTax": True,
                "employerMatch": 50,
                "effectiveDate": "2025-01-01",
            },
        )
        assert retirement.status_code == 201
        assert retirement.json()["data"]["deductionCode"] == "401K"
        await client.post(
            "/api/v1/deductions",
            json={
                "employeeId": worker_id,
                "deductionCode": "GARN",
                "description": "Wage garnishment",
                "amount": 50,
                "priority": 10,
                "effectiveDate": "2025-01-01",
            },
        )

        calculated = await _calculate(client, batch)
        [entry] = calculated["entries"]
        assert entry["grossPay"] == 320
        assert entry["preTaxDeductions"] == 16
        assert entry["federalWithholding"] == 30.4
        assert entry["socialSecurity"] == 19.84
        assert entry["postTaxDeductions"] == 50
        assert entry["totalDeductions"] == 120.88
        assert entry["netPay"] == 199.12
        assert entry["employerContributions"] == 8
        assert entry["employerCost"] == 354.4
        assert [(line["deductionCode"], line["amount"]) for line in entry["deductionLines"]] == [
            ("401K", 16),
            ("GARN", 50),
        ]

        await client.post(f"/api/v1/payroll-batches/{batch['id']}/approve")
        await client.post(f"/api/v1/payroll-batches/{batch['id']}/post")
        deduction = (await client.get(f"/api/v1/deductions/{retirement.json()['data']['id']}")).json()["data"]
        assert deduction["ytdAmount"] == 16

    async def test_deduction_cannot_exceed_net(self, client: AsyncClient, paid_week):
        team, batch = await paid_week()
        await client.post(
            "/api/v1/deductions",
            json={
                "employeeId": team["worker"]["id"],
                "deductionCode": "LOAN",
                "description": "Tool loan",
                "amount": 1000,
                "effectiveDate": "2025-01-01",
            },
        )
        [entry] = (await _calculate(client, batch))["entries"]
        assert entry["postTaxDeductions"] == 263.52
        assert entry["netPay"] == 0

    async def test_union_membership_fringes(self, client: AsyncClient, paid_week):
        team, batch = await paid_week()
        response = await client.post(
            "/api/v1/union-memberships",
            json={
                "employeeId": team["worker"]["id"],
                "unionLocal": "Carpenters Local 1",
                "membershipNumber": "C-77",
                "classification": "Journeyman",
                "fringeRate": 10,
                "healthWelfareRate": 5,
                "effectiveDate": "2025-01-01",
            },
        )
        assert response.status_code == 201
        assert response.json()["data"]["totalFringeRate"] == 15

        calculated = await _calculate(client, batch)
        [entry] = calculated["entries"]
        assert entry["unionFringes"] == 120
        assert entry["employerCost"] == 466.4
        assert calculated["totalUnionFringes"] == 120
