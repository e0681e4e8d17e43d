"""Factories that create records through the API for the endpoint tests."""

import itertools
from datetime import date

import pytest
from httpx import AsyncClient

_seq = itertools.count(1)

CREW_START = "2024-01-01"


@pytest.fixture
def create_project(client: AsyncClient):
    async def _create(**overrides) -> dict:
        n = next(_seq)
        payload = {"name": f"Project {n}", "number": f"P-{n:04d}", "contractAmount": 250000}
        payload.update(overrides)
        response = await client.post("/api/v1/projects", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_employee(client: AsyncClient):
    async def _create(**overrides) -> dict:
        n = next(_seq)
        payload = {
            "employeeNumber": f"E-{n:04d}",
            "firstName": "Worker",
            "lastName": f"Number{n}",
            "classification": "hourly",
            "baseHourlyRate": 40,
        }
        payload.update(overrides)
        response = await client.post("/api/v1/employees", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def create_cost_code(client: AsyncClient):
    async def _create(**overrides) -> dict:
        n = next(_seq)
        payload = {"code": f"01-{n:03d}", "description": f"Labor code {n}"}
        payload.update(overrides)
        response = await client.post("/api/v1/cost-codes", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def assign(client: AsyncClient):
    async def _assign(employee_id: str, project_id: str, **overrides) -> dict:
        payload = {"employeeId": employee_id, "projectId": project_id}
        payload.update(overrides)
        response = await client.post("/api/v1/project-assignments", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _assign


@pytest.fixture
def crew(create_project, create_employee, create_cost_code, assign):
    """An hourly worker assigned to a project, their supervisor, and a labor cost code."""

    async def _crew(**employee_overrides) -> dict:
        project = await create_project()
        supervisor = await create_employee(classification="supervisor", firstName="Sam", lastName="Boss")
        worker = await create_employee(supervisorId=supervisor["id"], **employee_overrides)
        cost_code = await create_cost_code()
        await assign(worker["id"], project["id"], startDate=CREW_START)
        return {"project": project, "supervisor": supervisor, "worker": worker, "cost_code": cost_code}

    return _crew


@pytest.fixture
def log_time(client: AsyncClient):
    async def _log(crew: dict, work_date: date | str | None = None, **hours) -> dict:
        work_date = work_date or date.today()
        payload = {
            "workDate": work_date if isinstance(work_date, str) else work_date.isoformat(),
            "employeeId": crew["worker"]["id"],
            "projectId": crew["project"]["id"],
            "costCodeId": crew["cost_code"]["id"],
            "regularHours": 8,
        }
        payload.update(hours)
        response = await client.post("/api/v1/time-entries", json=payload)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _log


@pytest.fixture
def approve(client: AsyncClient):
    async def _approve(entry_id: str, approver_id: str) -> dict:
        response = await client.post(
            f"/api/v1/time-entries/{entry_id}/approve", json={"approverId": approver_id}
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _approve
