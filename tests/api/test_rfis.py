"""
Requests for information, numbered per project.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _open_rfi(client: AsyncClient, project_id: str, **overrides) -> dict:
    payload = {"subject": "Footing depth", "question": "Drawings S-101 and S-102 disagree on depth."}
    payload.update(overrides)
    response = await client.post(f"/api/v1/projects/{project_id}/rfis", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestRfis:
    async def test_numbering_per_project(self, client: AsyncClient, create_project):
        first_project = await create_project()
        second_project = await create_project()

        one = await _open_rfi(client, first_project["id"])
        two = await _open_rfi(client, first_project["id"], priority="urgent")
        other = await _open_rfi(client, second_project["id"])

        assert (one["number"], two["number"], other["number"]) == (1, 2, 1)
        assert one["status"] == "open"
        assert one["priority"] == "normal"
        assert two["priority"] == "urgent"

    async def test_deleted_numbers_are_not_reused(self, client: AsyncClient, create_project):
        project = await create_project()
        first = await _open_rfi(client, project["id"])
        url = f"/api/v1/projects/{project['id']}/rfis/{first['id']}"
        assert (await client.delete(url)).status_code == 204
        assert (await client.get(url)).status_code == 404

        second = await _open_rfi(client, project["id"])
        assert second["number"] == 2

    async def test_answer_then_close(self, client: AsyncClient, create_project):
        project = await create_project()
        rfi = await _open_rfi(client, project["id"])
        url = f"/api/v1/projects/{project['id']}/rfis/{rfi['id']}"

        answered = (
            await client.put(url, json={"status": "answered", "answer": "Use 36 inches per S-102."})
        ).json()["data"]
        assert answered["status"] == "answered"
        assert answered["answer"] == "Use 36 inches per S-102."
        assert answered["answeredAt"] is not None
        assert answered["closedAt"] is None

        closed = (await client.put(url, json={"status": "closed"})).json()["data"]
        assert closed["closedAt"] is not None
        assert closed["answeredAt"] is not None

    async def test_null_required_fields_are_ignored(self, client: AsyncClient, create_project):
        project = await create_project()
        rfi = await _open_rfi(client, project["id"])
        response = await client.put(
            f"/api/v1/projects/{project['id']}/rfis/{rfi['id']}",
            json={"subject": None, "dueDate": "2025-04-01"},
        )
        data = response.json()["data"]
        assert data["subject"] == "Footing depth"
        assert data["dueDate"] == "2025-04-01"

    async def test_list_newest_first_with_filters(self, client: AsyncClient, create_project):
        project = await create_project()
        await _open_rfi(client, project["id"], subject="Rebar spacing")
        second = await _open_rfi(client, project["id"], subject="Door hardware")
        await client.put(
            f"/api/v1/projects/{project['id']}/rfis/{second['id']}", json={"status": "answered"}
        )

        body = (await client.get(f"/api/v1/projects/{project['id']}/rfis")).json()
        assert [r["number"] for r in body["data"]] == [2, 1]

        answered = (
            await client.get(f"/api/v1/projects/{project['id']}/rfis", params={"status": "answered"})
        ).json()
        assert [r["subject"] for r in answered["data"]] == ["Door hardware"]

        found = (
            await client.get(f"/api/v1/projects/{project['id']}/rfis", params={"search": "rebar"})
        ).json()
        assert [r["subject"] for r in found["data"]] == ["Rebar spacing"]

    async def test_rfi_belongs_to_its_project(self, client: AsyncClient, create_project):
        project = await create_project()
        other = await create_project()
        rfi = await _open_rfi(client, project["id"])
        response = await client.get(f"/api/v1/projects/{other['id']}/rfis/{rfi['id']}")
        assert response.status_code == 404

    async def test_unknown_project(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/projects/missing/rfis", json={"subject": "x", "question": "y"}
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PROJECT_NOT_FOUND"
