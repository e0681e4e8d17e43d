"""
Tenant provisioning and per-request tenant resolution.

Tests cover:
- Creating and listing tenants (not tenant-scoped)
- Header, subdomain and missing-tenant resolution
- Suspended tenants
- Row isolation between tenants
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import update

from groundwork.domain.tenant import Tenant

pytestmark = pytest.mark.asyncio


class TestTenantProvisioning:
    async def test_create_tenant_derives_slug(self, anonymous_client: AsyncClient):
        response = await anonymous_client.post("/api/v1/tenants", json={"name": "Bob's Builders Inc"})
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["slug"] == "bobs-builders-inc"
        assert data["status"] == "active"
        assert data["plan"] == "standard"

    async def test_duplicate_slug(self, anonymous_client: AsyncClient):
        await anonymous_client.post("/api/v1/tenants", json={"name": "Acme Builders"})
        response = await anonymous_client.post("/api/v1/tenants", json={"name": "acme  builders"})
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_SLUG"

    async def test_get_and_list_tenants(self, anonymous_client: AsyncClient):
        created = (await anonymous_client.post("/api/v1/tenants", json={"name": "Zed Co"})).json()["data"]

        response = await anonymous_client.get(f"/api/v1/tenants/{created['id']}")
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Zed Co"

        listing = (await anonymous_client.get("/api/v1/tenants")).json()
        assert listing["meta"]["total"] == 1

    async def test_unknown_tenant(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get(f"/api/v1/tenants/{uuid.uuid4()}")
        assert response.status_code == 404


class TestTenantResolution:
    async def test_health_needs_no_tenant(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    async def test_missing_tenant_is_unauthorized(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get("/api/v1/projects")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_tenant_header_must_be_uuid(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get("/api/v1/projects", headers={"X-Tenant-Id": "acme"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_TENANT"

    async def test_subdomain_resolves_tenant(self, anonymous_client: AsyncClient):
        tenant = (await anonymous_client.post("/api/v1/tenants", json={"name": "Acme"})).json()["data"]

        created = await anonymous_client.post(
            "/api/v1/projects",
            json={"name": "Warehouse", "number": "W-1"},
            headers={"Host": "acme.groundwork.app"},
        )
        assert created.status_code == 201

        # The same row is visible through the tenant's id
        response = await anonymous_client.get(
            f"/api/v1/projects/{created.json()['data']['id']}",
            headers={"X-Tenant-Id": tenant["id"]},
        )
        assert response.status_code == 200

    async def test_unknown_subdomain_is_unauthorized(self, anonymous_client: AsyncClient):
        response = await anonymous_client.get("/api/v1/projects", headers={"Host": "nobody.groundwork.app"})
        assert response.status_code == 401

    async def test_suspended_tenant_is_forbidden(self, anonymous_client: AsyncClient, session):
        tenant = (await anonymous_client.post("/api/v1/tenants", json={"name": "Gone Co"})).json()["data"]
        await session.execute(update(Tenant).where(Tenant.id == tenant["id"]).values(status="suspended"))
        await session.commit()

        response = await anonymous_client.get("/api/v1/projects", headers={"X-Tenant-Id": tenant["id"]})
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "TENANT_SUSPENDED"


class TestIsolation:
    async def test_rows_are_invisible_to_other_tenants(self, client: AsyncClient, create_project):
        project = await create_project()
        other = {"X-Tenant-Id": str(uuid.uuid4())}

        response = await client.get(f"/api/v1/projects/{project['id']}", headers=other)
        assert response.status_code == 404

        listing = await client.get("/api/v1/projects", headers=other)
        assert listing.json()["meta"]["total"] == 0

        update_response = await client.put(
            f"/api/v1/projects/{project['id']}", json={"name": "Hijacked"}, headers=other
        )
        assert update_response.status_code == 404

        delete_response = await client.delete(f"/api/v1/projects/{project['id']}", headers=other)
        assert delete_response.status_code == 404

        # Still intact for the owner
        response = await client.get(f"/api/v1/projects/{project['id']}")
        assert response.json()["data"]["name"] == project["name"]

    async def test_numbers_are_unique_per_tenant_only(self, client: AsyncClient):
        payload = {"name": "Shared", "number": "SAME-1"}
        assert (await client.post("/api/v1/projects", json=payload)).status_code == 201
        response = await client.post(
            "/api/v1/projects", json=payload, headers={"X-Tenant-Id": str(uuid.uuid4())}
        )
        assert response.status_code == 201
