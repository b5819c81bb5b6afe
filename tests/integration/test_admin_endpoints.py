"""HTTP tests for /api/admin."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.models import UserRole
from tests.conftest import ADMIN_EMAIL, CUSTOMER_EMAIL, bearer_headers, make_user


@pytest.fixture
async def admin_headers(db_session: AsyncSession) -> dict[str, str]:
    admin = await make_user(db_session, email=ADMIN_EMAIL, role=UserRole.ADMIN)
    return bearer_headers(admin)


class TestUsers:
    async def test_list_users(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        admin_headers: dict[str, str],
    ):
        await make_user(db_session)

        response = await client.get("/api/admin/users", headers=admin_headers)

        assert response.status_code == 200
        emails = {u["email"] for u in response.json()["data"]}
        assert emails == {ADMIN_EMAIL, CUSTOMER_EMAIL}
        assert all("password_hash" not in u for u in response.json()["data"])

    async def test_get_user(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        admin_headers: dict[str, str],
    ):
        user = await make_user(db_session)

        response = await client.get(f"/api/admin/users/{user.id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == CUSTOMER_EMAIL

    async def test_get_unknown_user(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.get(
            f"/api/admin/users/{uuid.uuid4()}", headers=admin_headers
        )

        assert response.status_code == 404


class TestServiceTypes:
    async def test_catalog_lifecycle(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        created = await client.post(
            "/api/admin/service-types", headers=admin_headers, json={"name": "Massage"}
        )
        assert created.status_code == 201
        service_type_id = created.json()["data"]["id"]

        duplicate = await client.post(
            "/api/admin/service-types", headers=admin_headers, json={"name": "Massage"}
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["code"] == "DUPLICATE_SERVICE_TYPE"

        renamed = await client.put(
            f"/api/admin/service-types/{service_type_id}",
            headers=admin_headers,
            json={"name": "Deep Tissue Massage"},
        )
        assert renamed.status_code == 200
        assert renamed.json()["data"]["name"] == "Deep Tissue Massage"

        listed = await client.get("/api/admin/service-types", headers=admin_headers)
        assert [st["name"] for st in listed.json()["data"]] == ["Deep Tissue Massage"]

        deleted = await client.delete(
            f"/api/admin/service-types/{service_type_id}", headers=admin_headers
        )
        assert deleted.status_code == 200

        listed = await client.get("/api/admin/service-types", headers=admin_headers)
        assert listed.json()["data"] == []

    async def test_empty_name_rejected(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.post(
            "/api/admin/service-types", headers=admin_headers, json={"name": ""}
        )

        assert response.status_code == 400

    async def test_rename_unknown(
        self, client: AsyncClient, admin_headers: dict[str, str]
    ):
        response = await client.put(
            f"/api/admin/service-types/{uuid.uuid4()}",
            headers=admin_headers,
            json={"name": "Anything"},
        )

        assert response.status_code == 404


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
