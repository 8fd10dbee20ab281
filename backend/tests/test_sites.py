"""
Site CRUD tests: registration, public listing and ownership rules.
"""

import uuid

import pytest
from httpx import AsyncClient

from tests.factories import SUPERVISOR

SITE = {
    "site_name": "Phyang Ice Stupa",
    "location": "Phyang",
    "country": "India",
    "latitude": 34.2,
    "longitude": 77.5,
    "altitude": 3700,
    "site_description": "Artificial glacier for spring irrigation",
    "beneficiaries": 120,
    "water_capacity": 2000000,
    "contact_person": "Sonam",
    "contact_phone": "+91-9000000010",
    "site_status": "active",
}


async def _create_site(client: AsyncClient, headers: dict, **overrides) -> dict:
    resp = await client.post("/api/v1/sites/register", json={**SITE, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["site"]


@pytest.fixture()
async def supervisor_site(app_client: AsyncClient, supervisor_headers) -> dict:
    return await _create_site(app_client, supervisor_headers)


class TestRegisterSite:
    """POST /api/v1/sites/register"""

    async def test_supervisor_registers_site(
        self, app_client: AsyncClient, supervisor, supervisor_headers
    ):
        site = await _create_site(app_client, supervisor_headers)
        assert site["site_name"] == SITE["site_name"]
        assert site["created_by"] == supervisor["id"]
        assert site["supervisor_id"] is None
        assert site["site_status"] == "active"
        assert site["active"] is True

    async def test_environment_admin_registers_site(self, app_client: AsyncClient, admin_headers):
        site = await _create_site(app_client, admin_headers)
        assert site["created_by"] == "admin-env"

    async def test_defaults(self, app_client: AsyncClient, admin_headers):
        resp = await app_client.post(
            "/api/v1/sites/register",
            json={"site_name": "Igoo", "location": "Igoo"},
            headers=admin_headers,
        )
        assert resp.status_code == 201
        site = resp.json()["site"]
        assert site["site_status"] == "inactive"
        assert site["beneficiaries"] == 0
        assert site["site_image"] == ""
        assert site["latitude"] is None

    async def test_supervisor_reference_is_normalized(
        self, app_client: AsyncClient, supervisor, admin_headers
    ):
        site = await _create_site(
            app_client, admin_headers, supervisor_id=supervisor["id"].upper()
        )
        assert site["supervisor_id"] == supervisor["id"]

    async def test_invalid_supervisor_reference(self, app_client: AsyncClient, admin_headers):
        resp = await app_client.post(
            "/api/v1/sites/register",
            json={**SITE, "supervisor_id": "ADMIN JIGGY"},
            headers=admin_headers,
        )
        assert resp.status_code == 400

    async def test_missing_name_or_location(self, app_client: AsyncClient, admin_headers):
        resp = await app_client.post(
            "/api/v1/sites/register", json={"site_name": "Nameless"}, headers=admin_headers
        )
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Site name and location are required"

    async def test_duplicate_name(self, app_client: AsyncClient, admin_headers, supervisor_site):
        resp = await app_client.post("/api/v1/sites/register", json=SITE, headers=admin_headers)
        assert resp.status_code == 409
        assert resp.json()["kind"] == "DuplicateKey"

    async def test_invalid_status(self, app_client: AsyncClient, admin_headers):
        resp = await app_client.post(
            "/api/v1/sites/register", json={**SITE, "site_status": "melted"}, headers=admin_headers
        )
        assert resp.status_code == 422

    async def test_requires_token(self, app_client: AsyncClient):
        resp = await app_client.post("/api/v1/sites/register", json=SITE)
        assert resp.status_code == 401


class TestReadSites:
    """GET /api/v1/sites/info, /{id}, /allUser"""

    async def test_listing_is_public(self, app_client: AsyncClient, supervisor_site):
        resp = await app_client.get("/api/v1/sites/info")
        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert [s["id"] for s in data["location_data"]] == [supervisor_site["id"]]

    async def test_get_site(self, app_client: AsyncClient, supervisor_site):
        resp = await app_client.get(f"/api/v1/sites/{supervisor_site['id']}")
        assert resp.status_code == 200
        assert resp.json()["site_name"] == SITE["site_name"]

    async def test_get_unknown_site(self, app_client: AsyncClient):
        resp = await app_client.get(f"/api/v1/sites/{uuid.uuid4()}")
        assert resp.status_code == 404

    async def test_all_users_requires_token(self, app_client: AsyncClient):
        resp = await app_client.get("/api/v1/sites/allUser")
        assert resp.status_code == 401

    async def test_all_users(self, app_client: AsyncClient, supervisor, supervisor_headers):
        resp = await app_client.get("/api/v1/sites/allUser", headers=supervisor_headers)
        assert resp.status_code == 200
        users = resp.json()["users"]
        assert [u["user_name"] for u in users] == [SUPERVISOR["user_name"]]
        assert all("hashed_password" not in u for u in users)


class TestUpdateSite:
    """PUT /api/v1/sites/{id}"""

    async def test_owner_updates(self, app_client: AsyncClient, supervisor_headers, supervisor_site):
        resp = await app_client.put(
            f"/api/v1/sites/{supervisor_site['id']}",
            json={"site_status": "maintenance", "beneficiaries": 150},
            headers=supervisor_headers,
        )
        assert resp.status_code == 200, resp.text
        site = resp.json()["site"]
        assert site["site_status"] == "maintenance"
        assert site["beneficiaries"] == 150
        assert site["location"] == SITE["location"]

    async def test_other_supervisor_is_not_owner(
        self, app_client: AsyncClient, supervisor_site, other_supervisor_headers
    ):
        resp = await app_client.put(
            f"/api/v1/sites/{supervisor_site['id']}",
            json={"site_status": "completed"},
            headers=other_supervisor_headers,
        )
        assert resp.status_code == 403
        assert resp.json()["kind"] == "NotOwner"

        unchanged = await app_client.get(f"/api/v1/sites/{supervisor_site['id']}")
        assert unchanged.json()["site_status"] == SITE["site_status"]

    async def test_environment_admin_updates_any_site(
        self, app_client: AsyncClient, supervisor_site, admin_headers
    ):
        resp = await app_client.put(
            f"/api/v1/sites/{supervisor_site['id']}", json={"active": False}, headers=admin_headers
        )
        assert resp.status_code == 200
        assert resp.json()["site"]["active"] is False

    async def test_database_admin_updates_any_site(
        self, app_client: AsyncClient, supervisor_site, db_admin_headers
    ):
        resp = await app_client.put(
            f"/api/v1/sites/{supervisor_site['id']}",
            json={"site_description": "Rebuilt"},
            headers=db_admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["site"]["site_description"] == "Rebuilt"

    async def test_supervisor_cannot_update_env_admin_site(
        self, app_client: AsyncClient, admin_headers, supervisor_headers
    ):
        site = await _create_site(app_client, admin_headers)
        resp = await app_client.put(
            f"/api/v1/sites/{site['id']}", json={"location": "Elsewhere"}, headers=supervisor_headers
        )
        assert resp.status_code == 403

    async def test_created_by_is_immutable(
        self, app_client: AsyncClient, supervisor, supervisor_headers, supervisor_site, admin_headers
    ):
        resp = await app_client.put(
            f"/api/v1/sites/{supervisor_site['id']}",
            json={"created_by": "admin-env", "country": "Nepal"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["site"]["created_by"] == supervisor["id"]
        assert resp.json()["site"]["country"] == "Nepal"

    async def test_rename_to_existing_name(
        self, app_client: AsyncClient, admin_headers, supervisor_site
    ):
        other = await _create_site(app_client, admin_headers, site_name="Shara Ice Stupa")
        resp = await app_client.put(
            f"/api/v1/sites/{other['id']}",
            json={"site_name": SITE["site_name"]},
            headers=admin_headers,
        )
        assert resp.status_code == 409

    async def test_assign_supervisor(
        self, app_client: AsyncClient, supervisor, supervisor_site, admin_headers
    ):
        resp = await app_client.put(
            f"/api/v1/sites/{supervisor_site['id']}",
            json={"supervisor_id": "admin-env"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["site"]["supervisor_id"] == "admin-env"

    async def test_unknown_site(self, app_client: AsyncClient, supervisor_headers):
        resp = await app_client.put(
            f"/api/v1/sites/{uuid.uuid4()}", json={"country": "Nepal"}, headers=supervisor_headers
        )
        assert resp.status_code == 404

    async def test_requires_token(self, app_client: AsyncClient, supervisor_site):
        resp = await app_client.put(f"/api/v1/sites/{supervisor_site['id']}", json={"country": "X"})
        assert resp.status_code == 401


class TestDeleteSite:
    """DELETE /api/v1/sites/{id}"""

    async def test_other_supervisor_cannot_delete(
        self, app_client: AsyncClient, supervisor_site, other_supervisor_headers
    ):
        resp = await app_client.delete(
            f"/api/v1/sites/{supervisor_site['id']}", headers=other_supervisor_headers
        )
        assert resp.status_code == 403
        assert resp.json()["kind"] == "NotOwner"
        assert (await app_client.get(f"/api/v1/sites/{supervisor_site['id']}")).status_code == 200

    async def test_owner_deletes(self, app_client: AsyncClient, supervisor_headers, supervisor_site):
        resp = await app_client.delete(
            f"/api/v1/sites/{supervisor_site['id']}", headers=supervisor_headers
        )
        assert resp.status_code == 200
        assert resp.json()["message"] == "Site deleted successfully"
        assert (await app_client.get(f"/api/v1/sites/{supervisor_site['id']}")).status_code == 404

    async def test_admin_deletes_any_site(
        self, app_client: AsyncClient, supervisor_site, db_admin_headers
    ):
        resp = await app_client.delete(
            f"/api/v1/sites/{supervisor_site['id']}", headers=db_admin_headers
        )
        assert resp.status_code == 200

    async def test_unknown_site(self, app_client: AsyncClient, admin_headers):
        resp = await app_client.delete(f"/api/v1/sites/{uuid.uuid4()}", headers=admin_headers)
        assert resp.status_code == 404
