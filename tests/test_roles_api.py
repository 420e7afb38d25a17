"""
API tests for /api/roles.
Covers: authentication and permission gating, listing, create, update, delete.
"""
from unittest.mock import AsyncMock

import pytest

from hrs.core.permissions import Permission
from hrs.models.user import User
from hrs.services.role_service import RoleService


@pytest.mark.asyncio
async def test_create_role_without_session_is_unauthorized(client):
    response = await client.post("/api/roles", json={"name": "Clerks"})
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Unauthorized"


@pytest.mark.asyncio
async def test_create_role_without_permission_is_forbidden(client, login, reader):
    login(client, reader)
    response = await client.post("/api/roles", json={"name": "Clerks"})
    assert response.status_code == 403
    assert response.json()["error"] == "Forbidden"


@pytest.mark.asyncio
async def test_super_admin_creates_role(client, login, super_admin):
    login(client, super_admin)
    response = await client.post("/api/roles", json={
        "name": "Clerks",
        "description": "Front desk",
        "permissions": [Permission.READ_USERS],
    })
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Role created successfully."
    assert isinstance(body["data"]["id"], int)
    assert body["data"]["name"] == "Clerks"
    assert body["data"]["permissions"] == [Permission.READ_USERS]
    assert body["data"]["created_by_user_id"] == super_admin.id
    assert body["data"]["created_by_user"]["username"] == "ynnorj"


@pytest.mark.asyncio
async def test_forged_session_is_unauthorized(client, reader):
    client.cookies.set("sessionId", "forged")
    client.cookies.set("userId", str(reader.id))
    response = await client.get("/api/roles")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_session_for_deleted_user_is_unauthorized(client, login):
    login(client, User(id=999))
    response = await client.get("/api/roles")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_override_permissions_replace_role(client, login, make_user, super_admin_role):
    limited = await make_user("limited", super_admin_role, permissions=[Permission.READ_REPORTS])
    login(client, limited)

    assert (await client.get("/api/roles")).status_code == 403
    assert (await client.delete(f"/api/roles/{super_admin_role.id}")).status_code == 403


@pytest.mark.asyncio
async def test_manage_roles_grants_role_actions(client, login, make_role, make_user):
    managers = await make_role("Role Managers", [Permission.MANAGE_ROLES])
    manager = await make_user("manager", managers)
    login(client, manager)

    created = await client.post("/api/roles", json={"name": "Temp"})
    assert created.status_code == 201
    role_id = created.json()["data"]["id"]
    assert (await client.put(f"/api/roles/{role_id}", json={"name": "Temporary"})).status_code == 200
    assert (await client.delete(f"/api/roles/{role_id}")).status_code == 200
    assert (await client.get("/api/users")).status_code == 403


@pytest.mark.asyncio
async def test_list_roles(client, login, super_admin, make_role):
    await make_role("Accountants", [], description="Books and payroll")
    await make_role("Auditors", [Permission.READ_REPORTS], description="External")
    login(client, super_admin)

    response = await client.get("/api/roles")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["recordsTotal"] == 3
    assert body["recordsFiltered"] == 3
    assert [r["name"] for r in body["data"]] == ["Super Administrator", "Accountants", "Auditors"]


@pytest.mark.asyncio
async def test_list_roles_search_filter_order_and_page(client, login, super_admin, make_role):
    await make_role("Accountants", [], description="Books and payroll")
    await make_role("Auditors", [Permission.READ_REPORTS], description="External")
    await make_role("Drivers", [], description="External fleet")
    login(client, super_admin)

    searched = (await client.get("/api/roles", params={"search[value]": " A "})).json()
    assert searched["recordsTotal"] == 4
    assert {r["name"] for r in searched["data"]} == {
        "Super Administrator", "Accountants", "Auditors",
    }

    filtered = (await client.get("/api/roles", params={
        "search[value]": "A",
        "filter[description]": "External",
    })).json()
    assert [r["name"] for r in filtered["data"]] == ["Auditors"]
    assert filtered["recordsFiltered"] == 1

    ordered = (await client.get("/api/roles", params={
        "order[0][name]": "name",
        "order[0][dir]": "desc",
        "start": 1,
        "length": 2,
    })).json()
    assert ordered["recordsFiltered"] == 4
    assert [r["name"] for r in ordered["data"]] == ["Drivers", "Auditors"]


@pytest.mark.asyncio
async def test_list_roles_order_direction_is_case_insensitive(client, login, super_admin, make_role):
    await make_role("Accountants", [])
    await make_role("Drivers", [])
    login(client, super_admin)

    response = await client.get("/api/roles", params={
        "order[0][name]": "name",
        "order[0][dir]": "DESC",
    })
    assert response.status_code == 200
    assert [r["name"] for r in response.json()["data"]] == [
        "Super Administrator", "Drivers", "Accountants",
    ]

    invalid = await client.get("/api/roles", params={"order[0][dir]": "sideways"})
    assert invalid.status_code == 400


@pytest.mark.asyncio
async def test_list_roles_rejects_unknown_order_column(client, login, super_admin):
    login(client, super_admin)
    response = await client.get("/api/roles", params={"order[0][name]": "password"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_role_with_users(client, login, super_admin, super_admin_role):
    login(client, super_admin)
    response = await client.get(f"/api/roles/{super_admin_role.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Super Administrator"
    assert data["permissions"] == [Permission.DO_EVERYTHING]
    assert [u["username"] for u in data["users"]] == ["ynnorj"]
    assert "password" not in data["users"][0]


@pytest.mark.asyncio
async def test_invalid_and_missing_role_ids(client, login, super_admin):
    login(client, super_admin)

    invalid = await client.put("/api/roles/abc", json={"name": "X"})
    assert invalid.status_code == 400
    assert invalid.json()["success"] is False

    missing = await client.put("/api/roles/404", json={"name": "X"})
    assert missing.status_code == 404
    assert missing.json()["message"] == "Role not found."

    assert (await client.delete("/api/roles/404")).status_code == 404


@pytest.mark.asyncio
async def test_create_role_validation(client, login, super_admin):
    login(client, super_admin)

    assert (await client.post("/api/roles", json={})).status_code == 400
    assert (await client.post("/api/roles", json={"name": ""})).status_code == 400

    unknown = await client.post("/api/roles", json={"name": "X", "permissions": ["Fly Planes"]})
    assert unknown.status_code == 400
    assert "Fly Planes" in unknown.json()["error"]

    duplicate = await client.post("/api/roles", json={"name": "Super Administrator"})
    assert duplicate.status_code == 409


@pytest.mark.asyncio
async def test_update_role(client, login, super_admin, make_role):
    role = await make_role("Clerks", [Permission.READ_USERS])
    login(client, super_admin)

    response = await client.put(f"/api/roles/{role.id}", json={
        "description": "Front desk",
        "permissions": [Permission.MANAGE_USERS],
    })
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Clerks"
    assert data["description"] == "Front desk"
    assert data["permissions"] == [Permission.MANAGE_USERS]

    conflict = await client.put(f"/api/roles/{role.id}", json={"name": "Super Administrator"})
    assert conflict.status_code == 409


@pytest.mark.asyncio
async def test_delete_role(client, login, super_admin, make_role):
    role = await make_role("Clerks", [])
    login(client, super_admin)

    response = await client.delete(f"/api/roles/{role.id}")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": None,
        "message": "Role deleted successfully.",
    }
    assert (await client.get(f"/api/roles/{role.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_role_in_use_is_refused(client, login, super_admin, super_admin_role):
    login(client, super_admin)
    response = await client.delete(f"/api/roles/{super_admin_role.id}")
    assert response.status_code == 400
    assert "assigned" in response.json()["error"]


@pytest.mark.asyncio
async def test_permissions_endpoint(client, login, reader):
    login(client, reader)
    response = await client.get("/api/permissions")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["hierarchy"][0]["name"] == Permission.DO_EVERYTHING
    assert len(data["permissions"]) == 17
    assert data["permissions"] == sorted(data["permissions"])


@pytest.mark.asyncio
async def test_duplicate_name_rejected_by_database_is_conflict(client, login, super_admin, monkeypatch):
    # Simulates a concurrent create that passed the name check first.
    monkeypatch.setattr(RoleService, "_ensure_unique_name", AsyncMock())
    login(client, super_admin)

    response = await client.post("/api/roles", json={"name": "Super Administrator"})
    assert response.status_code == 409
    assert response.json()["success"] is False
    assert (await client.get("/api/roles")).json()["recordsTotal"] == 1
