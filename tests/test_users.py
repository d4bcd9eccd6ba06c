"""
Tests for team management.
"""
from uuid import uuid4

import pytest
from httpx import AsyncClient


def new_member(**overrides) -> dict:
    payload = {
        "email": "new.associate@example.com",
        "full_name": "Nia Newcomer",
        "password": "welcome-123",
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_admin_registers_associate_with_default_permissions(client: AsyncClient, admin_headers, law_firm):
    response = await client.post("/api/auth/register", json=new_member(), headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "associate"
    assert data["permissions"] == "limited access"
    assert data["law_firm_id"] == str(law_firm.id)
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_full_access_associate_manages_team(client: AsyncClient, manager_headers):
    response = await client.post("/api/users", json=new_member(), headers=manager_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_limited_associate_cannot_register(client: AsyncClient, associate_headers):
    response = await client.post("/api/users", json=new_member(), headers=associate_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"


@pytest.mark.asyncio
async def test_only_admins_grant_admin_role(client: AsyncClient, manager_headers, admin_headers):
    response = await client.post("/api/users", json=new_member(role="admin"), headers=manager_headers)
    assert response.status_code == 403

    response = await client.post("/api/users", json=new_member(role="admin"), headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["permissions"] == "full access"


@pytest.mark.asyncio
async def test_duplicate_email_and_username(client: AsyncClient, admin_headers, associate):
    response = await client.post(
        "/api/users",
        json=new_member(email="associate@example.com"),
        headers=admin_headers,
    )
    assert response.status_code == 409

    first = await client.post("/api/users", json=new_member(username="nia"), headers=admin_headers)
    assert first.status_code == 200
    second = await client.post(
        "/api/users",
        json=new_member(email="other@example.com", username="nia"),
        headers=admin_headers,
    )
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_registering_client_account_creates_client_record(client: AsyncClient, admin_headers):
    response = await client.post(
        "/api/users",
        json=new_member(email="casey@example.com", full_name="Casey Client", role="client"),
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["permissions"] == "no access"

    clients = await client.get("/api/clients", params={"search": "Casey"}, headers=admin_headers)
    records = clients.json()["data"]
    assert len(records) == 1
    assert records[0]["user_account_id"] == response.json()["data"]["id"]
    assert records[0]["email"] == "casey@example.com"


@pytest.mark.asyncio
async def test_registering_client_account_links_existing_record(client: AsyncClient, admin_headers, client_record):
    response = await client.post(
        "/api/users",
        json=new_member(email="blake@example.com", role="client", client_id=str(client_record.id)),
        headers=admin_headers,
    )
    assert response.status_code == 200

    record = await client.get(f"/api/clients/{client_record.id}", headers=admin_headers)
    assert record.json()["data"]["user_account_id"] == response.json()["data"]["id"]


@pytest.mark.asyncio
async def test_client_account_clashing_with_client_email_conflicts(client: AsyncClient, admin_headers, client_record):
    response = await client.post(
        "/api/users",
        json=new_member(email=client_record.email, role="client"),
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ALREADY_EXISTS"

    accounts = await client.get("/api/users", params={"role": "client"}, headers=admin_headers)
    assert accounts.json()["data"] == []


@pytest.mark.asyncio
async def test_list_defaults_to_associates(client: AsyncClient, admin_headers, associate, manager, portal_user):
    response = await client.get("/api/users", headers=admin_headers)
    assert response.status_code == 200
    emails = {u["email"] for u in response.json()["data"]}
    assert emails == {"associate@example.com", "manager@example.com"}

    clients = await client.get("/api/users", params={"role": "client"}, headers=admin_headers)
    assert [u["email"] for u in clients.json()["data"]] == ["jordan@example.com"]


@pytest.mark.asyncio
async def test_client_account_lists_only_itself(client: AsyncClient, portal_headers, associate):
    response = await client.get("/api/users", headers=portal_headers)
    body = response.json()
    assert body["total"] == 1
    assert body["data"][0]["email"] == "jordan@example.com"


@pytest.mark.asyncio
async def test_users_of_other_firms_are_invisible(client: AsyncClient, admin_headers, other_admin, other_admin_headers, associate):
    response = await client.get(f"/api/users/{other_admin.id}", headers=admin_headers)
    assert response.status_code == 404

    response = await client.get("/api/users", headers=other_admin_headers)
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_platform_admin_sees_every_firm(client: AsyncClient, platform_headers, associate, other_admin, other_firm):
    response = await client.get("/api/users", headers=platform_headers)
    emails = {u["email"] for u in response.json()["data"]}
    assert {"associate@example.com", "rival-admin@example.com"} <= emails

    narrowed = await client.get(
        "/api/users",
        params={"law_firm_id": str(other_firm.id)},
        headers=platform_headers,
    )
    assert [u["email"] for u in narrowed.json()["data"]] == ["rival-admin@example.com"]


@pytest.mark.asyncio
async def test_get_unknown_user(client: AsyncClient, admin_headers):
    response = await client.get(f"/api/users/{uuid4()}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_associate_updates_own_name_but_not_role(client: AsyncClient, associate, associate_headers):
    response = await client.put(
        f"/api/users/{associate.id}",
        json={"full_name": "Sam Senior"},
        headers=associate_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["full_name"] == "Sam Senior"

    response = await client.put(
        f"/api/users/{associate.id}",
        json={"permissions": "full access"},
        headers=associate_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_associate_cannot_update_colleague(client: AsyncClient, associate_headers, manager):
    response = await client.put(
        f"/api/users/{manager.id}",
        json={"full_name": "Renamed"},
        headers=associate_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_changes_permissions(client: AsyncClient, admin_headers, associate):
    response = await client.put(
        f"/api/users/{associate.id}",
        json={"permissions": "no access"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["permissions"] == "no access"


@pytest.mark.asyncio
async def test_admin_cannot_deactivate_self(client: AsyncClient, admin, admin_headers):
    response = await client.put(f"/api/users/{admin.id}", json={"is_active": False}, headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_disables_account(client: AsyncClient, admin_headers, associate):
    response = await client.delete(f"/api/users/{associate.id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "User removed"

    user = await client.get(f"/api/users/{associate.id}", headers=admin_headers)
    assert user.json()["data"]["is_active"] is False


@pytest.mark.asyncio
async def test_cannot_delete_self(client: AsyncClient, admin, admin_headers):
    response = await client.delete(f"/api/users/{admin.id}", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SELF_DELETION"


@pytest.mark.asyncio
async def test_limited_associate_cannot_delete(client: AsyncClient, associate_headers, manager):
    response = await client.delete(f"/api/users/{manager.id}", headers=associate_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_manager_cannot_demote_or_restrict_admin(client: AsyncClient, manager_headers, admin, admin_headers):
    for changes in ({"role": "associate"}, {"permissions": "no access"}, {"is_active": False}):
        response = await client.put(f"/api/users/{admin.id}", json=changes, headers=manager_headers)
        assert response.status_code == 403, changes
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSIONS"

    me = await client.get("/api/auth/me", headers=admin_headers)
    assert me.status_code == 200
    assert me.json()["data"]["role"] == "admin"
    assert me.json()["data"]["permissions"] == "full access"


@pytest.mark.asyncio
async def test_manager_edits_admin_profile_fields(client: AsyncClient, manager_headers, admin):
    response = await client.put(f"/api/users/{admin.id}", json={"phone": "+1 555 0100"}, headers=manager_headers)
    assert response.status_code == 200
    assert response.json()["data"]["phone"] == "+1 555 0100"


@pytest.mark.asyncio
async def test_manager_cannot_remove_admin(client: AsyncClient, manager_headers, admin, admin_headers):
    response = await client.delete(f"/api/users/{admin.id}", headers=manager_headers)
    assert response.status_code == 403

    assert (await client.get("/api/auth/me", headers=admin_headers)).status_code == 200


@pytest.mark.asyncio
async def test_manager_removes_associate(client: AsyncClient, manager_headers, associate):
    response = await client.delete(f"/api/users/{associate.id}", headers=manager_headers)
    assert response.status_code == 200
