"""
Tests for the law firm endpoints.
"""
from uuid import uuid4

import pytest
from httpx import AsyncClient

from conftest import PASSWORD


@pytest.mark.asyncio
async def test_member_sees_only_own_firm(client: AsyncClient, admin_headers, law_firm, other_firm, associate):
    response = await client.get("/api/law-firms", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["data"][0]["id"] == str(law_firm.id)
    assert body["data"][0]["member_count"] == 2


@pytest.mark.asyncio
async def test_other_firm_is_not_found(client: AsyncClient, admin_headers, other_firm):
    response = await client.get(f"/api/law-firms/{other_firm.id}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_platform_admin_lists_and_creates_firms(client: AsyncClient, platform_headers, law_firm, other_firm):
    response = await client.get("/api/law-firms", headers=platform_headers)
    assert response.json()["total"] == 2

    created = await client.post(
        "/api/law-firms",
        json={"name": "Northwind Counsel", "city": "Lisbon"},
        headers=platform_headers,
    )
    assert created.status_code == 200
    data = created.json()["data"]
    assert data["is_active"] is True
    assert data["member_count"] == 0

    duplicate = await client.post("/api/law-firms", json={"name": "Northwind Counsel"}, headers=platform_headers)
    assert duplicate.status_code == 409


@pytest.mark.asyncio
async def test_firm_admin_cannot_create_firms(client: AsyncClient, admin_headers):
    response = await client.post("/api/law-firms", json={"name": "Side Venture"}, headers=admin_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_firm_admin_updates_profile_but_not_status(client: AsyncClient, admin_headers, law_firm):
    response = await client.put(
        f"/api/law-firms/{law_firm.id}",
        json={"website": "https://hale.example.com", "city": "Porto"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["city"] == "Porto"

    response = await client.put(
        f"/api/law-firms/{law_firm.id}",
        json={"is_active": False},
        headers=admin_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_associate_cannot_update_firm(client: AsyncClient, manager_headers, law_firm):
    response = await client.put(
        f"/api/law-firms/{law_firm.id}",
        json={"city": "Braga"},
        headers=manager_headers,
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_platform_admin_deactivates_firm(client: AsyncClient, platform_headers, law_firm):
    response = await client.delete(f"/api/law-firms/{law_firm.id}", headers=platform_headers)
    assert response.status_code == 200
    assert response.json()["data"]["is_active"] is False

    active = await client.get("/api/law-firms", params={"is_active": "true"}, headers=platform_headers)
    assert active.json()["total"] == 0


@pytest.mark.asyncio
async def test_deactivated_firm_locks_out_its_members(
    client: AsyncClient, platform_headers, admin, admin_headers, law_firm, client_record
):
    assert (await client.get("/api/auth/me", headers=admin_headers)).status_code == 200

    await client.delete(f"/api/law-firms/{law_firm.id}", headers=platform_headers)

    login = await client.post("/api/auth/login", json={"email": "admin@example.com", "password": PASSWORD})
    assert login.status_code == 401
    assert login.json()["error"]["message"] == "Invalid credentials"

    me = await client.get("/api/auth/me", headers=admin_headers)
    assert me.status_code == 401
    assert me.json()["error"]["code"] == "INVALID_TOKEN"

    created = await client.post(
        "/api/cases",
        json={
            "case_number": "X-1",
            "file_number": "F-X-1",
            "title": "After shutdown",
            "case_type": "Civil",
            "client_id": str(client_record.id),
        },
        headers=admin_headers,
    )
    assert created.status_code == 401

    reactivated = await client.put(
        f"/api/law-firms/{law_firm.id}", json={"is_active": True}, headers=platform_headers
    )
    assert reactivated.status_code == 200
    assert (await client.get("/api/auth/me", headers=admin_headers)).status_code == 200


@pytest.mark.asyncio
async def test_unknown_firm(client: AsyncClient, platform_headers):
    response = await client.get(f"/api/law-firms/{uuid4()}", headers=platform_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_member_count_skips_disabled_accounts(client: AsyncClient, admin_headers, law_firm, associate):
    before = await client.get(f"/api/law-firms/{law_firm.id}", headers=admin_headers)
    assert before.json()["data"]["member_count"] == 2

    await client.delete(f"/api/users/{associate.id}", headers=admin_headers)

    after = await client.get(f"/api/law-firms/{law_firm.id}", headers=admin_headers)
    assert after.json()["data"]["member_count"] == 1
