"""
Tests for login, onboarding and the current-user endpoints.
"""
import pytest
from httpx import AsyncClient

from conftest import PASSWORD


@pytest.mark.asyncio
async def test_login_returns_token_and_user(client: AsyncClient, admin):
    response = await client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": PASSWORD},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] > 0
    assert data["user"]["email"] == "admin@example.com"
    assert data["user"]["role"] == "admin"
    assert data["user"]["last_login_at"] is not None

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["id"] == str(admin.id)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("email", "password"),
    [
        ("admin@example.com", "not-the-password"),
        ("nobody@example.com", PASSWORD),
    ],
)
async def test_login_failures_look_the_same(client: AsyncClient, admin, email, password):
    response = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert response.json() == {
        "success": False,
        "error": {"code": "AUTH_ERROR", "message": "Invalid credentials"},
    }


@pytest.mark.asyncio
async def test_disabled_account_cannot_log_in(client: AsyncClient, admin_headers, associate):
    await client.delete(f"/api/users/{associate.id}", headers=admin_headers)

    response = await client.post(
        "/api/auth/login",
        json={"email": "associate@example.com", "password": PASSWORD},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_a_token(client: AsyncClient):
    response = await client.get("/api/auth/me")
    assert response.status_code == 401
    assert response.json()["error"]["message"] == "Not authenticated"


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"


@pytest.mark.asyncio
async def test_token_of_disabled_user_stops_working(client: AsyncClient, admin_headers, associate, associate_headers):
    assert (await client.get("/api/auth/me", headers=associate_headers)).status_code == 200

    await client.delete(f"/api/users/{associate.id}", headers=admin_headers)

    response = await client.get("/api/auth/me", headers=associate_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_includes_client_record_for_client_accounts(client: AsyncClient, portal_headers, portal_client):
    response = await client.get("/api/auth/me", headers=portal_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role"] == "client"
    assert data["client"]["id"] == str(portal_client.id)


@pytest.mark.asyncio
async def test_onboarding_creates_firm_and_admin(client: AsyncClient):
    response = await client.post(
        "/api/auth/onboarding",
        json={
            "law_firm_name": "Quill & Co",
            "law_firm_email": "hello@quill.example.com",
            "full_name": "Riley Quill",
            "email": "riley@example.com",
            "password": "s3cure-pass",
        },
    )
    assert response.status_code == 200
    data = response.json()["data"]

    headers = {"Authorization": f"Bearer {data['access_token']}"}
    me = (await client.get("/api/auth/me", headers=headers)).json()["data"]
    assert me["role"] == "admin"
    assert me["permissions"] == "full access"
    assert me["law_firm_id"] == data["law_firm_id"]

    firm = await client.get(f"/api/law-firms/{data['law_firm_id']}", headers=headers)
    assert firm.json()["data"]["name"] == "Quill & Co"
    assert firm.json()["data"]["member_count"] == 1


@pytest.mark.asyncio
async def test_onboarding_rejects_taken_email(client: AsyncClient, admin):
    response = await client.post(
        "/api/auth/onboarding",
        json={
            "law_firm_name": "Copycat LLP",
            "full_name": "Someone Else",
            "email": "admin@example.com",
            "password": "s3cure-pass",
        },
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_onboarding_validates_password_length(client: AsyncClient):
    response = await client.post(
        "/api/auth/onboarding",
        json={
            "law_firm_name": "Short Pass LLP",
            "full_name": "Shorty",
            "email": "short@example.com",
            "password": "123",
        },
    )
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_change_password(client: AsyncClient, associate_headers):
    wrong = await client.post(
        "/api/auth/change-password",
        json={"current_password": "nope-nope", "new_password": "brand-new-pass"},
        headers=associate_headers,
    )
    assert wrong.status_code == 400

    ok = await client.post(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "brand-new-pass"},
        headers=associate_headers,
    )
    assert ok.status_code == 200

    login = await client.post(
        "/api/auth/login",
        json={"email": "associate@example.com", "password": "brand-new-pass"},
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_own_profile(client: AsyncClient, associate_headers):
    response = await client.put(
        "/api/auth/me",
        json={"full_name": "Samantha Associate", "phone": "+1 555 0100"},
        headers=associate_headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["full_name"] == "Samantha Associate"
    assert data["phone"] == "+1 555 0100"
    assert data["role"] == "associate"
