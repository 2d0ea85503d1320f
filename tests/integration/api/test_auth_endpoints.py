import pytest
from httpx import AsyncClient
from urllib.parse import parse_qs, urlparse

from backoffice.app.repositories.activity_log_repository import ActivityLogFilter
from tests.fixtures.auth_helpers import bearer, login


@pytest.mark.asyncio
async def test_google_authorization_url(client: AsyncClient):
    response = await client.get("/api/auth/google")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    state = body["data"]["state"]
    assert parse_qs(urlparse(body["data"]["url"]).query)["state"] == [state]


@pytest.mark.asyncio
async def test_first_login_registers_owner(client: AsyncClient):
    """The first account ever created is the owner and gets a store"""
    data = await login(client, "owner-code")

    assert data["accessToken"]
    assert data["refreshToken"]
    assert data["user"]["role"] == "owner"
    assert data["user"]["isNewUser"] is True
    assert data["user"]["email"] == "owner@tokobaju.id"

    me = await client.get("/api/auth/me", headers=bearer(data["accessToken"]))
    assert me.status_code == 200
    assert me.json()["data"]["store"]["name"] == "Sari Wulandari's Store"


@pytest.mark.asyncio
async def test_second_login_is_staff_and_returning_user(client: AsyncClient):
    await login(client, "owner-code")

    first = await login(client, "staff-code")
    again = await login(client, "staff-code", device="phone")

    assert first["user"]["role"] == "staff"
    assert first["user"]["isNewUser"] is True
    assert again["user"]["isNewUser"] is False
    assert again["user"]["id"] == first["user"]["id"]


@pytest.mark.asyncio
async def test_get_callback_completes_login(client: AsyncClient):
    response = await client.get("/api/auth/google/callback", params={"code": "owner-code"})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["role"] == "owner"


@pytest.mark.asyncio
async def test_get_callback_with_provider_error(client: AsyncClient):
    response = await client.get("/api/auth/google/callback", params={"error": "access_denied"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_get_callback_without_code(client: AsyncClient):
    response = await client.get("/api/auth/google/callback")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_post_callback_validates_body(client: AsyncClient):
    response = await client.post("/api/auth/google/callback", json={})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"]["errors"][0]["field"] == "code"


@pytest.mark.asyncio
async def test_rejected_code(client: AsyncClient):
    response = await client.post("/api/auth/google/callback", json={"code": "nope"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


@pytest.mark.asyncio
async def test_email_bound_to_another_account(client: AsyncClient):
    await login(client, "owner-code")
    await login(client, "staff-code")

    response = await client.post("/api/auth/google/callback", json={"code": "hijack-code"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_disabled_user_is_rejected(client: AsyncClient, uow_factory):
    await login(client, "owner-code")
    staff = await login(client, "staff-code")

    async with uow_factory() as uow:
        user = await uow.users.get_by_email("budi@tokobaju.id")
        user.is_active = False
        await uow.users.update(user)
        await uow.commit()

    response = await client.post("/api/auth/google/callback", json={"code": "staff-code"})

    assert staff["user"]["role"] == "staff"
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_DISABLED"


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json()["error"]["message"] == "No authorization token provided"


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/auth/me", headers=bearer("not-a-jwt"))

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTHENTICATION_ERROR"


@pytest.mark.asyncio
async def test_sessions_flag_the_current_one(client: AsyncClient):
    laptop = await login(client, "owner-code", device="laptop")
    await login(client, "owner-code", device="phone")

    response = await client.get("/api/auth/sessions", headers=bearer(laptop["accessToken"]))

    assert response.status_code == 200
    sessions = response.json()["data"]["sessions"]
    assert [s["deviceId"] for s in sessions] == ["laptop-01", "phone-01"]
    assert [s["isCurrent"] for s in sessions] == [True, False]
    assert "accessToken" not in sessions[0]


@pytest.mark.asyncio
async def test_login_writes_activity(client: AsyncClient, uow_factory):
    await login(client, "owner-code")
    await login(client, "owner-code", device="phone")

    async with uow_factory() as uow:
        entries, _ = await uow.activity_logs.list_paginated(ActivityLogFilter(), 10)
        actions = [e.action for e in entries]

    assert sorted(actions) == ["login", "register"]


@pytest.mark.asyncio
async def test_unknown_route_uses_envelope(client: AsyncClient):
    response = await client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": {"code": "NOT_FOUND", "message": "Not Found"},
    }
