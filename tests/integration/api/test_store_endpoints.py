import pytest
from httpx import AsyncClient

from tests.fixtures.auth_helpers import bearer, login


async def owner_store(client: AsyncClient, token: str) -> dict:
    response = await client.get("/api/stores/me", headers=bearer(token))
    assert response.status_code == 200
    return response.json()["data"]


@pytest.mark.asyncio
async def test_owner_gets_default_store(client: AsyncClient):
    owner = await login(client)

    store = await owner_store(client, owner["accessToken"])

    assert store["ownerId"] == owner["user"]["id"]
    assert store["description"] == "My online store"


@pytest.mark.asyncio
async def test_second_store_is_a_conflict(client: AsyncClient):
    owner = await login(client)

    response = await client.post(
        "/api/stores", json={"name": "Toko Kedua"}, headers=bearer(owner["accessToken"])
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "STORE_ALREADY_EXISTS"


@pytest.mark.asyncio
async def test_staff_cannot_create_store(client: AsyncClient):
    await login(client, "owner-code")
    staff = await login(client, "staff-code")

    response = await client.post(
        "/api/stores", json={"name": "Toko Budi"}, headers=bearer(staff["accessToken"])
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"


@pytest.mark.asyncio
async def test_staff_has_no_store_of_their_own(client: AsyncClient):
    await login(client, "owner-code")
    staff = await login(client, "staff-code")

    response = await client.get("/api/stores/me", headers=bearer(staff["accessToken"]))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_create_store_validates_urls(client: AsyncClient):
    owner = await login(client)

    response = await client.post(
        "/api/stores",
        json={"name": "Toko", "shopeeUrl": "not a url"},
        headers=bearer(owner["accessToken"]),
    )

    assert response.status_code == 400
    assert response.json()["error"]["details"]["errors"][0]["field"] == "shopeeUrl"


@pytest.mark.asyncio
async def test_owner_updates_store_partially(client: AsyncClient, test_data):
    # Arrange
    owner = await login(client)
    store = await owner_store(client, owner["accessToken"])

    # Act
    response = await client.patch(
        f"/api/stores/{store['id']}",
        json=test_data.get_copy("store_update"),
        headers=bearer(owner["accessToken"]),
    )

    # Assert
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["name"] == store["name"]
    assert updated["description"] == "Batik and casual wear from Solo"
    assert updated["shopeeUrl"] == "https://shopee.co.id/tokobaju"
    assert response.headers["X-RateLimit-Limit"] == "10"

    again = await client.get(f"/api/stores/{store['id']}", headers=bearer(owner["accessToken"]))
    assert again.json()["data"]["description"] == "Batik and casual wear from Solo"


@pytest.mark.asyncio
async def test_null_clears_optional_field(client: AsyncClient, test_data):
    owner = await login(client)
    store = await owner_store(client, owner["accessToken"])
    headers = bearer(owner["accessToken"])
    await client.patch(f"/api/stores/{store['id']}", json=test_data.get_copy("store_update"), headers=headers)

    response = await client.patch(f"/api/stores/{store['id']}", json={"shopeeUrl": None}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["shopeeUrl"] is None
    assert response.json()["data"]["description"] == "Batik and casual wear from Solo"


@pytest.mark.asyncio
async def test_name_cannot_be_cleared(client: AsyncClient):
    owner = await login(client)
    store = await owner_store(client, owner["accessToken"])

    response = await client.patch(
        f"/api/stores/{store['id']}", json={"name": None}, headers=bearer(owner["accessToken"])
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_staff_update_requires_permission(client: AsyncClient):
    # Arrange
    owner = await login(client, "owner-code")
    staff = await login(client, "staff-code")
    store = await owner_store(client, owner["accessToken"])
    url = f"/api/stores/{store['id']}"

    # Act
    denied = await client.patch(url, json={"description": "x"}, headers=bearer(staff["accessToken"]))
    grant = await client.post(
        f"/api/users/{staff['user']['id']}/permissions",
        json={"entity": "store", "action": "update"},
        headers=bearer(owner["accessToken"]),
    )
    allowed = await client.patch(url, json={"description": "x"}, headers=bearer(staff["accessToken"]))

    # Assert
    assert denied.status_code == 403
    assert grant.status_code == 201
    assert allowed.status_code == 200
    assert allowed.json()["data"]["description"] == "x"


@pytest.mark.asyncio
async def test_staff_read_requires_permission(client: AsyncClient):
    owner = await login(client, "owner-code")
    staff = await login(client, "staff-code")
    store = await owner_store(client, owner["accessToken"])

    response = await client.get(f"/api/stores/{store['id']}", headers=bearer(staff["accessToken"]))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_public_view_needs_no_token(client: AsyncClient, test_data):
    owner = await login(client)
    store = await owner_store(client, owner["accessToken"])
    await client.patch(
        f"/api/stores/{store['id']}",
        json=test_data.get_copy("store_update"),
        headers=bearer(owner["accessToken"]),
    )

    response = await client.get(f"/api/stores/{store['id']}/public")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["marketplaceLinks"] == {"shopee": "https://shopee.co.id/tokobaju"}
    assert "ownerId" not in data
    assert response.headers["X-RateLimit-Limit"] == "50"


@pytest.mark.asyncio
async def test_unknown_store(client: AsyncClient):
    response = await client.get("/api/stores/00000000-0000-0000-0000-000000000000/public")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "STORE_NOT_FOUND"
