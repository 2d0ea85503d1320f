from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from backoffice.app.services.permission_service import PermissionService
from backoffice.app.use_cases.stores import (
    CreateStoreCommand,
    CreateStoreUseCase,
    GetStoreUseCase,
    StoreCache,
    UpdateStoreCommand,
    UpdateStoreUseCase,
)
from backoffice.domain.entities import ActivityAction, Store


@pytest.fixture
def store_cache(cache):
    return StoreCache(cache, ttl=60)


@pytest.fixture
def permissions():
    service = AsyncMock(spec=PermissionService)
    service.has_permission.return_value = False
    return service


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def store(owner_id):
    return Store(
        owner_id=owner_id,
        name="Toko Baju Sari",
        description="Batik from Solo",
        shopee_url="https://shopee.co.id/tokobaju",
    )


@pytest.fixture
def store_uow(mock_uow, store):
    mock_uow.stores.get_by_id = AsyncMock(return_value=store)
    mock_uow.stores.get_by_owner_id = AsyncMock(return_value=store)
    mock_uow.stores.create = AsyncMock(side_effect=lambda s: s)
    mock_uow.stores.update = AsyncMock(side_effect=lambda s: s)
    return mock_uow


# Create


@pytest.mark.asyncio
async def test_create_store(store_uow, store_cache, mock_activity_log, device_info):
    # Arrange
    store_uow.stores.get_by_owner_id.return_value = None
    owner_id = uuid4()
    command = CreateStoreCommand(name="  Toko Sepatu  ", toco_url="https://toco.id/sepatu")

    # Act
    result = await CreateStoreUseCase(store_uow, store_cache, mock_activity_log).execute(
        owner_id, command, device_info
    )

    # Assert
    assert result.is_ok()
    assert result.value.name == "Toko Sepatu"
    assert result.value.owner_id == owner_id
    assert result.value.toco_url == "https://toco.id/sepatu"
    store_uow.commit.assert_awaited_once()
    assert mock_activity_log.log_activity.call_args.kwargs["action"] == ActivityAction.create

    # Cached under both keys
    assert (await store_cache.get_by_owner(store_uow, owner_id)).id == result.value.id
    store_uow.stores.get_by_owner_id.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_second_store_rejected(store_uow, store_cache, mock_activity_log, device_info, owner_id):
    result = await CreateStoreUseCase(store_uow, store_cache, mock_activity_log).execute(
        owner_id, CreateStoreCommand(name="Another"), device_info
    )

    assert result.is_err()
    assert result.error.code == "STORE_ALREADY_EXISTS"
    store_uow.stores.create.assert_not_called()


# Read


@pytest.mark.asyncio
async def test_get_by_id_is_cached(store_uow, store_cache, permissions, store, owner_id):
    use_case = GetStoreUseCase(store_uow, store_cache, permissions)

    first = await use_case.get_by_id(store.id, owner_id, "owner")
    second = await use_case.get_by_id(store.id, owner_id, "owner")

    assert first.value == second.value
    store_uow.stores.get_by_id.assert_awaited_once_with(store.id)


@pytest.mark.asyncio
async def test_staff_needs_store_read(store_uow, store_cache, permissions, store):
    use_case = GetStoreUseCase(store_uow, store_cache, permissions)
    staff_id = uuid4()

    denied = await use_case.get_by_id(store.id, staff_id, "staff")
    permissions.has_permission.return_value = True
    allowed = await use_case.get_by_id(store.id, staff_id, "staff")

    assert denied.error.code == "FORBIDDEN"
    assert allowed.is_ok()
    permissions.has_permission.assert_awaited_with(staff_id, "staff", "store", "read")


@pytest.mark.asyncio
async def test_missing_store(store_uow, store_cache, permissions):
    store_uow.stores.get_by_id.return_value = None

    result = await GetStoreUseCase(store_uow, store_cache, permissions).get_by_id(
        uuid4(), uuid4(), "owner"
    )

    assert result.error.code == "STORE_NOT_FOUND"


@pytest.mark.asyncio
async def test_public_view_lists_only_set_marketplaces(store_uow, store_cache, permissions, store):
    result = await GetStoreUseCase(store_uow, store_cache, permissions).get_public(store.id)

    assert result.is_ok()
    assert result.value.marketplace_links == {"shopee": "https://shopee.co.id/tokobaju"}
    assert not hasattr(result.value, "owner_id")


# Update


@pytest.mark.asyncio
async def test_partial_update_tracks_before_and_after(
    store_uow, store_cache, permissions, mock_activity_log, device_info, store, owner_id
):
    # Arrange
    command = UpdateStoreCommand.model_validate({"description": "Casual wear", "shopeeUrl": None})
    use_case = UpdateStoreUseCase(store_uow, store_cache, permissions, mock_activity_log)

    # Act
    result = await use_case.execute(store.id, owner_id, "owner", command, device_info)

    # Assert
    assert result.is_ok()
    assert result.value.name == "Toko Baju Sari"
    assert result.value.description == "Casual wear"
    assert result.value.shopee_url is None
    changes = mock_activity_log.log_activity.call_args.kwargs["changes"]
    assert changes == {
        "before": {"description": "Batik from Solo", "shopee_url": "https://shopee.co.id/tokobaju"},
        "after": {"description": "Casual wear", "shopee_url": None},
    }


@pytest.mark.asyncio
async def test_update_invalidates_cache(
    store_uow, store_cache, permissions, mock_activity_log, device_info, store, owner_id
):
    # Arrange
    reader = GetStoreUseCase(store_uow, store_cache, permissions)
    await reader.get_by_id(store.id, owner_id, "owner")

    # Act
    await UpdateStoreUseCase(store_uow, store_cache, permissions, mock_activity_log).execute(
        store.id, owner_id, "owner", UpdateStoreCommand(name="Toko Baru"), device_info
    )
    result = await reader.get_by_id(store.id, owner_id, "owner")

    # Assert
    assert result.value.name == "Toko Baru"
    assert store_uow.stores.get_by_id.await_count == 3


@pytest.mark.asyncio
async def test_noop_update_writes_nothing(
    store_uow, store_cache, permissions, mock_activity_log, device_info, store, owner_id
):
    result = await UpdateStoreUseCase(store_uow, store_cache, permissions, mock_activity_log).execute(
        store.id, owner_id, "owner", UpdateStoreCommand(name="Toko Baju Sari"), device_info
    )

    assert result.is_ok()
    store_uow.stores.update.assert_not_called()
    store_uow.commit.assert_not_called()
    mock_activity_log.log_activity.assert_not_called()


@pytest.mark.asyncio
async def test_staff_update_requires_permission(
    store_uow, store_cache, permissions, mock_activity_log, device_info, store
):
    result = await UpdateStoreUseCase(store_uow, store_cache, permissions, mock_activity_log).execute(
        store.id, uuid4(), "staff", UpdateStoreCommand(description="x"), device_info
    )

    assert result.error.code == "FORBIDDEN"
    store_uow.stores.update.assert_not_called()


def test_name_cannot_be_cleared():
    with pytest.raises(ValueError):
        UpdateStoreCommand.model_validate({"name": None})
