from uuid import UUID

from fastapi import APIRouter, Depends, status

from backoffice.api.error import raise_for_error
from backoffice.api.utils.rate_limit import (
    public_rate_limit,
    store_create_rate_limit,
    store_update_rate_limit,
    user_rate_limit,
)
from backoffice.api.utils.response import ApiResponse, success
from backoffice.app.services.session_manager import DeviceInfo
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.app.use_cases.stores import (
    CreateStoreCommand,
    CreateStoreUseCase,
    GetStoreUseCase,
    PublicStoreResponse,
    StoreResponse,
    UpdateStoreCommand,
    UpdateStoreUseCase,
)
from backoffice.depends import (
    get_container,
    get_current_user,
    get_device_info,
    get_unit_of_work,
    require_owner,
)

router = APIRouter(prefix="/stores", tags=["Stores"])

STATUS_BY_CODE = {
    "STORE_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "STORE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[StoreResponse],
    dependencies=[Depends(require_owner), Depends(store_create_rate_limit)],
)
async def create_store(
    request: CreateStoreCommand,
    current_user: dict = Depends(get_current_user),
    device_info: DeviceInfo = Depends(get_device_info),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    """
    Create the caller's store.

    Raises:
        - 403 Forbidden: Caller is not an owner
        - 409 Conflict: Owner already has a store
    """
    use_case = CreateStoreUseCase(uow, container.store_cache, container.activity_log)
    result = await use_case.execute(current_user["user_id"], request, device_info)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.get(
    "/me",
    response_model=ApiResponse[StoreResponse],
    dependencies=[Depends(get_current_user), Depends(user_rate_limit)],
)
async def get_my_store(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    use_case = GetStoreUseCase(uow, container.store_cache, container.permissions)
    result = await use_case.get_my_store(current_user["user_id"])

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.get(
    "/{store_id}/public",
    response_model=ApiResponse[PublicStoreResponse],
    dependencies=[Depends(public_rate_limit)],
)
async def get_public_store(
    store_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    """Anonymous storefront view."""
    use_case = GetStoreUseCase(uow, container.store_cache, container.permissions)
    result = await use_case.get_public(store_id)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.get(
    "/{store_id}",
    response_model=ApiResponse[StoreResponse],
    dependencies=[Depends(get_current_user), Depends(user_rate_limit)],
)
async def get_store(
    store_id: UUID,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    use_case = GetStoreUseCase(uow, container.store_cache, container.permissions)
    result = await use_case.get_by_id(store_id, current_user["user_id"], current_user["role"])

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.patch(
    "/{store_id}",
    response_model=ApiResponse[StoreResponse],
    dependencies=[Depends(get_current_user), Depends(store_update_rate_limit)],
)
async def update_store(
    store_id: UUID,
    request: UpdateStoreCommand,
    current_user: dict = Depends(get_current_user),
    device_info: DeviceInfo = Depends(get_device_info),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    """
    Partial update. Omitted fields are kept, null clears optional fields.

    Raises:
        - 403 Forbidden: Not the owner and no store:update permission
        - 404 Not Found: Store does not exist
    """
    use_case = UpdateStoreUseCase(
        uow, container.store_cache, container.permissions, container.activity_log
    )
    result = await use_case.execute(
        store_id, current_user["user_id"], current_user["role"], request, device_info
    )

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)
