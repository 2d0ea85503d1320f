from uuid import UUID

from fastapi import APIRouter, Depends, status

from backoffice.api.error import raise_for_error
from backoffice.api.utils.rate_limit import user_rate_limit
from backoffice.api.utils.response import ApiResponse, success
from backoffice.app.services.session_manager import DeviceInfo
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.app.use_cases.users import (
    ManagePermissionsUseCase,
    PermissionCommand,
    PermissionItem,
    UserPermissionsResponse,
)
from backoffice.depends import (
    get_container,
    get_current_user,
    get_device_info,
    get_unit_of_work,
    require_owner,
    require_permission,
)
from backoffice.domain.entities import ActionType, EntityType

router = APIRouter(prefix="/users", tags=["Users"])

STATUS_BY_CODE = {
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PERMISSION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PERMISSION_ALREADY_GRANTED": status.HTTP_409_CONFLICT,
    "INVALID_TARGET": status.HTTP_400_BAD_REQUEST,
    "INVALID_PERMISSION": status.HTTP_400_BAD_REQUEST,
}


def _use_case(uow: UnitOfWork, container) -> ManagePermissionsUseCase:
    return ManagePermissionsUseCase(uow, container.permissions, container.activity_log)


@router.get(
    "/me/permissions",
    response_model=ApiResponse[UserPermissionsResponse],
    dependencies=[Depends(get_current_user), Depends(user_rate_limit)],
)
async def my_permissions(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    result = await _use_case(uow, container).list_permissions(current_user["user_id"])

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.get(
    "/{user_id}/permissions",
    response_model=ApiResponse[UserPermissionsResponse],
    dependencies=[
        Depends(require_permission(EntityType.staff.value, ActionType.read.value)),
        Depends(user_rate_limit),
    ],
)
async def user_permissions(
    user_id: UUID,
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    """Owners, or staff holding staff:read."""
    result = await _use_case(uow, container).list_permissions(user_id)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.post(
    "/{user_id}/permissions",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[PermissionItem],
    dependencies=[Depends(require_owner), Depends(user_rate_limit)],
)
async def grant_permission(
    user_id: UUID,
    request: PermissionCommand,
    current_user: dict = Depends(require_owner),
    device_info: DeviceInfo = Depends(get_device_info),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    result = await _use_case(uow, container).grant(
        current_user["user_id"], user_id, request, device_info
    )

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.delete(
    "/{user_id}/permissions/{entity}/{action}",
    response_model=ApiResponse[PermissionItem],
    dependencies=[Depends(require_owner), Depends(user_rate_limit)],
)
async def revoke_permission(
    user_id: UUID,
    entity: EntityType,
    action: ActionType,
    current_user: dict = Depends(require_owner),
    device_info: DeviceInfo = Depends(get_device_info),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    result = await _use_case(uow, container).revoke(
        current_user["user_id"],
        user_id,
        PermissionCommand(entity=entity, action=action),
        device_info,
    )

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)
