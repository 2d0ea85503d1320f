import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import Field

from backoffice.api.error import ClientError, raise_for_error
from backoffice.api.utils.rate_limit import auth_rate_limit, user_rate_limit
from backoffice.api.utils.response import ApiResponse, success
from backoffice.app.services.session_manager import DeviceInfo
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.app.use_cases.auth import (
    AuthorizationUrlResponse,
    ListSessionsUseCase,
    LoadProfileUseCase,
    LoginResponse,
    LogoutAllResponse,
    LogoutResponse,
    LogoutUseCase,
    OAuthLoginUseCase,
    ProfileResponse,
    RefreshTokenResponse,
    RefreshTokenUseCase,
    SessionListResponse,
)
from backoffice.depends import get_container, get_current_user, get_device_info, get_unit_of_work
from backoffice.domain.base import CamelModel
from backoffice.libs.result import Error

router = APIRouter(prefix="/auth", tags=["Authentication"])

STATUS_BY_CODE = {
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
    "USER_DISABLED": status.HTTP_403_FORBIDDEN,
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


class OAuthCallbackRequest(CamelModel):
    code: str = Field(..., min_length=1, description="Authorization code from Google")


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


@router.get(
    "/google",
    response_model=ApiResponse[AuthorizationUrlResponse],
    dependencies=[Depends(auth_rate_limit)],
)
async def google_authorization_url(container=Depends(get_container)):
    """
    Start Google sign-in.

    Returns the consent screen URL and the state value the client should
    compare when Google redirects back.
    """
    state = secrets.token_urlsafe(24)
    url = container.oauth_provider.get_authorization_url(state)
    return success(AuthorizationUrlResponse(url=url, state=state))


async def _complete_login(
    code: str, device_info: DeviceInfo, uow: UnitOfWork, container
) -> ApiResponse[LoginResponse]:
    use_case = OAuthLoginUseCase(
        uow,
        container.session_manager,
        container.token_service,
        container.oauth_provider,
        container.activity_log,
        session_ttl=container.session_ttl,
    )
    result = await use_case.execute(code, device_info)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.get(
    "/google/callback",
    response_model=ApiResponse[LoginResponse],
    dependencies=[Depends(auth_rate_limit)],
)
async def google_callback(
    code: Optional[str] = Query(default=None),
    error: Optional[str] = Query(default=None),
    device_info: DeviceInfo = Depends(get_device_info),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    """
    Google redirect target.

    Raises:
        - 400 Bad Request: Google reported an error or no code was sent
        - 401 Unauthorized: Google rejected the code
        - 403 Forbidden: Account disabled
        - 409 Conflict: Email already linked to another Google account
    """
    if error:
        raise ClientError(Error("VALIDATION_ERROR", f"OAuth error: {error}"))
    if not code:
        raise ClientError(Error("VALIDATION_ERROR", "Authorization code is required"))
    return await _complete_login(code, device_info, uow, container)


@router.post(
    "/google/callback",
    response_model=ApiResponse[LoginResponse],
    dependencies=[Depends(auth_rate_limit)],
)
async def google_callback_post(
    request: OAuthCallbackRequest,
    device_info: DeviceInfo = Depends(get_device_info),
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    """Same as the GET callback, for clients that relay the code themselves."""
    return await _complete_login(request.code, device_info, uow, container)


@router.post(
    "/refresh",
    response_model=ApiResponse[RefreshTokenResponse],
    dependencies=[Depends(auth_rate_limit)],
)
async def refresh(
    request: RefreshRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    container=Depends(get_container),
):
    """
    Exchange a refresh token for a new token pair on the same session.

    Raises:
        - 401 Unauthorized: Invalid token, session not found or expired
        - 403 Forbidden: Account disabled
    """
    use_case = RefreshTokenUseCase(
        uow,
        container.session_manager,
        container.token_service,
        session_ttl=container.session_ttl,
        enforce_token_match=container.config.REFRESH_TOKEN_REUSE_CHECK,
    )
    result = await use_case.execute(request.refresh_token)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.post(
    "/logout",
    response_model=ApiResponse[LogoutResponse],
    dependencies=[Depends(get_current_user), Depends(user_rate_limit)],
)
async def logout(
    current_user: dict = Depends(get_current_user),
    device_info: DeviceInfo = Depends(get_device_info),
    container=Depends(get_container),
):
    use_case = LogoutUseCase(
        container.session_manager, container.oauth_provider, container.activity_log
    )
    result = await use_case.logout(current_user["access_token"], device_info)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.post(
    "/logout-all",
    response_model=ApiResponse[LogoutAllResponse],
    dependencies=[Depends(get_current_user), Depends(user_rate_limit)],
)
async def logout_all(
    current_user: dict = Depends(get_current_user),
    device_info: DeviceInfo = Depends(get_device_info),
    container=Depends(get_container),
):
    """Ends every session of the caller, this one included."""
    use_case = LogoutUseCase(
        container.session_manager, container.oauth_provider, container.activity_log
    )
    result = await use_case.logout_all(current_user["user_id"], device_info)

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.get(
    "/me",
    response_model=ApiResponse[ProfileResponse],
    dependencies=[Depends(get_current_user), Depends(user_rate_limit)],
)
async def me(
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await LoadProfileUseCase(uow).execute(current_user["user_id"])

    if result.is_err():
        raise_for_error(result.error, STATUS_BY_CODE)

    return success(result.value)


@router.get(
    "/sessions",
    response_model=ApiResponse[SessionListResponse],
    dependencies=[Depends(get_current_user), Depends(user_rate_limit)],
)
async def sessions(
    current_user: dict = Depends(get_current_user),
    container=Depends(get_container),
):
    use_case = ListSessionsUseCase(container.session_manager)
    result = await use_case.execute(current_user["user_id"], current_user["session_id"])
    return success(result.value)
