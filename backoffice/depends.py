from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backoffice.app.services.session_manager import DeviceInfo
from backoffice.domain.entities import UserRole
from backoffice.domain.errors import AuthenticationError, AuthorizationError

security = HTTPBearer(auto_error=False)


def get_container(request: Request):
    return request.app.state.container


async def get_unit_of_work(request: Request):
    uow = request.app.state.container.uow_factory()
    try:
        yield uow
    finally:
        await uow.close()


def get_client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_device_info(request: Request) -> DeviceInfo:
    return DeviceInfo(
        device_id=request.headers.get("x-device-id"),
        user_agent=request.headers.get("user-agent"),
        ip_address=get_client_ip(request),
    )


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    container=Depends(get_container),
) -> dict:
    """
    Dependency to authenticate the bearer token against its session.

    The token must verify, its session must exist and be unexpired, and
    the session must still hold this exact token. Logout and refresh
    therefore invalidate a token before it expires.

    Returns:
        Dict with user_id, session_id, role and access_token

    Raises:
        AuthenticationError: 401 on any failed check
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("No authorization token provided")

    token = credentials.credentials
    payload = container.token_service.verify_access_token(token)

    session = await container.session_manager.get_session(payload.session_id)
    if session is None:
        raise AuthenticationError("Session not found")

    if session.is_expired():
        await container.session_manager.delete_session(session.id)
        raise AuthenticationError("Session expired")

    if session.access_token != token:
        raise AuthenticationError("Invalid token")

    request.state.user_id = payload.user_id
    request.state.session_id = payload.session_id
    request.state.role = payload.role

    return {
        "user_id": payload.user_id,
        "session_id": payload.session_id,
        "role": payload.role,
        "access_token": token,
    }


async def require_owner(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user["role"] != UserRole.owner.value:
        raise AuthorizationError("Only the store owner can perform this action")
    return current_user


def require_permission(entity: str, action: str):
    """Owners pass, staff need the (entity, action) grant."""

    async def dependency(
        current_user: dict = Depends(get_current_user),
        container=Depends(get_container),
    ) -> dict:
        allowed = await container.permissions.has_permission(
            current_user["user_id"], current_user["role"], entity, action
        )
        if not allowed:
            raise AuthorizationError(f"Missing permission {entity}:{action}")
        return current_user

    return dependency
