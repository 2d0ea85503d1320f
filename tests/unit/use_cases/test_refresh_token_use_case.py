from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from backoffice.app.services.session_manager import SessionRecord
from backoffice.app.use_cases.auth import RefreshTokenUseCase
from backoffice.domain.base import utcnow
from backoffice.domain.entities import User, UserRole


def make_session(user_id, refresh_token: str, expires_in: timedelta = timedelta(days=3)) -> SessionRecord:
    now = utcnow()
    return SessionRecord(
        id=uuid4(),
        user_id=user_id,
        access_token="old-access",
        refresh_token=refresh_token,
        expires_at=now + expires_in,
        created_at=now - timedelta(days=1),
        updated_at=now - timedelta(days=1),
    )


@pytest.fixture
def user():
    return User(email="budi@tokobaju.id", name="Budi", google_id="g-2", role=UserRole.staff)


@pytest.fixture
def refresh_uow(mock_uow, user):
    mock_uow.users.get_by_id = AsyncMock(return_value=user)
    return mock_uow


def build(refresh_uow, session_manager, token_service, enforce_token_match=False):
    return RefreshTokenUseCase(
        uow=refresh_uow,
        session_manager=session_manager,
        token_service=token_service,
        enforce_token_match=enforce_token_match,
    )


@pytest.mark.asyncio
async def test_refresh_rotates_tokens_on_same_session(
    refresh_uow, mock_session_manager, token_service, user
):
    # Arrange
    session = make_session(user.id, "placeholder")
    refresh_token = token_service.generate_refresh_token(user.id, session.id)
    mock_session_manager.get_session.return_value = session
    mock_session_manager.update_session_tokens.return_value = True

    # Act
    result = await build(refresh_uow, mock_session_manager, token_service).execute(refresh_token)

    # Assert
    assert result.is_ok()
    payload = token_service.verify_access_token(result.value.access_token)
    assert payload.session_id == session.id
    assert payload.role == "staff"
    assert result.value.refresh_token != refresh_token

    session_id, access, refresh, expires_at = mock_session_manager.update_session_tokens.call_args.args
    assert session_id == session.id
    assert refresh == result.value.refresh_token
    assert expires_at > session.expires_at


@pytest.mark.asyncio
async def test_role_comes_from_user_record(refresh_uow, mock_session_manager, token_service, user):
    """A promotion is visible on the next refresh"""
    # Arrange
    user.role = UserRole.owner
    session = make_session(user.id, "x")
    mock_session_manager.get_session.return_value = session
    mock_session_manager.update_session_tokens.return_value = True

    # Act
    result = await build(refresh_uow, mock_session_manager, token_service).execute(
        token_service.generate_refresh_token(user.id, session.id)
    )

    # Assert
    assert token_service.verify_access_token(result.value.access_token).role == "owner"


@pytest.mark.asyncio
async def test_invalid_refresh_token(refresh_uow, mock_session_manager, token_service):
    access_token = token_service.generate_access_token(uuid4(), uuid4(), "staff")

    result = await build(refresh_uow, mock_session_manager, token_service).execute(access_token)

    assert result.is_err()
    assert result.error.code == "AUTHENTICATION_ERROR"
    mock_session_manager.get_session.assert_not_called()


@pytest.mark.asyncio
async def test_session_not_found(refresh_uow, mock_session_manager, token_service):
    mock_session_manager.get_session.return_value = None

    result = await build(refresh_uow, mock_session_manager, token_service).execute(
        token_service.generate_refresh_token(uuid4(), uuid4())
    )

    assert result.is_err()
    assert result.error.message == "Session not found"


@pytest.mark.asyncio
async def test_expired_session_is_deleted(refresh_uow, mock_session_manager, token_service, user):
    # Arrange
    session = make_session(user.id, "x", expires_in=timedelta(seconds=-1))
    mock_session_manager.get_session.return_value = session

    # Act
    result = await build(refresh_uow, mock_session_manager, token_service).execute(
        token_service.generate_refresh_token(user.id, session.id)
    )

    # Assert
    assert result.is_err()
    assert result.error.message == "Session expired"
    mock_session_manager.delete_session.assert_awaited_once_with(session.id)
    mock_session_manager.update_session_tokens.assert_not_called()


@pytest.mark.asyncio
async def test_older_refresh_token_accepted_by_default(
    refresh_uow, mock_session_manager, token_service, user
):
    # Arrange
    session = make_session(user.id, "the-latest-refresh-token")
    mock_session_manager.get_session.return_value = session
    mock_session_manager.update_session_tokens.return_value = True

    # Act
    result = await build(refresh_uow, mock_session_manager, token_service).execute(
        token_service.generate_refresh_token(user.id, session.id)
    )

    # Assert
    assert result.is_ok()


@pytest.mark.asyncio
async def test_older_refresh_token_rejected_when_matching_enforced(
    refresh_uow, mock_session_manager, token_service, user
):
    # Arrange
    session = make_session(user.id, "the-latest-refresh-token")
    mock_session_manager.get_session.return_value = session

    # Act
    result = await build(
        refresh_uow, mock_session_manager, token_service, enforce_token_match=True
    ).execute(token_service.generate_refresh_token(user.id, session.id))

    # Assert
    assert result.is_err()
    assert result.error.message == "Invalid refresh token"
    mock_session_manager.update_session_tokens.assert_not_called()


@pytest.mark.asyncio
async def test_disabled_user_cannot_refresh(refresh_uow, mock_session_manager, token_service, user):
    user.is_active = False
    session = make_session(user.id, "x")
    mock_session_manager.get_session.return_value = session

    result = await build(refresh_uow, mock_session_manager, token_service).execute(
        token_service.generate_refresh_token(user.id, session.id)
    )

    assert result.is_err()
    assert result.error.code == "USER_DISABLED"
