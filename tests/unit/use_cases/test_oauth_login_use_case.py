from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from backoffice.app.use_cases.auth import OAuthLoginUseCase
from backoffice.domain.entities import ActivityAction, Store, User, UserRole
from tests.fixtures.fake_oauth import FakeOAuthProvider


@pytest.fixture
def login_uow(mock_uow):
    mock_uow.users.get_by_google_id = AsyncMock(return_value=None)
    mock_uow.users.get_by_email = AsyncMock(return_value=None)
    mock_uow.users.exists_any = AsyncMock(return_value=False)
    mock_uow.users.create = AsyncMock(side_effect=lambda user: user)
    mock_uow.users.update = AsyncMock(side_effect=lambda user: user)
    mock_uow.stores.create = AsyncMock(side_effect=lambda store: store)
    return mock_uow


@pytest.fixture
def use_case(login_uow, mock_session_manager, token_service, mock_activity_log):
    mock_session_manager.create_session.return_value = uuid4()
    mock_session_manager.update_session_tokens.return_value = True
    return OAuthLoginUseCase(
        uow=login_uow,
        session_manager=mock_session_manager,
        token_service=token_service,
        oauth_provider=FakeOAuthProvider(),
        activity_log=mock_activity_log,
    )


@pytest.mark.asyncio
async def test_first_user_becomes_owner_with_default_store(use_case, login_uow, token_service, device_info):
    """The very first sign-in creates the owner and their store"""
    # Act
    result = await use_case.execute("owner-code", device_info)

    # Assert
    assert result.is_ok()
    user = result.value.user
    assert user.role == "owner"
    assert user.is_new_user is True
    assert user.email == "owner@tokobaju.id"

    store = login_uow.stores.create.call_args.args[0]
    assert isinstance(store, Store)
    assert store.owner_id == user.id
    assert store.name == "Sari Wulandari's Store"
    assert store.description == "My online store"

    payload = token_service.verify_access_token(result.value.access_token)
    assert payload.user_id == user.id
    assert payload.role == "owner"
    login_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_later_users_become_staff_without_store(use_case, login_uow, device_info):
    # Arrange
    login_uow.users.exists_any.return_value = True

    # Act
    result = await use_case.execute("staff-code", device_info)

    # Assert
    assert result.is_ok()
    assert result.value.user.role == "staff"
    login_uow.stores.create.assert_not_called()


@pytest.mark.asyncio
async def test_session_is_created_then_rewritten_with_jwts(
    use_case, mock_session_manager, token_service, device_info
):
    """Tokens embed the session id, so the session is written twice"""
    # Act
    result = await use_case.execute("owner-code", device_info)

    # Assert
    create_kwargs = mock_session_manager.create_session.call_args.kwargs
    assert create_kwargs["provider_token"] == "ya29.owner-access"
    assert create_kwargs["device_info"] == device_info

    session_id = mock_session_manager.create_session.return_value
    args = mock_session_manager.update_session_tokens.call_args.args
    assert args[0] == session_id
    assert args[1] == result.value.access_token
    assert args[2] == result.value.refresh_token
    assert token_service.verify_refresh_token(args[2]).session_id == session_id


@pytest.mark.asyncio
async def test_returning_user_logs_in_and_profile_is_synced(
    use_case, login_uow, mock_activity_log, device_info
):
    # Arrange
    existing = User(
        email="owner@tokobaju.id",
        name="Sari",
        google_id="google-owner-001",
        role=UserRole.owner,
    )
    login_uow.users.get_by_google_id.return_value = existing

    # Act
    result = await use_case.execute("owner-code", device_info)

    # Assert
    assert result.is_ok()
    assert result.value.user.id == existing.id
    assert result.value.user.is_new_user is False
    assert result.value.user.name == "Sari Wulandari"
    login_uow.users.create.assert_not_called()
    login_uow.users.update.assert_awaited_once()
    assert mock_activity_log.log_activity.call_args.kwargs["action"] == ActivityAction.login


@pytest.mark.asyncio
async def test_new_user_is_logged_as_register(use_case, mock_activity_log, device_info):
    await use_case.execute("owner-code", device_info)

    kwargs = mock_activity_log.log_activity.call_args.kwargs
    assert kwargs["action"] == ActivityAction.register
    assert kwargs["device_info"] == device_info


@pytest.mark.asyncio
async def test_email_linked_to_other_google_account(use_case, login_uow, mock_session_manager, device_info):
    # Arrange
    login_uow.users.get_by_email.return_value = User(
        email="budi@tokobaju.id", name="Budi", google_id="google-staff-002"
    )

    # Act
    result = await use_case.execute("hijack-code", device_info)

    # Assert
    assert result.is_err()
    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    login_uow.commit.assert_not_called()
    mock_session_manager.create_session.assert_not_called()


@pytest.mark.asyncio
async def test_disabled_user_cannot_log_in(use_case, login_uow, mock_session_manager, device_info):
    # Arrange
    login_uow.users.get_by_google_id.return_value = User(
        email="budi@tokobaju.id", name="Budi", google_id="google-staff-002", is_active=False
    )

    # Act
    result = await use_case.execute("staff-code", device_info)

    # Assert
    assert result.is_err()
    assert result.error.code == "USER_DISABLED"
    mock_session_manager.create_session.assert_not_called()


@pytest.mark.asyncio
async def test_rejected_code(use_case, login_uow, device_info):
    result = await use_case.execute("unknown-code", device_info)

    assert result.is_err()
    assert result.error.code == "AUTHENTICATION_ERROR"
    login_uow.users.get_by_google_id.assert_not_called()


@pytest.mark.asyncio
async def test_login_fails_when_session_vanishes_before_tokens(
    use_case, mock_session_manager, mock_activity_log, device_info
):
    """A session evicted between create and token write cannot back the JWTs"""
    # Arrange
    mock_session_manager.update_session_tokens.return_value = False

    # Act
    result = await use_case.execute("owner-code", device_info)

    # Assert
    assert result.is_err()
    assert result.error.code == "AUTHENTICATION_ERROR"
    assert result.error.message == "Session not found"
    mock_activity_log.log_activity.assert_not_awaited()
