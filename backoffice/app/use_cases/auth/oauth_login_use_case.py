"""
OAuth Login Use Case

Completes a Google sign-in: provider code exchange, user upsert, session
creation and token issuance.
"""

import logging
from datetime import timedelta

from backoffice.app.services.activity_log_service import ActivityLogService
from backoffice.app.services.oauth_provider import IOAuthProvider
from backoffice.app.services.session_manager import DeviceInfo, SessionManager
from backoffice.app.services.token_service import TokenService
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.base import utcnow
from backoffice.domain.entities import ActivityAction, EntityType, Store, User, UserRole
from backoffice.domain.errors import AuthenticationError
from backoffice.libs.result import Error, Result, Return
from .dtos import LoginResponse, UserSummary

logger = logging.getLogger(__name__)


class OAuthLoginUseCase:
    """
    Use case for the OAuth callback.

    Business Rules:
    - The first user ever becomes owner and gets a default store
    - Every later user is staff
    - Disabled users cannot log in
    - The session exists before its tokens because tokens embed its id,
      so it is created with the provider token and rewritten right after
    - Login fails if the session is gone by the time its tokens are written
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        token_service: TokenService,
        oauth_provider: IOAuthProvider,
        activity_log: ActivityLogService,
        session_ttl: timedelta = timedelta(days=7),
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.token_service = token_service
        self.oauth_provider = oauth_provider
        self.activity_log = activity_log
        self.session_ttl = session_ttl

    async def execute(self, code: str, device_info: DeviceInfo) -> Result[LoginResponse]:
        try:
            provider_tokens = await self.oauth_provider.exchange_code(code)
            profile = await self.oauth_provider.get_user_info(provider_tokens.access_token)
        except AuthenticationError as e:
            return Return.err(Error("AUTHENTICATION_ERROR", e.message))

        async with self.uow:
            user = await self.uow.users.get_by_google_id(profile.id)
            is_new_user = user is None

            if user is None:
                existing = await self.uow.users.get_by_email(profile.email)
                if existing is not None:
                    return Return.err(
                        Error("EMAIL_ALREADY_EXISTS", "Email is linked to another account")
                    )

                role = UserRole.staff if await self.uow.users.exists_any() else UserRole.owner
                user = await self.uow.users.create(
                    User(
                        email=profile.email,
                        name=profile.name,
                        google_id=profile.id,
                        avatar_url=profile.picture,
                        role=role,
                    )
                )

                if role == UserRole.owner:
                    await self.uow.stores.create(
                        Store(
                            owner_id=user.id,
                            name=f"{user.name}'s Store",
                            description="My online store",
                        )
                    )
                    logger.info(f"Owner {user.id} registered with default store")
            elif not user.is_active:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))
            elif user.name != profile.name or user.avatar_url != profile.picture:
                user.name = profile.name
                user.avatar_url = profile.picture
                user.updated_at = utcnow()
                user = await self.uow.users.update(user)

            summary = UserSummary(
                id=user.id,
                email=user.email,
                name=user.name,
                role=user.role.value,
                avatar_url=user.avatar_url,
                is_new_user=is_new_user,
            )
            await self.uow.commit()

        expires_at = utcnow() + self.session_ttl
        session_id = await self.session_manager.create_session(
            user_id=summary.id,
            access_token=provider_tokens.access_token,
            refresh_token=provider_tokens.refresh_token or provider_tokens.access_token,
            expires_at=expires_at,
            device_info=device_info,
            provider_token=provider_tokens.access_token,
        )

        access_token = self.token_service.generate_access_token(
            summary.id, session_id, summary.role
        )
        refresh_token = self.token_service.generate_refresh_token(summary.id, session_id)
        updated = await self.session_manager.update_session_tokens(
            session_id, access_token, refresh_token, expires_at
        )
        if not updated:
            # Evicted by a concurrent login before the tokens landed
            return Return.err(Error("AUTHENTICATION_ERROR", "Session not found"))

        await self.activity_log.log_activity(
            user_id=summary.id,
            action=ActivityAction.register if is_new_user else ActivityAction.login,
            entity_type=EntityType.user,
            entity_id=summary.id,
            changes={"session_id": str(session_id)},
            device_info=device_info,
        )

        return Return.ok(
            LoginResponse(access_token=access_token, refresh_token=refresh_token, user=summary)
        )
