"""
Logout Use Case

Ends one session or every session of a user. Upstream provider tokens
are revoked best-effort; failures never block the local logout.
"""

import asyncio
import logging
from uuid import UUID

from backoffice.app.services.activity_log_service import ActivityLogService
from backoffice.app.services.oauth_provider import IOAuthProvider
from backoffice.app.services.session_manager import DeviceInfo, SessionManager
from backoffice.domain.entities import ActivityAction, EntityType
from backoffice.libs.result import Error, Result, Return
from .dtos import LogoutAllResponse, LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    def __init__(
        self,
        session_manager: SessionManager,
        oauth_provider: IOAuthProvider,
        activity_log: ActivityLogService,
    ):
        self.session_manager = session_manager
        self.oauth_provider = oauth_provider
        self.activity_log = activity_log

    async def logout(self, access_token: str, device_info: DeviceInfo) -> Result[LogoutResponse]:
        identity = await self.session_manager.get_session_by_access_token(access_token)
        if identity is None:
            return Return.err(Error("AUTHENTICATION_ERROR", "Session not found"))

        await self._revoke_provider_token(identity.id)
        await self.session_manager.delete_session(identity.id)

        await self.activity_log.log_activity(
            user_id=identity.user_id,
            action=ActivityAction.logout,
            entity_type=EntityType.session,
            entity_id=identity.id,
            device_info=device_info,
        )
        return Return.ok(LogoutResponse(session_id=identity.id))

    async def logout_all(self, user_id: UUID, device_info: DeviceInfo) -> Result[LogoutAllResponse]:
        sessions = await self.session_manager.get_user_sessions(user_id)

        outcomes = await asyncio.gather(
            *(self._revoke_provider_token(s.id) for s in sessions), return_exceptions=True
        )
        failures = [o for o in outcomes if isinstance(o, Exception)]
        if failures:
            logger.warning(f"{len(failures)} provider revocations failed for user {user_id}")

        deleted = await self.session_manager.delete_all_user_sessions(user_id)

        await self.activity_log.log_activity(
            user_id=user_id,
            action=ActivityAction.logout_all,
            entity_type=EntityType.session,
            changes={"sessions_deleted": deleted},
            device_info=device_info,
        )
        return Return.ok(LogoutAllResponse(sessions_deleted=deleted))

    async def _revoke_provider_token(self, session_id: UUID) -> None:
        session = await self.session_manager.get_session(session_id)
        if session is not None and session.provider_token:
            await self.oauth_provider.revoke_token(session.provider_token)
