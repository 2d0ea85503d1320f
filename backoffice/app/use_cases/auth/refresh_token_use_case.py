"""
Refresh Token Use Case

Mints a new token pair for a live session and slides its expiry forward.
"""

import logging
from datetime import timedelta

from backoffice.app.services.session_manager import SessionManager
from backoffice.app.services.token_service import TokenService
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.base import utcnow
from backoffice.domain.errors import AuthenticationError
from backoffice.libs.result import Error, Result, Return
from .dtos import RefreshTokenResponse

logger = logging.getLogger(__name__)


class RefreshTokenUseCase:
    """
    Use case for refreshing JWT access tokens.

    Business Rules:
    - The session id embedded in the refresh token must still exist
    - An expired session is deleted and the refresh fails
    - Tokens are rewritten on the same session, expiry renewed
    - The role comes from the user record, not from the old token
    - With enforce_token_match, only the most recently issued refresh token
      is accepted; otherwise any signature-valid one for a live session is
    """

    def __init__(
        self,
        uow: UnitOfWork,
        session_manager: SessionManager,
        token_service: TokenService,
        session_ttl: timedelta = timedelta(days=7),
        enforce_token_match: bool = False,
    ):
        self.uow = uow
        self.session_manager = session_manager
        self.token_service = token_service
        self.session_ttl = session_ttl
        self.enforce_token_match = enforce_token_match

    async def execute(self, refresh_token: str) -> Result[RefreshTokenResponse]:
        try:
            payload = self.token_service.verify_refresh_token(refresh_token)
        except AuthenticationError as e:
            return Return.err(Error("AUTHENTICATION_ERROR", e.message))

        session = await self.session_manager.get_session(payload.session_id)
        if session is None:
            return Return.err(Error("AUTHENTICATION_ERROR", "Session not found"))

        if session.is_expired():
            await self.session_manager.delete_session(session.id)
            return Return.err(Error("AUTHENTICATION_ERROR", "Session expired"))

        if self.enforce_token_match and session.refresh_token != refresh_token:
            logger.warning(f"Stale refresh token presented for session {session.id}")
            return Return.err(Error("AUTHENTICATION_ERROR", "Invalid refresh token"))

        async with self.uow:
            user = await self.uow.users.get_by_id(session.user_id)
            if user is None:
                return Return.err(Error("AUTHENTICATION_ERROR", "User not found"))
            if not user.is_active:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))
            role = user.role.value

        access_token = self.token_service.generate_access_token(session.user_id, session.id, role)
        new_refresh_token = self.token_service.generate_refresh_token(session.user_id, session.id)

        updated = await self.session_manager.update_session_tokens(
            session.id, access_token, new_refresh_token, utcnow() + self.session_ttl
        )
        if not updated:
            return Return.err(Error("AUTHENTICATION_ERROR", "Session not found"))

        return Return.ok(
            RefreshTokenResponse(access_token=access_token, refresh_token=new_refresh_token)
        )
