"""
Token Service

Issues and verifies the signed access/refresh token pair. Each kind has
its own secret so one can never be replayed as the other.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import ExpiredSignatureError, JWTError, jwt

from backoffice.domain.errors import AuthenticationError

logger = logging.getLogger(__name__)

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPayload:
    user_id: UUID
    session_id: UUID
    role: Optional[str] = None


class TokenService:
    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        algorithm: str = "HS256",
    ):
        if access_secret == refresh_secret:
            logger.warning("Access and refresh tokens share a secret")
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.algorithm = algorithm

    def _encode(self, claims: dict, secret: str, ttl: timedelta) -> str:
        now = datetime.now(UTC)
        payload = {
            **claims,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def generate_access_token(self, user_id: UUID, session_id: UUID, role: str) -> str:
        """
        Generate JWT access token

        Args:
            user_id: User UUID
            session_id: Session the token is bound to
            role: User role (owner, staff)

        Returns:
            JWT token string signed with the access secret
        """
        claims = {
            "user_id": str(user_id),
            "session_id": str(session_id),
            "role": role,
            "type": ACCESS,
        }
        return self._encode(claims, self.access_secret, self.access_ttl)

    def generate_refresh_token(self, user_id: UUID, session_id: UUID) -> str:
        claims = {"user_id": str(user_id), "session_id": str(session_id), "type": REFRESH}
        return self._encode(claims, self.refresh_secret, self.refresh_ttl)

    def _decode(self, token: str, secret: str, kind: str) -> TokenPayload:
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            logger.debug(f"Rejected expired {kind} token")
            raise AuthenticationError(f"{kind.capitalize()} token has expired")
        except JWTError as e:
            logger.debug(f"Rejected invalid {kind} token: {e}")
            raise AuthenticationError(f"Invalid {kind} token")

        if payload.get("type") != kind:
            raise AuthenticationError(f"Invalid {kind} token")

        try:
            return TokenPayload(
                user_id=UUID(payload["user_id"]),
                session_id=UUID(payload["session_id"]),
                role=payload.get("role"),
            )
        except (KeyError, ValueError, TypeError):
            raise AuthenticationError(f"Invalid {kind} token")

    def verify_access_token(self, token: str) -> TokenPayload:
        """Raises AuthenticationError when the token is invalid or expired."""
        return self._decode(token, self.access_secret, ACCESS)

    def verify_refresh_token(self, token: str) -> TokenPayload:
        """Raises AuthenticationError when the token is invalid or expired."""
        return self._decode(token, self.refresh_secret, REFRESH)

    @staticmethod
    def is_token_expired(token: str) -> bool:
        """
        Read exp without verifying the signature.

        For diagnostics only, never for authorization. Undecodable tokens
        count as expired.
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return True
        exp = claims.get("exp")
        if exp is None:
            return True
        return datetime.now(UTC).timestamp() >= float(exp)
