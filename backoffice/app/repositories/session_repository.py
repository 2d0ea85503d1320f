from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from backoffice.domain.entities import Session, UserRole


class ISessionRepository(ABC):
    """Session repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID, expired or not"""
        pass

    @abstractmethod
    async def get_by_access_token_with_role(
        self, access_token: str
    ) -> Optional[Tuple[Session, UserRole]]:
        """Get the session holding this access token with its user's current role"""
        pass

    @abstractmethod
    async def get_live_by_user_id(self, user_id: UUID, now: datetime) -> List[Session]:
        """Sessions with expires_at > now, oldest first"""
        pass

    @abstractmethod
    async def count_live_by_user_id(self, user_id: UUID, now: datetime) -> int:
        """Count sessions with expires_at > now"""
        pass

    @abstractmethod
    async def get_oldest_live_by_user_id(
        self, user_id: UUID, now: datetime
    ) -> Optional[Session]:
        """Oldest live session by created_at"""
        pass

    @abstractmethod
    async def create(self, session: Session) -> Session:
        """Create a new session"""
        pass

    @abstractmethod
    async def update_tokens(
        self,
        session_id: UUID,
        access_token: str,
        refresh_token: str,
        expires_at: datetime,
    ) -> Optional[Session]:
        """Overwrite the token pair and expiry in place. None if the session is gone."""
        pass

    @abstractmethod
    async def delete_by_id(self, session_id: UUID) -> bool:
        """Delete a session. Returns True if a row was removed."""
        pass

    @abstractmethod
    async def delete_all_by_user_id(self, user_id: UUID) -> List[UUID]:
        """Delete every session of a user. Returns the deleted ids."""
        pass

    @abstractmethod
    async def delete_expired(self, now: datetime) -> List[UUID]:
        """Delete every session with expires_at <= now. Returns the deleted ids."""
        pass
