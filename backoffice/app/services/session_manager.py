"""
Session Manager

Persists one session per device login, mirrors each session into the
cache under session:{id}, and caps live sessions per user by evicting the
oldest one.

Concurrency: the count-then-evict step is not transactional. Two logins
racing for the same user can both see count < max and both insert, so the
cap may be exceeded by the racers until the next login evicts again.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional
from uuid import UUID

from pydantic import BaseModel

from backoffice.app.services.cache import ICacheStore
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.base import utcnow
from backoffice.domain.entities import Session

logger = logging.getLogger(__name__)

UnitOfWorkFactory = Callable[[], UnitOfWork]


class DeviceInfo(BaseModel):
    device_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None


class SessionRecord(BaseModel):
    """Full session as stored, tokens included. This is what gets cached."""

    id: UUID
    user_id: UUID
    access_token: str
    refresh_token: str
    provider_token: Optional[str] = None
    device_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    expires_at: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, session: Session) -> "SessionRecord":
        return cls.model_validate(session.model_dump())

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or utcnow())


class SessionIdentity(BaseModel):
    id: UUID
    user_id: UUID
    role: str


class SessionSummary(BaseModel):
    """Device metadata only, never tokens."""

    id: UUID
    device_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime
    expires_at: datetime


def session_cache_key(session_id: UUID) -> str:
    return f"session:{session_id}"


class SessionManager:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        cache: ICacheStore,
        max_sessions_per_user: int = 10,
        cache_ttl: int = 86400,
    ):
        self.uow_factory = uow_factory
        self.cache = cache
        self.max_sessions_per_user = max_sessions_per_user
        self.cache_ttl = cache_ttl

    async def create_session(
        self,
        user_id: UUID,
        access_token: str,
        refresh_token: str,
        expires_at: datetime,
        device_info: Optional[DeviceInfo] = None,
        provider_token: Optional[str] = None,
    ) -> UUID:
        """
        Create a session, evicting the user's oldest live session first when
        the user is already at the cap.

        Returns:
            The new session id
        """
        device_info = device_info or DeviceInfo()
        evicted_id = None

        async with self.uow_factory() as uow:
            now = utcnow()
            live_count = await uow.sessions.count_live_by_user_id(user_id, now)
            if live_count >= self.max_sessions_per_user:
                oldest = await uow.sessions.get_oldest_live_by_user_id(user_id, now)
                if oldest is not None:
                    evicted_id = oldest.id
                    await uow.sessions.delete_by_id(oldest.id)

            session = await uow.sessions.create(
                Session(
                    user_id=user_id,
                    access_token=access_token,
                    refresh_token=refresh_token,
                    provider_token=provider_token,
                    device_id=device_info.device_id,
                    user_agent=device_info.user_agent,
                    ip_address=device_info.ip_address,
                    expires_at=expires_at,
                )
            )
            record = SessionRecord.from_entity(session)
            await uow.commit()

        if evicted_id is not None:
            logger.info(f"Evicted oldest session {evicted_id} of user {user_id}")
            await self.cache.delete(session_cache_key(evicted_id))

        await self._cache_record(record)
        logger.info(f"Session {record.id} created for user {user_id}")
        return record.id

    async def get_session(self, session_id: UUID) -> Optional[SessionRecord]:
        """
        Cache-aside read. Expired sessions are returned as-is, callers
        check is_expired() and delete.
        """

        async def load():
            async with self.uow_factory() as uow:
                session = await uow.sessions.get_by_id(session_id)
                if session is None:
                    return None
                return SessionRecord.from_entity(session).model_dump(mode="json")

        data = await self.cache.get_or_load(session_cache_key(session_id), load, self.cache_ttl)
        if data is None:
            return None
        return SessionRecord.model_validate(data)

    async def get_session_by_access_token(self, access_token: str) -> Optional[SessionIdentity]:
        """Database lookup, never cached. Role is read live from the user."""
        async with self.uow_factory() as uow:
            row = await uow.sessions.get_by_access_token_with_role(access_token)
            if row is None:
                return None
            session, role = row
            return SessionIdentity(
                id=session.id,
                user_id=session.user_id,
                role=role.value if hasattr(role, "value") else str(role),
            )

    async def get_user_sessions(self, user_id: UUID) -> List[SessionSummary]:
        """Live sessions only, oldest first."""
        async with self.uow_factory() as uow:
            sessions = await uow.sessions.get_live_by_user_id(user_id, utcnow())
            return [SessionSummary.model_validate(s.model_dump()) for s in sessions]

    async def update_session_tokens(
        self,
        session_id: UUID,
        access_token: str,
        refresh_token: str,
        expires_at: datetime,
    ) -> bool:
        """Overwrite the token pair in place. Returns False if the session is gone."""
        async with self.uow_factory() as uow:
            session = await uow.sessions.update_tokens(
                session_id, access_token, refresh_token, expires_at
            )
            if session is None:
                logger.warning(f"Token update skipped, session {session_id} not found")
                return False
            record = SessionRecord.from_entity(session)
            await uow.commit()

        await self._cache_record(record)
        return True

    async def delete_session(self, session_id: UUID) -> None:
        """Idempotent."""
        async with self.uow_factory() as uow:
            deleted = await uow.sessions.delete_by_id(session_id)
            await uow.commit()

        await self.cache.delete(session_cache_key(session_id))
        if deleted:
            logger.info(f"Session {session_id} deleted")

    async def delete_all_user_sessions(self, user_id: UUID) -> int:
        async with self.uow_factory() as uow:
            session_ids = await uow.sessions.delete_all_by_user_id(user_id)
            await uow.commit()

        await self.cache.delete_many(session_cache_key(sid) for sid in session_ids)
        logger.info(f"Deleted {len(session_ids)} sessions of user {user_id}")
        return len(session_ids)

    async def cleanup_expired_sessions(self) -> int:
        async with self.uow_factory() as uow:
            session_ids = await uow.sessions.delete_expired(utcnow())
            await uow.commit()

        if session_ids:
            await self.cache.delete_many(session_cache_key(sid) for sid in session_ids)
            logger.info(f"Cleaned up {len(session_ids)} expired sessions")
        return len(session_ids)

    async def _cache_record(self, record: SessionRecord) -> None:
        await self.cache.set(
            session_cache_key(record.id), record.model_dump(mode="json"), self.cache_ttl
        )
