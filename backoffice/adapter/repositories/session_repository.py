from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from backoffice.app.repositories.session_repository import ISessionRepository
from backoffice.domain.base import utcnow
from backoffice.domain.entities import Session, User, UserRole


class SessionRepository(ISessionRepository):
    """Session repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, session_id: UUID) -> Optional[Session]:
        """Get session by ID"""
        stmt = select(Session).where(Session.id == session_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_access_token_with_role(
        self, access_token: str
    ) -> Optional[Tuple[Session, UserRole]]:
        stmt = (
            select(Session, User.role)
            .join(User, User.id == Session.user_id)
            .where(Session.access_token == access_token)
        )
        result = await self.session.exec(stmt)
        row = result.first()
        if row is None:
            return None
        return row[0], row[1]

    async def get_live_by_user_id(self, user_id: UUID, now: datetime) -> List[Session]:
        stmt = (
            select(Session)
            .where(Session.user_id == user_id, Session.expires_at > now)
            .order_by(Session.created_at.asc())
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def count_live_by_user_id(self, user_id: UUID, now: datetime) -> int:
        stmt = select(func.count()).select_from(Session).where(
            Session.user_id == user_id, Session.expires_at > now
        )
        result = await self.session.exec(stmt)
        return result.one()

    async def get_oldest_live_by_user_id(
        self, user_id: UUID, now: datetime
    ) -> Optional[Session]:
        stmt = (
            select(Session)
            .where(Session.user_id == user_id, Session.expires_at > now)
            .order_by(Session.created_at.asc())
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first()

    async def create(self, session_obj: Session) -> Session:
        """Create a new session"""
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def update_tokens(
        self,
        session_id: UUID,
        access_token: str,
        refresh_token: str,
        expires_at: datetime,
    ) -> Optional[Session]:
        session_obj = await self.get_by_id(session_id)
        if session_obj is None:
            return None
        session_obj.access_token = access_token
        session_obj.refresh_token = refresh_token
        session_obj.expires_at = expires_at
        session_obj.updated_at = utcnow()
        self.session.add(session_obj)
        await self.session.flush()
        await self.session.refresh(session_obj)
        return session_obj

    async def delete_by_id(self, session_id: UUID) -> bool:
        stmt = delete(Session).where(Session.id == session_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def delete_all_by_user_id(self, user_id: UUID) -> List[UUID]:
        ids_stmt = select(Session.id).where(Session.user_id == user_id)
        session_ids = list((await self.session.exec(ids_stmt)).all())
        if not session_ids:
            return []
        await self.session.execute(delete(Session).where(Session.id.in_(session_ids)))
        await self.session.flush()
        return session_ids

    async def delete_expired(self, now: datetime) -> List[UUID]:
        ids_stmt = select(Session.id).where(Session.expires_at <= now)
        session_ids = list((await self.session.exec(ids_stmt)).all())
        if not session_ids:
            return []
        await self.session.execute(delete(Session).where(Session.id.in_(session_ids)))
        await self.session.flush()
        return session_ids
