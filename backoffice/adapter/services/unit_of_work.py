import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from backoffice.adapter.repositories.activity_log_repository import ActivityLogRepository
from backoffice.adapter.repositories.permission_repository import PermissionRepository
from backoffice.adapter.repositories.session_repository import SessionRepository
from backoffice.adapter.repositories.store_repository import StoreRepository
from backoffice.adapter.repositories.user_repository import UserRepository
from backoffice.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern

    With owns_session=True the session is closed on exit, which lets
    long-lived services open a fresh unit of work per operation.
    """

    def __init__(self, session: AsyncSession, owns_session: bool = False):
        self.session = session
        self.owns_session = owns_session

    async def __aenter__(self):
        self.users = UserRepository(self.session)
        self.sessions = SessionRepository(self.session)
        self.stores = StoreRepository(self.session)
        self.activity_logs = ActivityLogRepository(self.session)
        self.permissions = PermissionRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()
        await self.close()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    async def close(self):
        if self.owns_session:
            await self.session.close()

    async def ping(self) -> bool:
        try:
            await self.session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False
