from abc import ABC, abstractmethod

from backoffice.app.repositories.activity_log_repository import IActivityLogRepository
from backoffice.app.repositories.permission_repository import IPermissionRepository
from backoffice.app.repositories.session_repository import ISessionRepository
from backoffice.app.repositories.store_repository import IStoreRepository
from backoffice.app.repositories.user_repository import IUserRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    sessions: ISessionRepository
    stores: IStoreRepository
    activity_logs: IActivityLogRepository
    permissions: IPermissionRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    async def close(self):
        """Release the underlying session if this unit of work owns it"""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """True if the database answers"""
        pass
