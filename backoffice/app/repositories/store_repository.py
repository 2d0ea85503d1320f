from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from backoffice.domain.entities import Store


class IStoreRepository(ABC):
    """Store repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, store_id: UUID) -> Optional[Store]:
        pass

    @abstractmethod
    async def get_by_owner_id(self, owner_id: UUID) -> Optional[Store]:
        pass

    @abstractmethod
    async def create(self, store: Store) -> Store:
        pass

    @abstractmethod
    async def update(self, store: Store) -> Store:
        pass
