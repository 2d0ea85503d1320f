from typing import Optional
from uuid import UUID

from backoffice.app.services.cache import ICacheStore
from backoffice.app.services.unit_of_work import UnitOfWork
from .dtos import StoreResponse


def store_key(store_id: UUID) -> str:
    return f"store:{store_id}"


def owner_store_key(owner_id: UUID) -> str:
    return f"store:owner:{owner_id}"


class StoreCache:
    """Cache-aside access to stores, keyed by id and by owner."""

    def __init__(self, cache: ICacheStore, ttl: int = 3600):
        self.cache = cache
        self.ttl = ttl

    async def get_by_id(self, uow: UnitOfWork, store_id: UUID) -> Optional[StoreResponse]:
        async def load():
            store = await uow.stores.get_by_id(store_id)
            return StoreResponse.from_entity(store).model_dump(mode="json") if store else None

        data = await self.cache.get_or_load(store_key(store_id), load, self.ttl)
        return StoreResponse.model_validate(data) if data else None

    async def get_by_owner(self, uow: UnitOfWork, owner_id: UUID) -> Optional[StoreResponse]:
        async def load():
            store = await uow.stores.get_by_owner_id(owner_id)
            return StoreResponse.from_entity(store).model_dump(mode="json") if store else None

        data = await self.cache.get_or_load(owner_store_key(owner_id), load, self.ttl)
        return StoreResponse.model_validate(data) if data else None

    async def put(self, store: StoreResponse) -> None:
        data = store.model_dump(mode="json")
        await self.cache.set(store_key(store.id), data, self.ttl)
        await self.cache.set(owner_store_key(store.owner_id), data, self.ttl)

    async def invalidate(self, store_id: UUID, owner_id: UUID) -> None:
        await self.cache.delete_many([store_key(store_id), owner_store_key(owner_id)])
