from uuid import UUID

from backoffice.app.services.permission_service import PermissionService
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.entities import ActionType, EntityType, UserRole
from backoffice.libs.result import Error, Result, Return
from .dtos import PublicStoreResponse, StoreResponse
from .store_cache import StoreCache


class GetStoreUseCase:
    def __init__(self, uow: UnitOfWork, store_cache: StoreCache, permissions: PermissionService):
        self.uow = uow
        self.store_cache = store_cache
        self.permissions = permissions

    async def get_by_id(self, store_id: UUID, user_id: UUID, role: str) -> Result[StoreResponse]:
        """Owner of the store, or staff holding store:read."""
        can_read = role != UserRole.owner.value and await self.permissions.has_permission(
            user_id, role, EntityType.store.value, ActionType.read.value
        )

        async with self.uow:
            store = await self.store_cache.get_by_id(self.uow, store_id)

        if store is None:
            return Return.err(Error("STORE_NOT_FOUND", "Store not found"))
        if store.owner_id != user_id and not can_read:
            return Return.err(Error("FORBIDDEN", "You do not have access to this store"))
        return Return.ok(store)

    async def get_my_store(self, user_id: UUID) -> Result[StoreResponse]:
        async with self.uow:
            store = await self.store_cache.get_by_owner(self.uow, user_id)

        if store is None:
            return Return.err(Error("STORE_NOT_FOUND", "Store not found"))
        return Return.ok(store)

    async def get_public(self, store_id: UUID) -> Result[PublicStoreResponse]:
        async with self.uow:
            store = await self.store_cache.get_by_id(self.uow, store_id)

        if store is None:
            return Return.err(Error("STORE_NOT_FOUND", "Store not found"))
        return Return.ok(PublicStoreResponse.from_store(store))
