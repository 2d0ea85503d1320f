import logging
from typing import List
from uuid import UUID

from backoffice.app.services.cache import ICacheStore
from backoffice.app.services.session_manager import UnitOfWorkFactory
from backoffice.domain.entities import UserRole

logger = logging.getLogger(__name__)


def permission_cache_key(user_id: UUID, entity: str, action: str) -> str:
    return f"user:{user_id}:permission:{entity}:{action}"


class PermissionService:
    """
    Role-based access checks.

    Owners hold every permission. Staff hold only the (entity, action)
    pairs granted to them; each answer is cached per user.
    """

    def __init__(self, uow_factory: UnitOfWorkFactory, cache: ICacheStore, cache_ttl: int = 3600):
        self.uow_factory = uow_factory
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def has_permission(self, user_id: UUID, role: str, entity: str, action: str) -> bool:
        if role == UserRole.owner.value:
            return True

        async def load():
            async with self.uow_factory() as uow:
                return await uow.permissions.user_has_permission(user_id, entity, action)

        allowed = await self.cache.get_or_load(
            permission_cache_key(user_id, entity, action), load, self.cache_ttl
        )
        return bool(allowed)

    async def get_user_permissions(self, user_id: UUID) -> List[dict]:
        async with self.uow_factory() as uow:
            permissions = await uow.permissions.list_for_user(user_id)
            return [{"entity": p.entity, "action": p.action} for p in permissions]

    async def clear_user_permissions_cache(self, user_id: UUID) -> None:
        deleted = await self.cache.delete_pattern(f"user:{user_id}:permission:*")
        logger.debug(f"Cleared {deleted} cached permissions of user {user_id}")
