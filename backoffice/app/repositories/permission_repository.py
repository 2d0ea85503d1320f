from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from backoffice.domain.entities import Permission


class IPermissionRepository(ABC):
    """Permission repository interface - application layer"""

    @abstractmethod
    async def get_by_entity_action(self, entity: str, action: str) -> Optional[Permission]:
        pass

    @abstractmethod
    async def get_or_create(self, entity: str, action: str) -> Permission:
        pass

    @abstractmethod
    async def user_has_permission(self, user_id: UUID, entity: str, action: str) -> bool:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UUID) -> List[Permission]:
        pass

    @abstractmethod
    async def grant(self, user_id: UUID, permission_id: UUID, granted_by: UUID) -> bool:
        """Grant a permission. Returns False if the user already had it."""
        pass

    @abstractmethod
    async def revoke(self, user_id: UUID, permission_id: UUID) -> bool:
        """Revoke a permission. Returns False if the user did not have it."""
        pass
