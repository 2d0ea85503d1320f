from typing import List
from uuid import UUID

from backoffice.domain.base import CamelModel
from backoffice.domain.entities import ActionType, EntityType

PERMISSION_ENTITIES = (
    EntityType.store,
    EntityType.category,
    EntityType.product,
    EntityType.staff,
)


class PermissionItem(CamelModel):
    entity: str
    action: str


class UserPermissionsResponse(CamelModel):
    user_id: UUID
    role: str
    permissions: List[PermissionItem]


class PermissionCommand(CamelModel):
    entity: EntityType
    action: ActionType
