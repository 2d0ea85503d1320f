"""
Update Store Use Case

Partial update with before/after tracking.
"""

import logging
from uuid import UUID

from backoffice.app.services.activity_log_service import ActivityLogService
from backoffice.app.services.permission_service import PermissionService
from backoffice.app.services.session_manager import DeviceInfo
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.base import utcnow
from backoffice.domain.entities import ActionType, ActivityAction, EntityType, UserRole
from backoffice.libs.result import Error, Result, Return
from .dtos import StoreResponse, UpdateStoreCommand
from .store_cache import StoreCache

logger = logging.getLogger(__name__)


class UpdateStoreUseCase:
    """
    Business Rules:
    - The store owner may update it, staff need store:update
    - Fields absent from the command are untouched
    - A no-op update writes nothing and logs nothing
    """

    def __init__(
        self,
        uow: UnitOfWork,
        store_cache: StoreCache,
        permissions: PermissionService,
        activity_log: ActivityLogService,
    ):
        self.uow = uow
        self.store_cache = store_cache
        self.permissions = permissions
        self.activity_log = activity_log

    async def execute(
        self,
        store_id: UUID,
        user_id: UUID,
        role: str,
        command: UpdateStoreCommand,
        device_info: DeviceInfo,
    ) -> Result[StoreResponse]:
        can_update = role != UserRole.owner.value and await self.permissions.has_permission(
            user_id, role, EntityType.store.value, ActionType.update.value
        )
        requested = command.changed_fields()

        async with self.uow:
            store = await self.uow.stores.get_by_id(store_id)
            if store is None:
                return Return.err(Error("STORE_NOT_FOUND", "Store not found"))
            if store.owner_id != user_id and not can_update:
                return Return.err(Error("FORBIDDEN", "You do not have access to this store"))

            before, after = {}, {}
            for field, value in requested.items():
                current = getattr(store, field)
                if current != value:
                    before[field] = current
                    after[field] = value
                    setattr(store, field, value)

            if not after:
                return Return.ok(StoreResponse.from_entity(store))

            store.updated_at = utcnow()
            store = await self.uow.stores.update(store)
            response = StoreResponse.from_entity(store)
            await self.uow.commit()

        await self.store_cache.invalidate(response.id, response.owner_id)
        await self.activity_log.log_activity(
            user_id=user_id,
            action=ActivityAction.update,
            entity_type=EntityType.store,
            entity_id=response.id,
            changes={"before": before, "after": after},
            device_info=device_info,
        )
        logger.info(f"Store {response.id} updated by {user_id}: {sorted(after)}")
        return Return.ok(response)
