"""
Create Store Use Case
"""

import logging
from uuid import UUID

from backoffice.app.services.activity_log_service import ActivityLogService
from backoffice.app.services.session_manager import DeviceInfo
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.entities import ActivityAction, EntityType, Store
from backoffice.libs.result import Error, Result, Return
from .dtos import CreateStoreCommand, StoreResponse
from .store_cache import StoreCache

logger = logging.getLogger(__name__)


class CreateStoreUseCase:
    """
    Business Rules:
    - Only owners create stores (enforced by the route)
    - One store per owner
    """

    def __init__(self, uow: UnitOfWork, store_cache: StoreCache, activity_log: ActivityLogService):
        self.uow = uow
        self.store_cache = store_cache
        self.activity_log = activity_log

    async def execute(
        self, owner_id: UUID, command: CreateStoreCommand, device_info: DeviceInfo
    ) -> Result[StoreResponse]:
        async with self.uow:
            if await self.uow.stores.get_by_owner_id(owner_id) is not None:
                return Return.err(
                    Error("STORE_ALREADY_EXISTS", "You already have a store")
                )

            fields = command.model_dump()
            store = await self.uow.stores.create(
                Store(
                    owner_id=owner_id,
                    **{k: (str(v) if v is not None else None) for k, v in fields.items()},
                )
            )
            response = StoreResponse.from_entity(store)
            await self.uow.commit()

        await self.store_cache.put(response)
        await self.activity_log.log_activity(
            user_id=owner_id,
            action=ActivityAction.create,
            entity_type=EntityType.store,
            entity_id=response.id,
            changes={"after": response.model_dump(mode="json", exclude={"created_at", "updated_at"})},
            device_info=device_info,
        )
        logger.info(f"Store {response.id} created by {owner_id}")
        return Return.ok(response)
