import logging
from typing import Any, Dict, Optional
from uuid import UUID

from backoffice.app.services.session_manager import DeviceInfo, UnitOfWorkFactory
from backoffice.domain.entities import ActivityLog

logger = logging.getLogger(__name__)


class ActivityLogService:
    """Writes activity entries in their own transaction. Never raises."""

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory

    async def log_activity(
        self,
        user_id: UUID,
        action: str,
        entity_type: str,
        entity_id: Optional[UUID] = None,
        changes: Optional[Dict[str, Any]] = None,
        device_info: Optional[DeviceInfo] = None,
    ) -> None:
        try:
            async with self.uow_factory() as uow:
                await uow.activity_logs.create(
                    ActivityLog(
                        user_id=user_id,
                        action=str(getattr(action, "value", action)),
                        entity_type=str(getattr(entity_type, "value", entity_type)),
                        entity_id=entity_id,
                        changes=changes,
                        ip_address=device_info.ip_address if device_info else None,
                        user_agent=device_info.user_agent if device_info else None,
                        device_info=device_info.model_dump() if device_info else None,
                    )
                )
                await uow.commit()
        except Exception as e:
            logger.error(f"Failed to log activity {action} for user {user_id}: {e}")
