"""
Manage Permissions Use Case

Owners grant and revoke (entity, action) permissions on staff.
"""

import logging
from uuid import UUID

from backoffice.app.services.activity_log_service import ActivityLogService
from backoffice.app.services.permission_service import PermissionService
from backoffice.app.services.session_manager import DeviceInfo
from backoffice.app.services.unit_of_work import UnitOfWork
from backoffice.domain.entities import ActivityAction, EntityType, UserRole
from backoffice.libs.result import Error, Result, Return
from .dtos import PERMISSION_ENTITIES, PermissionCommand, PermissionItem, UserPermissionsResponse

logger = logging.getLogger(__name__)


class ManagePermissionsUseCase:
    """
    Business Rules:
    - Only staff hold explicit permissions, owners implicitly have all
    - Granting twice is a conflict, revoking a missing grant is not found
    - Every change clears the target's cached permission answers
    """

    def __init__(
        self,
        uow: UnitOfWork,
        permissions: PermissionService,
        activity_log: ActivityLogService,
    ):
        self.uow = uow
        self.permissions = permissions
        self.activity_log = activity_log

    async def list_permissions(self, user_id: UUID) -> Result[UserPermissionsResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            role = user.role.value
            permissions = await self.uow.permissions.list_for_user(user_id)
            items = [PermissionItem(entity=p.entity, action=p.action) for p in permissions]

        return Return.ok(UserPermissionsResponse(user_id=user_id, role=role, permissions=items))

    async def grant(
        self,
        owner_id: UUID,
        target_user_id: UUID,
        command: PermissionCommand,
        device_info: DeviceInfo,
    ) -> Result[PermissionItem]:
        error = self._validate(command)
        if error:
            return Return.err(error)

        async with self.uow:
            user = await self.uow.users.get_by_id(target_user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))
            if user.role == UserRole.owner:
                return Return.err(
                    Error("INVALID_TARGET", "Owners already hold every permission")
                )

            permission = await self.uow.permissions.get_or_create(
                command.entity.value, command.action.value
            )
            granted = await self.uow.permissions.grant(target_user_id, permission.id, owner_id)
            if not granted:
                return Return.err(
                    Error("PERMISSION_ALREADY_GRANTED", "User already has this permission")
                )
            await self.uow.commit()

        item = PermissionItem(entity=command.entity.value, action=command.action.value)
        await self._after_change(
            owner_id, target_user_id, ActivityAction.grant_permission, item, device_info
        )
        return Return.ok(item)

    async def revoke(
        self,
        owner_id: UUID,
        target_user_id: UUID,
        command: PermissionCommand,
        device_info: DeviceInfo,
    ) -> Result[PermissionItem]:
        error = self._validate(command)
        if error:
            return Return.err(error)

        async with self.uow:
            permission = await self.uow.permissions.get_by_entity_action(
                command.entity.value, command.action.value
            )
            revoked = permission is not None and await self.uow.permissions.revoke(
                target_user_id, permission.id
            )
            if not revoked:
                return Return.err(
                    Error("PERMISSION_NOT_FOUND", "User does not have this permission")
                )
            await self.uow.commit()

        item = PermissionItem(entity=command.entity.value, action=command.action.value)
        await self._after_change(
            owner_id, target_user_id, ActivityAction.revoke_permission, item, device_info
        )
        return Return.ok(item)

    def _validate(self, command: PermissionCommand):
        if command.entity not in PERMISSION_ENTITIES:
            return Error(
                "INVALID_PERMISSION",
                f"Permissions cannot be granted on {command.entity.value}",
            )
        return None

    async def _after_change(self, owner_id, target_user_id, action, item, device_info):
        await self.permissions.clear_user_permissions_cache(target_user_id)
        await self.activity_log.log_activity(
            user_id=owner_id,
            action=action,
            entity_type=EntityType.staff,
            entity_id=target_user_id,
            changes=item.model_dump(),
            device_info=device_info,
        )
        logger.info(f"{action.value} {item.entity}:{item.action} for user {target_user_id}")
