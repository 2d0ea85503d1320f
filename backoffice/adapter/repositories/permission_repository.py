from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from backoffice.app.repositories.permission_repository import IPermissionRepository
from backoffice.domain.entities import Permission, UserPermission


class PermissionRepository(IPermissionRepository):
    """Permission repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_entity_action(self, entity: str, action: str) -> Optional[Permission]:
        stmt = select(Permission).where(
            Permission.entity == entity, Permission.action == action
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_or_create(self, entity: str, action: str) -> Permission:
        permission = await self.get_by_entity_action(entity, action)
        if permission is not None:
            return permission
        permission = Permission(entity=entity, action=action)
        self.session.add(permission)
        await self.session.flush()
        await self.session.refresh(permission)
        return permission

    async def user_has_permission(self, user_id: UUID, entity: str, action: str) -> bool:
        stmt = (
            select(UserPermission.permission_id)
            .join(Permission, Permission.id == UserPermission.permission_id)
            .where(
                UserPermission.user_id == user_id,
                Permission.entity == entity,
                Permission.action == action,
            )
            .limit(1)
        )
        result = await self.session.exec(stmt)
        return result.first() is not None

    async def list_for_user(self, user_id: UUID) -> List[Permission]:
        stmt = (
            select(Permission)
            .join(UserPermission, UserPermission.permission_id == Permission.id)
            .where(UserPermission.user_id == user_id)
            .order_by(Permission.entity, Permission.action)
        )
        result = await self.session.exec(stmt)
        return list(result.all())

    async def grant(self, user_id: UUID, permission_id: UUID, granted_by: UUID) -> bool:
        stmt = select(UserPermission).where(
            UserPermission.user_id == user_id,
            UserPermission.permission_id == permission_id,
        )
        existing = (await self.session.exec(stmt)).one_or_none()
        if existing is not None:
            return False
        self.session.add(
            UserPermission(user_id=user_id, permission_id=permission_id, granted_by=granted_by)
        )
        await self.session.flush()
        return True

    async def revoke(self, user_id: UUID, permission_id: UUID) -> bool:
        stmt = delete(UserPermission).where(
            UserPermission.user_id == user_id,
            UserPermission.permission_id == permission_id,
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0
