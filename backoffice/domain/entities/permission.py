"""
Permission Entities

Staff permissions are (entity, action) pairs granted per user.
Owners implicitly hold every permission and never get rows here.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Column, DateTime, Field, SQLModel

from backoffice.domain.base import utcnow


class Permission(SQLModel, table=True):
    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    entity: str = Field(max_length=50)
    action: str = Field(max_length=20)

    __table_args__ = (UniqueConstraint("entity", "action", name="uq_permission_entity_action"),)


class UserPermission(SQLModel, table=True):
    __tablename__ = "user_permissions"

    user_id: UUID = Field(foreign_key="users.id", primary_key=True)
    permission_id: UUID = Field(foreign_key="permissions.id", primary_key=True)
    granted_by: UUID = Field(foreign_key="users.id")

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
