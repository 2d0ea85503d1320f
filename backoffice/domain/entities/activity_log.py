"""
Activity Log Entity

Append-only record of who did what to which entity.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from backoffice.domain.base import utcnow


class ActivityLog(SQLModel, table=True):
    __tablename__ = "activity_logs"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    action: str = Field(max_length=50)
    entity_type: str = Field(max_length=50)
    entity_id: Optional[UUID] = Field(default=None)

    changes: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    ip_address: Optional[str] = Field(default=None, max_length=50)
    user_agent: Optional[str] = Field(default=None, sa_column=Column(Text))
    device_info: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_activity_created_at", "created_at"),
        Index("idx_activity_entity", "entity_type", "entity_id"),
    )
