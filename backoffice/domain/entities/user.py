"""
User Entity

A person signed in through Google.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from backoffice.domain.base import utcnow
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity.

    Business Rules:
    - Email and google_id are unique across all users
    - The first user ever created is the owner, everyone after is staff
    - Disabled users cannot log in
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    name: str = Field(max_length=255)
    google_id: str = Field(unique=True, index=True, max_length=255)
    avatar_url: Optional[str] = Field(default=None)

    role: UserRole = Field(default=UserRole.staff)
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
