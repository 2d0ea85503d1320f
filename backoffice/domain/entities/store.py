"""
Store Entity
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Text
from sqlmodel import Column, DateTime, Field, SQLModel

from backoffice.domain.base import utcnow


class Store(SQLModel, table=True):
    """
    Store entity - the online shop run by an owner.

    Business Rules:
    - One store per owner (owner_id unique)
    - Staff may read or update it only with the matching permission
    """

    __tablename__ = "stores"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    owner_id: UUID = Field(foreign_key="users.id", unique=True, index=True)

    name: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    image_url: Optional[str] = Field(default=None)

    tokopedia_url: Optional[str] = Field(default=None)
    tiktok_shop_url: Optional[str] = Field(default=None)
    shopee_url: Optional[str] = Field(default=None)
    toco_url: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
