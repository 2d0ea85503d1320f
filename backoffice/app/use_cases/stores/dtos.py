"""
Store Use Case DTOs
"""

from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from pydantic import Field, HttpUrl, field_validator

from backoffice.domain.base import CamelModel
from backoffice.domain.entities import Store

MARKETPLACE_FIELDS = {
    "tokopedia": "tokopedia_url",
    "tiktok_shop": "tiktok_shop_url",
    "shopee": "shopee_url",
    "toco": "toco_url",
}


class StoreResponse(CamelModel):
    id: UUID
    owner_id: UUID
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    tokopedia_url: Optional[str] = None
    tiktok_shop_url: Optional[str] = None
    shopee_url: Optional[str] = None
    toco_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, store: Store) -> "StoreResponse":
        return cls.model_validate(store.model_dump())


class PublicStoreResponse(CamelModel):
    """What anonymous visitors may see."""

    id: UUID
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    marketplace_links: Dict[str, str] = {}
    created_at: datetime

    @classmethod
    def from_store(cls, store: StoreResponse) -> "PublicStoreResponse":
        links = {}
        for name, field in MARKETPLACE_FIELDS.items():
            url = getattr(store, field)
            if url:
                links[name] = url
        return cls(
            id=store.id,
            name=store.name,
            description=store.description,
            image_url=store.image_url,
            marketplace_links=links,
            created_at=store.created_at,
        )


class CreateStoreCommand(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    tokopedia_url: Optional[HttpUrl] = None
    tiktok_shop_url: Optional[HttpUrl] = None
    shopee_url: Optional[HttpUrl] = None
    toco_url: Optional[HttpUrl] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class UpdateStoreCommand(CamelModel):
    """
    Partial update. Fields left out of the payload are untouched; optional
    fields sent as null are cleared. Only fields in model_fields_set apply.
    """

    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    tokopedia_url: Optional[HttpUrl] = None
    tiktok_shop_url: Optional[HttpUrl] = None
    shopee_url: Optional[HttpUrl] = None
    toco_url: Optional[HttpUrl] = None

    @field_validator("name")
    @classmethod
    def name_not_cleared(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("name cannot be cleared")
        return value.strip()

    def changed_fields(self) -> Dict[str, Optional[str]]:
        values = self.model_dump(include=self.model_fields_set)
        return {k: (str(v) if v is not None else None) for k, v in values.items()}
