"""
Store Use Cases
"""

from .create_store_use_case import CreateStoreUseCase
from .get_store_use_case import GetStoreUseCase
from .update_store_use_case import UpdateStoreUseCase
from .store_cache import StoreCache
from .dtos import (
    CreateStoreCommand,
    PublicStoreResponse,
    StoreResponse,
    UpdateStoreCommand,
)

__all__ = [
    "CreateStoreUseCase",
    "GetStoreUseCase",
    "UpdateStoreUseCase",
    "StoreCache",
    "CreateStoreCommand",
    "PublicStoreResponse",
    "StoreResponse",
    "UpdateStoreCommand",
]
