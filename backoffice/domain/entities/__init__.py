"""
Back Office Domain Entities

All domain entities organized by model.
Each entity in its own file.
"""

from .enums import (
    UserRole,
    EntityType,
    ActionType,
    ActivityAction,
)

from .user import User
from .session import Session
from .store import Store
from .activity_log import ActivityLog
from .permission import Permission, UserPermission

__all__ = [
    # Enums
    "UserRole",
    "EntityType",
    "ActionType",
    "ActivityAction",
    # Entities
    "User",
    "Session",
    "Store",
    "ActivityLog",
    "Permission",
    "UserPermission",
]
