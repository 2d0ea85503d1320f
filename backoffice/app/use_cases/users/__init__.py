"""
User Management Use Cases
"""

from .manage_permissions_use_case import ManagePermissionsUseCase
from .dtos import PermissionCommand, PermissionItem, UserPermissionsResponse

__all__ = [
    "ManagePermissionsUseCase",
    "PermissionCommand",
    "PermissionItem",
    "UserPermissionsResponse",
]
