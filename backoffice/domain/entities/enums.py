"""
Back Office Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """User role within the back office"""

    owner = "owner"
    staff = "staff"


class EntityType(str, Enum):
    """Entities guarded by staff permissions and tracked by the activity log"""

    store = "store"
    category = "category"
    product = "product"
    staff = "staff"
    user = "user"
    session = "session"


class ActionType(str, Enum):
    """Permission actions"""

    create = "create"
    read = "read"
    update = "update"
    delete = "delete"


class ActivityAction(str, Enum):
    """Actions recorded in the activity log"""

    register = "register"
    login = "login"
    logout = "logout"
    logout_all = "logout_all"
    refresh_token = "refresh_token"
    create = "create"
    update = "update"
    delete = "delete"
    grant_permission = "grant_permission"
    revoke_permission = "revoke_permission"
