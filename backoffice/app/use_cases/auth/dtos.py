"""
Authentication Use Case DTOs

Command and Response classes for the auth domain. Serialized camelCase.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from backoffice.domain.base import CamelModel


class UserSummary(CamelModel):
    id: UUID
    email: str
    name: str
    role: str
    avatar_url: Optional[str] = None
    is_new_user: bool = False


class LoginResponse(CamelModel):
    access_token: str
    refresh_token: str
    user: UserSummary


class RefreshTokenResponse(CamelModel):
    access_token: str
    refresh_token: str


class AuthorizationUrlResponse(CamelModel):
    url: str
    state: str


class LogoutResponse(CamelModel):
    session_id: UUID


class LogoutAllResponse(CamelModel):
    sessions_deleted: int


class OwnedStore(CamelModel):
    id: UUID
    name: str


class ProfileResponse(CamelModel):
    id: UUID
    email: str
    name: str
    role: str
    avatar_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    store: Optional[OwnedStore] = None


class SessionInfo(CamelModel):
    id: UUID
    device_id: Optional[str] = None
    user_agent: Optional[str] = None
    ip_address: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    is_current: bool = False


class SessionListResponse(CamelModel):
    sessions: List[SessionInfo]
