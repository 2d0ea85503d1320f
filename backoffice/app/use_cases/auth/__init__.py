"""
Authentication Use Cases

Login, refresh, logout and profile flows.
"""

from .oauth_login_use_case import OAuthLoginUseCase
from .refresh_token_use_case import RefreshTokenUseCase
from .logout_use_case import LogoutUseCase
from .profile_use_case import LoadProfileUseCase, ListSessionsUseCase
from .dtos import (
    AuthorizationUrlResponse,
    LoginResponse,
    LogoutAllResponse,
    LogoutResponse,
    ProfileResponse,
    RefreshTokenResponse,
    SessionInfo,
    SessionListResponse,
    UserSummary,
)

__all__ = [
    # Use Cases
    "OAuthLoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "LoadProfileUseCase",
    "ListSessionsUseCase",
    # DTOs
    "AuthorizationUrlResponse",
    "LoginResponse",
    "LogoutAllResponse",
    "LogoutResponse",
    "ProfileResponse",
    "RefreshTokenResponse",
    "SessionInfo",
    "SessionListResponse",
    "UserSummary",
]
