"""
Back Office Error Taxonomy

Typed errors raised by services and dependencies. The API layer maps each
one to the response envelope using its code and status_code.
"""

from typing import Any, Dict, Optional


class AppError(Exception):
    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(AppError):
    code = "VALIDATION_ERROR"
    status_code = 400


class AuthenticationError(AppError):
    code = "AUTHENTICATION_ERROR"
    status_code = 401

    def __init__(self, message: str = "Authentication required", details=None):
        super().__init__(message, details)


class AuthorizationError(AppError):
    code = "AUTHORIZATION_ERROR"
    status_code = 403

    def __init__(self, message: str = "Insufficient permissions", details=None):
        super().__init__(message, details)


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, identifier: Optional[str] = None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id {identifier} not found"
        super().__init__(message)


class ConflictError(AppError):
    code = "CONFLICT"
    status_code = 409


class RateLimitExceeded(AppError):
    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429

    def __init__(
        self,
        message: str = "Too many requests, please try again later",
        headers: Optional[Dict[str, str]] = None,
    ):
        self.headers = headers or {}
        super().__init__(message)
