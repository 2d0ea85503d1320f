"""
Response envelope shared by every endpoint:
{success, data?, error?: {code, message, details?}, meta?}
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from backoffice.domain.base import CamelModel

T = TypeVar("T")


class ErrorBody(CamelModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None


class PaginationMeta(CamelModel):
    total: Optional[int] = None
    limit: Optional[int] = None
    has_more: bool = False
    next_cursor: Optional[str] = None


class ApiResponse(CamelModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[ErrorBody] = None
    meta: Optional[PaginationMeta] = None


def success(data: Any = None, meta: Optional[PaginationMeta] = None) -> ApiResponse:
    return ApiResponse(success=True, data=data, meta=meta)


def error_content(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    body = ApiResponse(success=False, error=ErrorBody(code=code, message=message, details=details))
    return body.model_dump(mode="json", by_alias=True, exclude_none=True)
