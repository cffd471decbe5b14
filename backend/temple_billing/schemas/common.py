"""
Temple Billing - Common schemas
Response envelope and shared types
"""

from typing import Any, Generic, TypeVar, Optional

from pydantic import BaseModel, Field


T = TypeVar("T")


class ResponseMeta(BaseModel):
    """Response meta"""
    total: Optional[int] = None
    page: Optional[int] = None
    page_size: Optional[int] = None
    has_next: Optional[bool] = None


class SuccessResponse(BaseModel, Generic[T]):
    """Success envelope"""
    data: T
    meta: Optional[ResponseMeta] = None


class ErrorDetail(BaseModel):
    """Error detail"""
    code: str = Field(..., description="error code")
    message: str = Field(..., description="human readable reason")
    details: Optional[dict[str, Any]] = Field(None, description="extra details")


class ErrorResponse(BaseModel):
    """Error envelope"""
    error: ErrorDetail


class MessageResponse(BaseModel):
    message: str
