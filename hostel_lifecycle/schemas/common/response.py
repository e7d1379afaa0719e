"""
Standard API response envelopes.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import Field

from hostel_lifecycle.schemas.common.base import BaseSchema

T = TypeVar("T")

__all__ = ["SuccessResponse", "ErrorBody", "ErrorResponse"]


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success response."""

    success: bool = Field(default=True, description="Success flag")
    data: Optional[T] = Field(default=None, description="Response data")

    @classmethod
    def create(cls, data: Optional[T] = None) -> "SuccessResponse[T]":
        return cls(success=True, data=data)


class ErrorBody(BaseSchema):
    code: str = Field(..., description="Application error code")
    message: str = Field(..., description="Error message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Structured error context")


class ErrorResponse(BaseSchema):
    """Standard error response."""

    success: bool = Field(default=False, description="Success flag")
    error: ErrorBody
