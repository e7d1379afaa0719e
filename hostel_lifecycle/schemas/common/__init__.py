from hostel_lifecycle.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
    TimestampMixin,
)
from hostel_lifecycle.schemas.common.response import ErrorBody, ErrorResponse, SuccessResponse

__all__ = [
    "BaseSchema",
    "TimestampMixin",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseResponseSchema",
    "SuccessResponse",
    "ErrorBody",
    "ErrorResponse",
]
