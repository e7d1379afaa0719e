"""
Service-layer exceptions.

These exceptions are raised by service methods and are translated
into structured HTTP responses by the API layer.
"""
from __future__ import annotations

from typing import Any, Optional
from uuid import UUID


class ServiceError(Exception):
    """Base exception for all service-layer errors."""

    error_code = "SERVICE_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.error_code, "message": self.message, "details": self.details}


class ValidationError(ServiceError):
    """Raised when input is malformed, e.g. an end date before the start date."""

    error_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = dict(details or {})
        if field:
            details.setdefault("field", field)
        super().__init__(message, details)
        self.field = field


class NotFoundError(ServiceError):
    """Raised when a referenced resource does not exist."""

    error_code = "NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        identifier: UUID | str | int | None = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        if identifier is None:
            message = f"{resource_type} not found"
        else:
            message = f"{resource_type} with identifier '{identifier}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.identifier = identifier


class ConflictError(ServiceError):
    """Raised when an operation conflicts with current state."""

    error_code = "CONFLICT"

    def __init__(
        self,
        message: str,
        conflicting_field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.conflicting_field = conflicting_field


class CapacityExceededError(ConflictError):
    """Raised when a room already holds as many active occupants as its capacity."""

    error_code = "CAPACITY_EXCEEDED"

    def __init__(self, room_id: UUID, capacity: int, occupants: int) -> None:
        super().__init__(
            "This room is already at full capacity",
            conflicting_field="room_id",
            details={"room_id": str(room_id), "capacity": capacity, "occupants": occupants},
        )
        self.room_id = room_id
        self.capacity = capacity
        self.occupants = occupants


class StoreError(ServiceError):
    """Raised when the database transaction or connection fails."""

    error_code = "STORE_ERROR"

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        details = {"error_type": type(original_error).__name__} if original_error else {}
        super().__init__(message, details)
        self.original_error = original_error
