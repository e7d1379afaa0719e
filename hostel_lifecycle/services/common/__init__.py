from hostel_lifecycle.services.common.errors import (
    CapacityExceededError,
    ConflictError,
    NotFoundError,
    ServiceError,
    StoreError,
    ValidationError,
)
from hostel_lifecycle.services.common.unit_of_work import UnitOfWork

__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "CapacityExceededError",
    "StoreError",
    "UnitOfWork",
]
