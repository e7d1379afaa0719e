"""
Room and room assignment schemas.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from hostel_lifecycle.models.base.enums import AssignmentStatus, RoomStatus
from hostel_lifecycle.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "RoomCreate",
    "RoomUpdate",
    "RoomResponse",
    "RoomAvailabilityResponse",
    "RoomAssign",
    "AssignmentResponse",
]


class RoomCreate(BaseCreateSchema):
    room_number: str = Field(..., min_length=1, max_length=20)
    price: Decimal = Field(..., ge=0, description="Price per semester")
    capacity: Optional[int] = Field(default=None, description="1-4; other values fall back to 1")
    room_type: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None


class RoomUpdate(BaseUpdateSchema):
    room_number: Optional[str] = Field(default=None, min_length=1, max_length=20)
    price: Optional[Decimal] = Field(default=None, ge=0)
    capacity: Optional[int] = Field(default=None, description="Values outside 1-4 are ignored")
    room_type: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    status: Optional[RoomStatus] = None


class RoomResponse(BaseResponseSchema):
    hostel_id: UUID
    room_number: str
    room_type: Optional[str] = None
    price: Decimal
    capacity: int
    status: RoomStatus
    description: Optional[str] = None


class RoomAvailabilityResponse(BaseSchema):
    room: RoomResponse
    current_occupants: int
    available_spaces: int


class RoomAssign(BaseCreateSchema):
    user_id: UUID
    semester_id: Optional[UUID] = Field(default=None, description="Defaults to the current semester")


class AssignmentResponse(BaseResponseSchema):
    user_id: UUID
    room_id: UUID
    semester_id: Optional[UUID] = None
    status: AssignmentStatus
    assigned_at: datetime
    ended_at: Optional[datetime] = None
