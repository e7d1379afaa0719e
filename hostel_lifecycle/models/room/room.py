"""
Room and room assignment models.

Occupancy is never stored on the room; it is the count of active
``StudentRoomAssignment`` rows.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from hostel_lifecycle.models.base.base_model import TimestampModel
from hostel_lifecycle.models.base.enums import AssignmentStatus, RoomStatus
from hostel_lifecycle.models.base.mixins import UUIDMixin, enum_column

__all__ = ["Room", "StudentRoomAssignment", "MIN_CAPACITY", "MAX_CAPACITY"]

MIN_CAPACITY = 1
MAX_CAPACITY = 4


class Room(UUIDMixin, TimestampModel):
    """Bookable room inside a hostel."""

    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("hostel_id", "room_number", name="uq_rooms_hostel_number"),
        CheckConstraint(
            f"capacity >= {MIN_CAPACITY} AND capacity <= {MAX_CAPACITY}",
            name="ck_rooms_capacity_range",
        ),
        CheckConstraint("price >= 0", name="ck_rooms_price_positive"),
    )

    hostel_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    room_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, comment="Price per semester"
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=MIN_CAPACITY)
    status: Mapped[RoomStatus] = mapped_column(
        enum_column(RoomStatus, "room_status"),
        nullable=False,
        default=RoomStatus.AVAILABLE,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class StudentRoomAssignment(UUIDMixin, TimestampModel):
    """Links a student to a room, optionally scoped to a semester."""

    __tablename__ = "student_room_assignments"
    __table_args__ = (
        Index("ix_assignments_room_status", "room_id", "status"),
        Index("ix_assignments_user_semester", "user_id", "semester_id"),
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    room_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="RESTRICT"),
        nullable=False,
    )
    semester_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("semesters.id", ondelete="SET NULL"),
        nullable=True,
    )
    status: Mapped[AssignmentStatus] = mapped_column(
        enum_column(AssignmentStatus, "assignment_status"),
        nullable=False,
        default=AssignmentStatus.ACTIVE,
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=datetime.utcnow
    )
    ended_at: Mapped[Optional[datetime]] = mapped_column(DateTime(), nullable=True)
