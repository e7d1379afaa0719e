"""
Room occupancy rules.

Occupancy is the number of active assignments and is recomputed inside
the same transaction as every write that depends on it.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from hostel_lifecycle.models.base.enums import AssignmentStatus, RoomStatus
from hostel_lifecycle.models.room import MAX_CAPACITY, MIN_CAPACITY, Room, StudentRoomAssignment
from hostel_lifecycle.repositories.hostel import HostelRepository, UserRepository
from hostel_lifecycle.repositories.room import RoomAssignmentRepository, RoomRepository
from hostel_lifecycle.repositories.semester import SemesterRepository
from hostel_lifecycle.services.base import BaseService
from hostel_lifecycle.services.common.errors import (
    CapacityExceededError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from hostel_lifecycle.services.common.validation import coerce_enum, require_text


def normalize_capacity(capacity: Optional[int], fallback: Optional[int] = MIN_CAPACITY) -> Optional[int]:
    """Capacities outside 1..4 fall back (to 1 on create, to unchanged on update)."""
    if capacity is not None and MIN_CAPACITY <= capacity <= MAX_CAPACITY:
        return capacity
    return fallback


def assign_room(
    rooms: RoomRepository,
    assignments: RoomAssignmentRepository,
    room: Room,
    user_id: UUID,
    semester_id: Optional[UUID],
    now: datetime,
) -> StudentRoomAssignment:
    """
    Give a student an active assignment to ``room`` within the caller's transaction.

    An existing active assignment of the student in the same semester is
    moved to the new room. Single-occupancy rooms that were available
    become occupied.

    The room row stays locked until the caller commits, so concurrent
    assignments to it are counted one after another.

    Raises:
        CapacityExceededError: the room is already full
    """
    room = rooms.find_by_id_for_update(room.id) or room
    current = assignments.find_active_for_user(user_id, semester_id)
    if current is not None and current.room_id == room.id:
        return current

    occupants = rooms.count_active_occupants(room.id)
    if occupants >= room.capacity:
        raise CapacityExceededError(room.id, room.capacity, occupants)

    if current is not None:
        assignment = assignments.update(current, {"room_id": room.id, "assigned_at": now})
    else:
        assignment = assignments.create(
            {
                "user_id": user_id,
                "room_id": room.id,
                "semester_id": semester_id,
                "status": AssignmentStatus.ACTIVE,
                "assigned_at": now,
            }
        )

    if room.capacity == 1 and room.status == RoomStatus.AVAILABLE:
        rooms.update(room, {"status": RoomStatus.OCCUPIED})
    return assignment


@dataclass
class RoomAvailability:
    room: Room
    current_occupants: int

    @property
    def available_spaces(self) -> int:
        return max(self.room.capacity - self.current_occupants, 0)


class RoomOccupancyService(BaseService):
    """Room administration guarded by occupancy rules."""

    def create_room(
        self,
        hostel_id: UUID,
        room_number: str,
        price: Decimal,
        capacity: Optional[int] = None,
        room_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Room:
        room_number = require_text(room_number, "room_number")
        price = Decimal(price)
        if price < 0:
            raise ValidationError("Price cannot be negative", field="price")

        with self.transaction() as uow:
            if uow.get_repo(HostelRepository).find_by_id(hostel_id) is None:
                raise NotFoundError("Hostel", hostel_id)
            rooms = uow.get_repo(RoomRepository)
            if rooms.find_by_number(hostel_id, room_number) is not None:
                raise ConflictError(f"Room {room_number} already exists", conflicting_field="room_number")
            return rooms.create(
                {
                    "hostel_id": hostel_id,
                    "room_number": room_number,
                    "price": price,
                    "capacity": normalize_capacity(capacity),
                    "room_type": room_type,
                    "description": description,
                    "status": RoomStatus.AVAILABLE,
                }
            )

    def update_room(self, room_id: UUID, hostel_id: UUID, **changes: Any) -> Room:
        """
        Update room attributes.

        Raises:
            ConflictError: capacity below the active occupants, or status
                ``available`` requested while the room is full
        """
        with self.transaction() as uow:
            rooms = uow.get_repo(RoomRepository)
            room = rooms.find_in_hostel(room_id, hostel_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            room = rooms.find_by_id_for_update(room.id) or room

            data: Dict[str, Any] = {}
            for key in ("room_number", "room_type", "description"):
                if changes.get(key) is not None:
                    data[key] = changes[key]
            if changes.get("price") is not None:
                data["price"] = Decimal(changes["price"])
            capacity = normalize_capacity(changes.get("capacity"), fallback=None)
            if capacity is not None:
                data["capacity"] = capacity
            if changes.get("status") is not None:
                data["status"] = coerce_enum(RoomStatus, changes["status"], "status")

            occupants = rooms.count_active_occupants(room.id)
            if capacity is not None and capacity < occupants:
                raise ConflictError(
                    f"Cannot reduce capacity to {capacity} while {occupants} students are assigned",
                    conflicting_field="capacity",
                    details={"occupants": occupants},
                )
            if data.get("status") == RoomStatus.AVAILABLE:
                if occupants >= data.get("capacity", room.capacity):
                    raise ConflictError(
                        "Cannot mark room as available while it has active students at full capacity",
                        conflicting_field="status",
                        details={"occupants": occupants},
                    )

            return rooms.update(room, data)

    def delete_room(self, room_id: UUID, hostel_id: UUID) -> None:
        with self.transaction() as uow:
            rooms = uow.get_repo(RoomRepository)
            room = rooms.find_in_hostel(room_id, hostel_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            if rooms.count_active_occupants(room_id) > 0:
                raise ConflictError(
                    "Cannot delete room with an active student assignment",
                    conflicting_field="room_id",
                )
            rooms.delete(room)
        self._logger.info(f"Deleted room {room_id}", extra={"hostel_id": hostel_id})

    def list_rooms(self, hostel_id: UUID) -> List[RoomAvailability]:
        with self.transaction() as uow:
            return [
                RoomAvailability(room, count)
                for room, count in uow.get_repo(RoomRepository).list_with_occupancy(hostel_id)
            ]

    def list_available(self, hostel_id: UUID) -> List[RoomAvailability]:
        """Rooms in ``available`` status with at least one free space."""
        with self.transaction() as uow:
            return [
                RoomAvailability(room, count)
                for room, count in uow.get_repo(RoomRepository).list_available(hostel_id)
            ]

    def assign(
        self,
        user_id: UUID,
        room_id: UUID,
        hostel_id: UUID,
        semester_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> StudentRoomAssignment:
        """Assign or move a student to a room, defaulting to the current semester."""
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            rooms = uow.get_repo(RoomRepository)
            room = rooms.find_in_hostel(room_id, hostel_id)
            if room is None:
                raise NotFoundError("Room", room_id)
            if uow.get_repo(UserRepository).find_student_in_hostel(user_id, hostel_id) is None:
                raise NotFoundError("Student", user_id)
            if semester_id is None:
                current = uow.get_repo(SemesterRepository).find_current(hostel_id)
                semester_id = current.id if current else None

            assignment = assign_room(
                rooms, uow.get_repo(RoomAssignmentRepository), room, user_id, semester_id, now
            )

        self._logger.info(
            f"Assigned user {user_id} to room {room_id}",
            extra={"hostel_id": hostel_id, "user_id": user_id},
        )
        return assignment

    def vacate_student(self, user_id: UUID, now: Optional[datetime] = None) -> int:
        """End every active assignment of a student; returns how many were closed."""
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            closed = uow.get_repo(RoomAssignmentRepository).end_all_for_user(user_id, now)
        self._logger.info(f"Closed {closed} room assignment(s) for user {user_id}")
        return closed
