from hostel_lifecycle.models.room.room import (
    MAX_CAPACITY,
    MIN_CAPACITY,
    Room,
    StudentRoomAssignment,
)

__all__ = ["Room", "StudentRoomAssignment", "MIN_CAPACITY", "MAX_CAPACITY"]
