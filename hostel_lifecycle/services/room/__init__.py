from hostel_lifecycle.services.room.room_occupancy_service import (
    RoomAvailability,
    RoomOccupancyService,
    assign_room,
)

__all__ = ["RoomAvailability", "RoomOccupancyService", "assign_room"]
