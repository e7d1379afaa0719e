from hostel_lifecycle.repositories.room.room_repository import RoomAssignmentRepository, RoomRepository

__all__ = ["RoomRepository", "RoomAssignmentRepository"]
