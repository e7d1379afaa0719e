"""
Room and room assignment repositories.

Occupancy is always recomputed from the assignment table so that
capacity checks read committed state inside the caller's transaction.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, func, select, update

from hostel_lifecycle.models.base.enums import AssignmentStatus, RoomStatus
from hostel_lifecycle.models.room import Room, StudentRoomAssignment
from hostel_lifecycle.repositories.base.base_repository import BaseRepository


class RoomRepository(BaseRepository[Room]):
    """Repository for rooms."""

    model = Room

    def find_in_hostel(self, room_id: UUID, hostel_id: UUID) -> Optional[Room]:
        query = select(Room).where(Room.id == room_id, Room.hostel_id == hostel_id)
        return self.session.execute(query).scalar_one_or_none()

    def find_by_number(self, hostel_id: UUID, room_number: str) -> Optional[Room]:
        query = select(Room).where(Room.hostel_id == hostel_id, Room.room_number == room_number)
        return self.session.execute(query).scalar_one_or_none()

    def count_for_hostel(self, hostel_id: UUID) -> int:
        query = select(func.count(Room.id)).where(Room.hostel_id == hostel_id)
        return self.session.execute(query).scalar_one()

    def count_active_occupants(self, room_id: UUID) -> int:
        query = select(func.count(StudentRoomAssignment.id)).where(
            StudentRoomAssignment.room_id == room_id,
            StudentRoomAssignment.status == AssignmentStatus.ACTIVE,
        )
        return self.session.execute(query).scalar_one()

    def list_with_occupancy(self, hostel_id: UUID) -> List[Tuple[Room, int]]:
        """Rooms of a hostel paired with their active occupant count."""
        occupants = (
            select(
                StudentRoomAssignment.room_id.label("room_id"),
                func.count(StudentRoomAssignment.id).label("occupants"),
            )
            .where(StudentRoomAssignment.status == AssignmentStatus.ACTIVE)
            .group_by(StudentRoomAssignment.room_id)
            .subquery()
        )
        query = (
            select(Room, func.coalesce(occupants.c.occupants, 0))
            .outerjoin(occupants, occupants.c.room_id == Room.id)
            .where(Room.hostel_id == hostel_id)
            .order_by(Room.room_number)
        )
        return [(room, int(count)) for room, count in self.session.execute(query).all()]

    def list_available(self, hostel_id: UUID) -> List[Tuple[Room, int]]:
        return [
            (room, count)
            for room, count in self.list_with_occupancy(hostel_id)
            if room.status == RoomStatus.AVAILABLE and count < room.capacity
        ]


class RoomAssignmentRepository(BaseRepository[StudentRoomAssignment]):
    """Repository for student room assignments."""

    model = StudentRoomAssignment

    def find_active_for_user(
        self, user_id: UUID, semester_id: Optional[UUID] = None
    ) -> Optional[StudentRoomAssignment]:
        conditions = [
            StudentRoomAssignment.user_id == user_id,
            StudentRoomAssignment.status == AssignmentStatus.ACTIVE,
        ]
        if semester_id is not None:
            conditions.append(StudentRoomAssignment.semester_id == semester_id)
        query = (
            select(StudentRoomAssignment)
            .where(and_(*conditions))
            .order_by(StudentRoomAssignment.assigned_at.desc())
            .limit(1)
        )
        return self.session.execute(query).scalar_one_or_none()

    def list_active_for_semester(self, semester_id: UUID) -> List[StudentRoomAssignment]:
        query = select(StudentRoomAssignment).where(
            StudentRoomAssignment.semester_id == semester_id,
            StudentRoomAssignment.status == AssignmentStatus.ACTIVE,
        )
        return list(self.session.execute(query).scalars().all())

    def count_occupied_rooms(self, semester_id: UUID) -> int:
        query = select(func.count(func.distinct(StudentRoomAssignment.room_id))).where(
            StudentRoomAssignment.semester_id == semester_id,
            StudentRoomAssignment.status == AssignmentStatus.ACTIVE,
        )
        return self.session.execute(query).scalar_one()

    def end_for_users_in_semester(
        self, semester_id: UUID, user_ids: List[UUID], ended_at: datetime
    ) -> int:
        """Close the active assignments of the given students in one semester."""
        if not user_ids:
            return 0
        result = self.session.execute(
            update(StudentRoomAssignment)
            .where(
                StudentRoomAssignment.semester_id == semester_id,
                StudentRoomAssignment.user_id.in_(user_ids),
                StudentRoomAssignment.status == AssignmentStatus.ACTIVE,
            )
            .values(status=AssignmentStatus.ENDED, ended_at=ended_at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def end_all_for_user(self, user_id: UUID, ended_at: datetime) -> int:
        result = self.session.execute(
            update(StudentRoomAssignment)
            .where(
                StudentRoomAssignment.user_id == user_id,
                StudentRoomAssignment.status == AssignmentStatus.ACTIVE,
            )
            .values(status=AssignmentStatus.ENDED, ended_at=ended_at)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    def detach_semester(self, semester_id: UUID) -> None:
        self.session.execute(
            update(StudentRoomAssignment)
            .where(StudentRoomAssignment.semester_id == semester_id)
            .values(semester_id=None)
            .execution_options(synchronize_session="fetch")
        )

    def active_by_user(self, user_ids: List[UUID]) -> Dict[UUID, StudentRoomAssignment]:
        """Latest active assignment per student."""
        if not user_ids:
            return {}
        query = (
            select(StudentRoomAssignment)
            .where(
                StudentRoomAssignment.user_id.in_(user_ids),
                StudentRoomAssignment.status == AssignmentStatus.ACTIVE,
            )
            .order_by(StudentRoomAssignment.assigned_at)
        )
        return {a.user_id: a for a in self.session.execute(query).scalars().all()}
