from hostel_lifecycle.repositories.base import BaseRepository
from hostel_lifecycle.repositories.hostel import HostelRepository, UserRepository
from hostel_lifecycle.repositories.payment import PaymentRepository
from hostel_lifecycle.repositories.room import RoomAssignmentRepository, RoomRepository
from hostel_lifecycle.repositories.semester import (
    EnrollmentRepository,
    GlobalSemesterRepository,
    SemesterRepository,
)
from hostel_lifecycle.repositories.subscription import (
    SubscriptionPlanRepository,
    SubscriptionRepository,
)

__all__ = [
    "BaseRepository",
    "HostelRepository",
    "UserRepository",
    "PaymentRepository",
    "RoomRepository",
    "RoomAssignmentRepository",
    "GlobalSemesterRepository",
    "SemesterRepository",
    "EnrollmentRepository",
    "SubscriptionPlanRepository",
    "SubscriptionRepository",
]
