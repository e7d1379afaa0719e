"""
ORM models. Importing this package registers every table on ``Base.metadata``.
"""

from hostel_lifecycle.models.base import Base
from hostel_lifecycle.models.base.enums import (
    AssignmentStatus,
    EnrollmentStatus,
    PaymentPurpose,
    RoomStatus,
    SemesterStatus,
    SubscriptionStatus,
    UserRole,
)
from hostel_lifecycle.models.hostel import Hostel, User
from hostel_lifecycle.models.payment import Payment
from hostel_lifecycle.models.room import Room, StudentRoomAssignment
from hostel_lifecycle.models.semester import GlobalSemester, Semester, SemesterEnrollment
from hostel_lifecycle.models.subscription import HostelSubscription, SubscriptionPlan

__all__ = [
    "Base",
    "AssignmentStatus",
    "EnrollmentStatus",
    "PaymentPurpose",
    "RoomStatus",
    "SemesterStatus",
    "SubscriptionStatus",
    "UserRole",
    "Hostel",
    "User",
    "Payment",
    "Room",
    "StudentRoomAssignment",
    "GlobalSemester",
    "Semester",
    "SemesterEnrollment",
    "HostelSubscription",
    "SubscriptionPlan",
]
