"""
Database enums for the lifecycle models.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    SUPER_ADMIN = "super_admin"
    HOSTEL_ADMIN = "hostel_admin"
    CUSTODIAN = "custodian"
    STUDENT = "student"


class SemesterStatus(str, enum.Enum):
    """Semester lifecycle status."""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EnrollmentStatus(str, enum.Enum):
    """Semester enrollment status."""
    ACTIVE = "active"
    COMPLETED = "completed"
    DROPPED = "dropped"
    TRANSFERRED = "transferred"

    @property
    def is_terminal(self) -> bool:
        return self is not EnrollmentStatus.ACTIVE


class AssignmentStatus(str, enum.Enum):
    """Student room assignment status."""
    ACTIVE = "active"
    ENDED = "ended"
    CANCELLED = "cancelled"


class RoomStatus(str, enum.Enum):
    """Room operational status."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"


class SubscriptionStatus(str, enum.Enum):
    """Hostel subscription status."""
    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"


class PaymentPurpose(str, enum.Enum):
    """Why a student payment was taken."""
    BOOKING = "booking"
    RENT = "rent"
    OTHER = "other"
