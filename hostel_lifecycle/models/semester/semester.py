"""
Semester Models.

``GlobalSemester`` is a dateless naming template; ``Semester`` is a
hostel-scoped academic term; ``SemesterEnrollment`` joins students to
a semester.
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hostel_lifecycle.models.base.base_model import TimestampModel
from hostel_lifecycle.models.base.enums import EnrollmentStatus, SemesterStatus
from hostel_lifecycle.models.base.mixins import UUIDMixin, enum_column

__all__ = ["GlobalSemester", "Semester", "SemesterEnrollment"]


class GlobalSemester(UUIDMixin, TimestampModel):
    """Reusable semester naming template managed by the super admin."""

    __tablename__ = "global_semesters"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Semester(UUIDMixin, TimestampModel):
    """
    Academic term belonging to one hostel.

    At most one semester per hostel carries ``is_current``; the flag is
    maintained by the semester service inside a single transaction.
    """

    __tablename__ = "semesters"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_semesters_end_after_start"),
        Index("ix_semesters_hostel_current", "hostel_id", "is_current"),
        Index("ix_semesters_status_end_date", "status", "end_date"),
    )

    hostel_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    global_semester_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("global_semesters.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_current: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[SemesterStatus] = mapped_column(
        enum_column(SemesterStatus, "semester_status"),
        nullable=False,
        default=SemesterStatus.UPCOMING,
    )

    enrollments: Mapped[List["SemesterEnrollment"]] = relationship(
        back_populates="semester",
        cascade="all, delete-orphan",
    )

    def days_until_start(self, today: date) -> int:
        return (self.start_date - today).days

    def has_ended(self, today: date) -> bool:
        return self.end_date < today


class SemesterEnrollment(UUIDMixin, TimestampModel):
    """A student's membership in a semester."""

    __tablename__ = "semester_enrollments"
    __table_args__ = (
        UniqueConstraint("semester_id", "user_id", name="uq_enrollment_semester_user"),
        Index("ix_enrollments_semester_status", "semester_id", "enrollment_status"),
    )

    semester_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("semesters.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    room_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("rooms.id", ondelete="SET NULL"),
        nullable=True,
    )
    enrollment_status: Mapped[EnrollmentStatus] = mapped_column(
        enum_column(EnrollmentStatus, "enrollment_status"),
        nullable=False,
        default=EnrollmentStatus.ACTIVE,
    )
    enrollment_date: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=datetime.utcnow
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(), nullable=True)

    semester: Mapped["Semester"] = relationship(back_populates="enrollments")
