"""
Student registration: enroll, assign a room and take the booking fee
in one transaction.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from hostel_lifecycle.config.settings import Settings
from hostel_lifecycle.models.base.enums import PaymentPurpose, UserRole
from hostel_lifecycle.models.hostel import User
from hostel_lifecycle.models.payment import Payment
from hostel_lifecycle.models.room import StudentRoomAssignment
from hostel_lifecycle.models.semester import SemesterEnrollment
from hostel_lifecycle.repositories.hostel import HostelRepository, UserRepository
from hostel_lifecycle.repositories.payment import PaymentRepository
from hostel_lifecycle.repositories.room import RoomAssignmentRepository, RoomRepository
from hostel_lifecycle.repositories.semester import EnrollmentRepository, SemesterRepository
from hostel_lifecycle.services.base import BaseService, CacheService
from hostel_lifecycle.services.common.errors import ConflictError, NotFoundError, ValidationError
from hostel_lifecycle.services.common.validation import require_text
from hostel_lifecycle.services.notification import NotificationDispatcher, templates
from hostel_lifecycle.services.payment.payment_service import build_summary_cache, money, summary_cache_key
from hostel_lifecycle.services.room.room_occupancy_service import assign_room
from hostel_lifecycle.services.semester.enrollment_service import upsert_enrollment
from hostel_lifecycle.services.semester.semester_service import require_current_semester

PROFILE_FIELDS = ("phone", "access_number", "course", "guardian_name", "guardian_phone")


@dataclass
class RegistrationResult:
    student: User
    enrollment: SemesterEnrollment
    assignment: StudentRoomAssignment
    payment: Payment
    balance: Decimal


class StudentRegistrationService(BaseService):
    """Registers students into the current semester of a hostel."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: Optional[NotificationDispatcher] = None,
        app_settings: Optional[Settings] = None,
        cache: Optional[CacheService] = None,
    ):
        super().__init__(session_factory, notifier, app_settings)
        self.cache = cache or build_summary_cache(self.settings)

    def register_student(
        self,
        hostel_id: UUID,
        name: str,
        email: str,
        room_id: UUID,
        initial_payment_amount: Decimal,
        registered_by: Optional[UUID] = None,
        currency: Optional[str] = None,
        payment_method: Optional[str] = None,
        now: Optional[datetime] = None,
        **profile: Optional[str],
    ) -> RegistrationResult:
        """
        Register (or re-register) a student.

        Either every write lands or none does: the student row, room
        assignment, enrollment and booking payment share one transaction.

        Raises:
            ValidationError: missing name/email or non-positive booking fee
            ConflictError: no current semester, email owned by another
                role or hostel, or the room is full
            NotFoundError: room not in this hostel
        """
        name = require_text(name, "name")
        email = require_text(email, "email").lower()
        amount = Decimal(initial_payment_amount)
        if amount <= 0:
            raise ValidationError("Initial payment must be greater than zero", field="initial_payment_amount")
        currency = (currency or self.settings.DEFAULT_CURRENCY).upper()
        now = now or datetime.utcnow()
        profile_data = {k: v for k, v in profile.items() if k in PROFILE_FIELDS and v is not None}

        with self.transaction() as uow:
            semester = require_current_semester(uow.get_repo(SemesterRepository), hostel_id)
            users = uow.get_repo(UserRepository)

            student = users.find_by_email(email)
            if student is None:
                student = users.create(
                    {
                        "email": email,
                        "name": name,
                        "role": UserRole.STUDENT,
                        "hostel_id": hostel_id,
                        "is_active": True,
                        **profile_data,
                    }
                )
            elif student.role != UserRole.STUDENT:
                raise ConflictError("Email already used by another account", conflicting_field="email")
            elif student.hostel_id != hostel_id:
                raise ConflictError("Student belongs to a different hostel", conflicting_field="email")
            else:
                users.update(student, {"name": name, **profile_data})

            rooms = uow.get_repo(RoomRepository)
            room = rooms.find_in_hostel(room_id, hostel_id)
            if room is None:
                raise NotFoundError("Room", room_id)

            assignment = assign_room(
                rooms, uow.get_repo(RoomAssignmentRepository), room, student.id, semester.id, now
            )

            enrollments = uow.get_repo(EnrollmentRepository)
            enrollment = upsert_enrollment(enrollments, semester.id, student.id, room.id, now)
            if enrollment.room_id != room.id:
                enrollments.update(enrollment, {"room_id": room.id})

            payments = uow.get_repo(PaymentRepository)
            payment = payments.create(
                {
                    "user_id": student.id,
                    "hostel_id": hostel_id,
                    "semester_id": semester.id,
                    "amount": amount,
                    "currency": currency,
                    "purpose": PaymentPurpose.BOOKING,
                    "payment_method": payment_method,
                    "recorded_by": registered_by,
                    "paid_at": now,
                }
            )
            total_paid = payments.total_paid(student.id, semester.id)
            balance = Decimal(room.price) - total_paid

            hostel = uow.get_repo(HostelRepository).find_by_id(hostel_id)
            notice = {
                "student_name": student.name,
                "hostel_name": hostel.name if hostel else "",
                "semester_name": semester.name,
                "room_number": room.room_number,
                "currency": currency,
                "amount": money(amount),
                "total_paid": money(total_paid),
                "balance": money(max(balance, Decimal("0"))),
            }

        self.cache.delete(summary_cache_key(hostel_id))
        self._logger.info(
            f"Registered student {student.id} in room {room.room_number} for semester {semester.id}",
            extra={"hostel_id": hostel_id, "semester_id": semester.id, "user_id": student.id},
        )

        self._notify(student.email, templates.BOOKING_CONFIRMATION, notice)
        if balance <= 0:
            self._notify(student.email, templates.BALANCE_CLEARED, notice)

        return RegistrationResult(
            student=student,
            enrollment=enrollment,
            assignment=assignment,
            payment=payment,
            balance=balance,
        )
