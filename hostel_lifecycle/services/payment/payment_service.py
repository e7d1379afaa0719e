"""
Payment Service.

Records student payments against the current semester, derives the
outstanding balance from the student's room price and serves a short
lived per-hostel payment summary.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy.orm import Session

from hostel_lifecycle.config.settings import Settings
from hostel_lifecycle.models.base.enums import PaymentPurpose
from hostel_lifecycle.models.payment import Payment
from hostel_lifecycle.repositories.hostel import HostelRepository, UserRepository
from hostel_lifecycle.repositories.payment import PaymentRepository
from hostel_lifecycle.repositories.room import RoomAssignmentRepository, RoomRepository
from hostel_lifecycle.repositories.semester import SemesterRepository
from hostel_lifecycle.services.base import BaseService, CacheService, get_cache_client
from hostel_lifecycle.services.common.errors import NotFoundError, ValidationError
from hostel_lifecycle.services.common.validation import coerce_enum
from hostel_lifecycle.services.notification import NotificationDispatcher, templates
from hostel_lifecycle.services.semester.semester_service import require_current_semester

SUMMARY_NAMESPACE = "payments"


def summary_cache_key(hostel_id: UUID) -> str:
    return f"summary:{hostel_id}"


def build_summary_cache(app_settings: Settings) -> CacheService:
    return CacheService(
        get_cache_client(),
        namespace=SUMMARY_NAMESPACE,
        default_ttl=app_settings.PAYMENT_SUMMARY_TTL_SECONDS,
    )


def money(value: Decimal) -> float:
    return float(Decimal(value).quantize(Decimal("0.01")))


@dataclass
class PaymentResult:
    payment: Payment
    total_paid: Decimal
    expected: Optional[Decimal]
    balance: Optional[Decimal]


class PaymentService(BaseService):
    """Payment recording and summaries."""

    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: Optional[NotificationDispatcher] = None,
        app_settings: Optional[Settings] = None,
        cache: Optional[CacheService] = None,
    ):
        super().__init__(session_factory, notifier, app_settings)
        self.cache = cache or build_summary_cache(self.settings)

    def record_payment(
        self,
        hostel_id: UUID,
        user_id: UUID,
        amount: Decimal,
        currency: Optional[str] = None,
        purpose: Union[str, PaymentPurpose] = PaymentPurpose.RENT,
        payment_method: Optional[str] = None,
        reference: Optional[str] = None,
        recorded_by: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> PaymentResult:
        """
        Record a payment in the current semester.

        Raises:
            ValidationError: non-positive amount or unknown purpose
            ConflictError: the hostel has no current active semester
            NotFoundError: the student does not belong to the hostel
        """
        amount = Decimal(amount)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero", field="amount")
        payment_purpose = coerce_enum(PaymentPurpose, purpose, "purpose")
        currency = (currency or self.settings.DEFAULT_CURRENCY).upper()
        now = now or datetime.utcnow()

        with self.transaction() as uow:
            semester = require_current_semester(uow.get_repo(SemesterRepository), hostel_id)
            student = uow.get_repo(UserRepository).find_student_in_hostel(user_id, hostel_id)
            if student is None:
                raise NotFoundError("Student", user_id)

            payments = uow.get_repo(PaymentRepository)
            payment = payments.create(
                {
                    "user_id": user_id,
                    "hostel_id": hostel_id,
                    "semester_id": semester.id,
                    "amount": amount,
                    "currency": currency,
                    "purpose": payment_purpose,
                    "payment_method": payment_method,
                    "reference": reference,
                    "recorded_by": recorded_by,
                    "paid_at": now,
                }
            )
            total_paid = payments.total_paid(user_id, semester.id)
            expected = self._expected_amount(uow, user_id, semester.id)
            balance = expected - total_paid if expected is not None else None

            hostel = uow.get_repo(HostelRepository).find_by_id(hostel_id)
            notice = {
                "student_name": student.name,
                "hostel_name": hostel.name if hostel else "",
                "semester_name": semester.name,
                "currency": currency,
                "amount": money(amount),
                "total_paid": money(total_paid),
                "balance": money(balance) if balance is not None else "N/A",
            }
            student_email = student.email

        self.cache.delete(summary_cache_key(hostel_id))
        self._logger.info(
            f"Recorded payment {payment.id} of {currency} {amount} for user {user_id}",
            extra={"hostel_id": hostel_id, "user_id": user_id},
        )

        self._notify(student_email, templates.PAYMENT_RECEIPT, notice)
        if balance is not None and balance <= 0:
            self._notify(student_email, templates.BALANCE_CLEARED, notice)

        return PaymentResult(payment=payment, total_paid=total_paid, expected=expected, balance=balance)

    def get_summary(self, hostel_id: UUID, semester_id: Optional[UUID] = None) -> Dict[str, Any]:
        """
        Totals and per-student balances for a hostel.

        Without ``semester_id`` the current semester is used (all payments
        when there is none) and the result is cached briefly per hostel.
        """
        if semester_id is None:
            cached = self.cache.get(summary_cache_key(hostel_id))
            if cached is not None:
                return cached

        with self.transaction() as uow:
            scope_id = semester_id
            if scope_id is None:
                current = uow.get_repo(SemesterRepository).find_current(hostel_id)
                scope_id = current.id if current else None

            paid_by_user = uow.get_repo(PaymentRepository).totals_by_user(hostel_id, scope_id)
            students = uow.get_repo(UserRepository).get_students(hostel_id)
            assignments = uow.get_repo(RoomAssignmentRepository).active_by_user([s.id for s in students])
            rooms = uow.get_repo(RoomRepository)

            rows: List[Dict[str, Any]] = []
            total_outstanding = Decimal("0")
            for student in students:
                paid = paid_by_user.get(student.id, Decimal("0"))
                assignment = assignments.get(student.id)
                room = rooms.find_by_id(assignment.room_id) if assignment else None
                if room is None:
                    expected, balance, status = None, None, "unassigned"
                else:
                    expected = Decimal(room.price)
                    balance = expected - paid
                    if balance <= 0:
                        status = "paid"
                    elif paid > 0:
                        status = "partial"
                    else:
                        status = "unpaid"
                    total_outstanding += max(balance, Decimal("0"))
                rows.append(
                    {
                        "user_id": str(student.id),
                        "name": student.name,
                        "email": student.email,
                        "room_number": room.room_number if room else None,
                        "expected": money(expected) if expected is not None else None,
                        "paid": money(paid),
                        "balance": money(balance) if balance is not None else None,
                        "status": status,
                    }
                )

        summary = {
            "hostel_id": str(hostel_id),
            "semester_id": str(scope_id) if scope_id else None,
            "total_collected": money(sum(paid_by_user.values(), Decimal("0"))),
            "total_outstanding": money(total_outstanding),
            "students": rows,
        }
        if semester_id is None:
            self.cache.set(summary_cache_key(hostel_id), summary)
        return summary

    @staticmethod
    def _expected_amount(uow, user_id: UUID, semester_id: UUID) -> Optional[Decimal]:
        assignments = uow.get_repo(RoomAssignmentRepository)
        assignment = assignments.find_active_for_user(user_id, semester_id) or assignments.find_active_for_user(user_id)
        if assignment is None:
            return None
        room = uow.get_repo(RoomRepository).find_by_id(assignment.room_id)
        return Decimal(room.price) if room else None
