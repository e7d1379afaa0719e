"""
Unit tests for PaymentService
"""
from decimal import Decimal
from uuid import uuid4

import pytest

from hostel_lifecycle.models import Payment
from hostel_lifecycle.models.base.enums import PaymentPurpose, SemesterStatus
from hostel_lifecycle.services.common.errors import ConflictError, NotFoundError, ValidationError
from hostel_lifecycle.services.notification import templates
from hostel_lifecycle.services.payment import PaymentService
from hostel_lifecycle.services.payment.payment_service import summary_cache_key

from tests.conftest import NOW


@pytest.fixture
def service(session_factory, notifier, app_settings, cache):
    return PaymentService(session_factory, notifier, app_settings, cache=cache)


@pytest.fixture
def setup(build):
    hostel = build.hostel("Nana Hostel")
    semester = build.semester(hostel, is_current=True)
    room = build.room(hostel, room_number="12", price=Decimal("500000"))
    student = build.user(hostel, email="kato@student.ac.ug", name="Kato")
    build.assignment(student, room, semester)
    return hostel, semester, room, student


class TestRecordPayment:
    """Test recording payments"""

    def test_records_against_current_semester(self, service, build, setup):
        hostel, semester, _, student = setup

        result = service.record_payment(hostel.id, student.id, Decimal("200000"), currency="ugx", now=NOW)

        payment = build.get(Payment, result.payment.id)
        assert payment.semester_id == semester.id
        assert payment.currency == "UGX"
        assert payment.purpose == PaymentPurpose.RENT
        assert result.total_paid == Decimal("200000")
        assert result.expected == Decimal("500000")
        assert result.balance == Decimal("300000")

    def test_receipt_then_balance_cleared(self, service, notifier, setup):
        hostel, _, _, student = setup

        service.record_payment(hostel.id, student.id, Decimal("200000"))
        service.record_payment(hostel.id, student.id, Decimal("300000"))

        kinds = [kind for _, kind, _ in notifier.sent]
        assert kinds == [templates.PAYMENT_RECEIPT, templates.PAYMENT_RECEIPT, templates.BALANCE_CLEARED]
        assert notifier.sent[-1][2]["balance"] == 0.0

    def test_unassigned_student_has_no_balance(self, service, build, notifier, setup):
        hostel, _, _, _ = setup
        loose = build.user(hostel)

        result = service.record_payment(hostel.id, loose.id, Decimal("1000"))

        assert result.expected is None
        assert result.balance is None
        assert notifier.sent[0][2]["balance"] == "N/A"

    def test_requires_current_semester(self, service, build):
        hostel = build.hostel()
        build.semester(hostel, is_current=True, status=SemesterStatus.COMPLETED)
        student = build.user(hostel)
        with pytest.raises(ConflictError):
            service.record_payment(hostel.id, student.id, Decimal("1"))

    def test_student_must_belong_to_hostel(self, service, build, setup):
        hostel, _, _, _ = setup
        outsider = build.user(build.hostel())
        with pytest.raises(NotFoundError):
            service.record_payment(hostel.id, outsider.id, Decimal("1"))

    def test_unknown_student(self, service, setup):
        hostel, _, _, _ = setup
        with pytest.raises(NotFoundError):
            service.record_payment(hostel.id, uuid4(), Decimal("1"))

    def test_non_positive_amount(self, service, setup):
        hostel, _, _, student = setup
        with pytest.raises(ValidationError):
            service.record_payment(hostel.id, student.id, Decimal("0"))

    def test_unknown_purpose(self, service, setup):
        hostel, _, _, student = setup
        with pytest.raises(ValidationError):
            service.record_payment(hostel.id, student.id, Decimal("10"), purpose="tip")


class TestPaymentSummary:
    """Test the per-hostel payment summary"""

    def test_summary_statuses(self, service, build, setup):
        hostel, semester, room, student = setup
        other_room = build.room(hostel, price=Decimal("400000"))
        partial = build.user(hostel, name="Partial")
        unpaid = build.user(hostel, name="Unpaid")
        unassigned = build.user(hostel, name="Unassigned")
        build.assignment(partial, other_room, semester)
        build.assignment(unpaid, other_room, semester)
        build.payment(hostel, student, semester, "500000")
        build.payment(hostel, partial, semester, "100000")
        build.payment(hostel, unassigned, semester, "5000")

        summary = service.get_summary(hostel.id)

        rows = {row["name"]: row for row in summary["students"]}
        assert rows["Kato"]["status"] == "paid"
        assert rows["Partial"]["status"] == "partial"
        assert rows["Partial"]["balance"] == 300000.0
        assert rows["Unpaid"]["status"] == "unpaid"
        assert rows["Unassigned"]["status"] == "unassigned"
        assert rows["Unassigned"]["expected"] is None
        assert summary["total_collected"] == 605000.0
        assert summary["total_outstanding"] == 700000.0
        assert summary["semester_id"] == str(semester.id)

    def test_summary_is_cached_until_a_payment(self, service, build, cache, setup):
        hostel, semester, _, student = setup

        first = service.get_summary(hostel.id)
        build.payment(hostel, student, semester, "100000")
        assert service.get_summary(hostel.id) == first

        service.record_payment(hostel.id, student.id, Decimal("50000"))
        refreshed = service.get_summary(hostel.id)
        assert refreshed["total_collected"] == 150000.0

    def test_semester_filter_bypasses_cache(self, service, build, cache, setup):
        hostel, semester, _, student = setup
        service.get_summary(hostel.id, semester_id=semester.id)
        assert cache.get(summary_cache_key(hostel.id)) is None
