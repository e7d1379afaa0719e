"""
Unit tests for EnrollmentService
"""
from uuid import uuid4

import pytest

from hostel_lifecycle.models import SemesterEnrollment
from hostel_lifecycle.models.base.enums import EnrollmentStatus
from hostel_lifecycle.services.common.errors import ConflictError, NotFoundError, ValidationError
from hostel_lifecycle.services.semester import EnrollmentService

from tests.conftest import NOW


@pytest.fixture
def service(session_factory, notifier, app_settings):
    return EnrollmentService(session_factory, notifier, app_settings)


class TestEnroll:
    """Test enroll/upsert behaviour"""

    def test_enroll_twice_keeps_one_active_row(self, service, build):
        """Enrolling the same pair twice is idempotent"""
        hostel = build.hostel()
        semester = build.semester(hostel)
        room = build.room(hostel)
        student = build.user(hostel)

        first = service.enroll(semester.id, student.id, room.id, now=NOW)
        second = service.enroll(semester.id, student.id, room.id, now=NOW)

        rows = build.all(SemesterEnrollment, semester_id=semester.id, user_id=student.id)
        assert len(rows) == 1
        assert first.id == second.id
        assert rows[0].enrollment_status == EnrollmentStatus.ACTIVE

    def test_enroll_reactivates_dropped_pairing(self, service, build):
        hostel = build.hostel()
        semester = build.semester(hostel)
        student = build.user(hostel)
        dropped = build.enrollment(semester, student, status=EnrollmentStatus.DROPPED)

        result = service.enroll(semester.id, student.id)

        assert result.id == dropped.id
        assert build.get(SemesterEnrollment, dropped.id).enrollment_status == EnrollmentStatus.ACTIVE

    def test_enroll_unknown_semester(self, service, build):
        student = build.user(build.hostel())
        with pytest.raises(NotFoundError):
            service.enroll(uuid4(), student.id)

    def test_enroll_unknown_room(self, service, build):
        hostel = build.hostel()
        semester = build.semester(hostel)
        with pytest.raises(NotFoundError):
            service.enroll(semester.id, build.user(hostel).id, uuid4())

    def test_enroll_student_of_other_hostel(self, service, build):
        hostel = build.hostel()
        semester = build.semester(hostel)
        outsider = build.user(build.hostel())

        with pytest.raises(NotFoundError):
            service.enroll(semester.id, outsider.id)

        assert build.all(SemesterEnrollment) == []

    def test_enroll_room_of_other_hostel(self, service, build):
        hostel = build.hostel()
        semester = build.semester(hostel)
        foreign_room = build.room(build.hostel())

        with pytest.raises(NotFoundError):
            service.enroll(semester.id, build.user(hostel).id, foreign_room.id)

    def test_enroll_into_semester_of_other_hostel(self, service, build):
        hostel = build.hostel()
        semester = build.semester(hostel)
        with pytest.raises(NotFoundError):
            service.enroll(semester.id, build.user(hostel).id, hostel_id=build.hostel().id)


class TestStatusChanges:
    """Test drop and direct status transitions"""

    def test_drop_stamps_completed_at(self, service, build):
        hostel = build.hostel()
        enrollment = build.enrollment(build.semester(hostel), build.user(hostel))

        dropped = service.drop(enrollment.id, now=NOW)

        assert dropped.enrollment_status == EnrollmentStatus.DROPPED
        assert dropped.completed_at == NOW

    def test_reactivating_does_not_clear_completed_at(self, service, build):
        """Non-terminal transitions clear nothing"""
        hostel = build.hostel()
        enrollment = build.enrollment(build.semester(hostel), build.user(hostel))
        service.update_status(enrollment.id, "completed", now=NOW)

        result = service.update_status(enrollment.id, EnrollmentStatus.ACTIVE)

        assert result.enrollment_status == EnrollmentStatus.ACTIVE
        assert result.completed_at == NOW

    def test_invalid_status(self, service, build):
        hostel = build.hostel()
        enrollment = build.enrollment(build.semester(hostel), build.user(hostel))
        with pytest.raises(ValidationError):
            service.update_status(enrollment.id, "graduated")

    def test_unknown_enrollment(self, service):
        with pytest.raises(NotFoundError):
            service.drop(uuid4())


class TestTransfer:
    """Test moving an enrollment to another semester"""

    def test_transfer_round_trip(self, service, build):
        """Source becomes transferred; one new active enrollment with same user and room"""
        hostel = build.hostel()
        source_semester = build.semester(hostel)
        target_semester = build.semester(hostel)
        room = build.room(hostel)
        student = build.user(hostel)
        source = build.enrollment(source_semester, student, room)

        target = service.transfer(source.id, target_semester.id, now=NOW)

        stored_source = build.get(SemesterEnrollment, source.id)
        assert stored_source.enrollment_status == EnrollmentStatus.TRANSFERRED
        assert stored_source.completed_at == NOW
        new_rows = build.all(SemesterEnrollment, semester_id=target_semester.id)
        assert [r.id for r in new_rows] == [target.id]
        assert target.enrollment_status == EnrollmentStatus.ACTIVE
        assert (target.user_id, target.room_id) == (student.id, room.id)

    def test_transfer_unknown_source(self, service, build):
        target_semester = build.semester(build.hostel())
        with pytest.raises(NotFoundError):
            service.transfer(uuid4(), target_semester.id)

    def test_transfer_unknown_target_rolls_back(self, service, build):
        hostel = build.hostel()
        source = build.enrollment(build.semester(hostel), build.user(hostel))

        with pytest.raises(NotFoundError):
            service.transfer(source.id, uuid4())

        assert build.get(SemesterEnrollment, source.id).enrollment_status == EnrollmentStatus.ACTIVE

    def test_transfer_into_existing_pairing(self, service, build):
        hostel = build.hostel()
        student = build.user(hostel)
        source_semester, target_semester = build.semester(hostel), build.semester(hostel)
        source = build.enrollment(source_semester, student)
        build.enrollment(target_semester, student)

        with pytest.raises(ConflictError):
            service.transfer(source.id, target_semester.id)
        assert build.get(SemesterEnrollment, source.id).enrollment_status == EnrollmentStatus.ACTIVE

    def test_transfer_into_other_hostel_rolls_back(self, service, build):
        """The target semester must belong to the source enrollment's hostel"""
        hostel = build.hostel()
        source = build.enrollment(build.semester(hostel), build.user(hostel))
        foreign_semester = build.semester(build.hostel())

        with pytest.raises(NotFoundError):
            service.transfer(source.id, foreign_semester.id)

        assert build.get(SemesterEnrollment, source.id).enrollment_status == EnrollmentStatus.ACTIVE
        assert build.all(SemesterEnrollment, semester_id=foreign_semester.id) == []


class TestListing:
    """Test enrollment queries"""

    def test_list_current_for_hostel(self, service, build):
        hostel = build.hostel()
        current = build.semester(hostel, is_current=True)
        other = build.semester(hostel)
        mine = build.enrollment(current, build.user(hostel))
        build.enrollment(other, build.user(hostel))

        assert [e.id for e in service.list_current_for_hostel(hostel.id)] == [mine.id]

    def test_list_current_without_current_semester(self, service, build):
        assert service.list_current_for_hostel(build.hostel().id) == []

    def test_list_for_user(self, service, build):
        hostel = build.hostel()
        student = build.user(hostel)
        build.enrollment(build.semester(hostel), student)
        build.enrollment(build.semester(hostel), student)

        assert len(service.list_for_user(student.id)) == 2
        assert len(service.list_for_semester(uuid4())) == 0


class TestHostelScope:
    """Test that a hostel-confined caller only reaches its own enrollments"""

    def test_drop_of_other_hostel(self, service, build):
        hostel = build.hostel()
        enrollment = build.enrollment(build.semester(hostel), build.user(hostel))

        with pytest.raises(NotFoundError):
            service.drop(enrollment.id, hostel_id=build.hostel().id)

        assert build.get(SemesterEnrollment, enrollment.id).enrollment_status == EnrollmentStatus.ACTIVE

    def test_drop_in_own_hostel(self, service, build):
        hostel = build.hostel()
        enrollment = build.enrollment(build.semester(hostel), build.user(hostel))
        assert service.drop(enrollment.id, hostel_id=hostel.id).enrollment_status == EnrollmentStatus.DROPPED

    def test_get_of_other_hostel(self, service, build):
        hostel = build.hostel()
        enrollment = build.enrollment(build.semester(hostel), build.user(hostel))
        with pytest.raises(NotFoundError):
            service.get(enrollment.id, build.hostel().id)

    def test_transfer_of_other_hostel(self, service, build):
        hostel = build.hostel()
        source = build.enrollment(build.semester(hostel), build.user(hostel))
        with pytest.raises(NotFoundError):
            service.transfer(source.id, build.semester(hostel).id, hostel_id=build.hostel().id)

    def test_list_for_semester_of_other_hostel(self, service, build):
        hostel = build.hostel()
        semester = build.semester(hostel)
        build.enrollment(semester, build.user(hostel))
        with pytest.raises(NotFoundError):
            service.list_for_semester(semester.id, build.hostel().id)

    def test_list_for_user_of_other_hostel(self, service, build):
        hostel = build.hostel()
        student = build.user(hostel)
        build.enrollment(build.semester(hostel), student)

        with pytest.raises(NotFoundError):
            service.list_for_user(student.id, build.hostel().id)
        assert len(service.list_for_user(student.id, hostel.id)) == 1
