"""
Unit tests for the daily semester sweeps

Covers:
1. Ending semesters past their end date (strict boundary)
2. Enrollment completion and room assignment closing
3. Per-semester failure isolation
4. Upcoming semester reminders
"""
from datetime import date, datetime, timedelta

import pytest

from hostel_lifecycle.models import Semester, SemesterEnrollment, StudentRoomAssignment
from hostel_lifecycle.models.base.enums import (
    AssignmentStatus,
    EnrollmentStatus,
    SemesterStatus,
)
from hostel_lifecycle.services.notification import templates
from hostel_lifecycle.services.semester import SemesterLifecycleService

from tests.conftest import NOW, TODAY


@pytest.fixture
def service(session_factory, notifier, app_settings):
    return SemesterLifecycleService(session_factory, notifier, app_settings)


# =============================================================================
# END OF SEMESTER
# =============================================================================
class TestCheckAndEndSemesters:
    """Test the end-of-semester sweep"""

    def test_ends_semester_and_completes_enrollments(self, service, build, notifier):
        """Semester ended yesterday: completed, enrollments completed, assigned room closed"""
        hostel = build.hostel("Makerere Heights")
        semester = build.semester(hostel, end_date=date(2024, 1, 10))
        room = build.room(hostel)
        u1 = build.user(hostel, email="u1@hostel.ac.ug")
        u2 = build.user(hostel, email="u2@hostel.ac.ug")
        e1 = build.enrollment(semester, u1, room)
        e2 = build.enrollment(semester, u2)
        assignment = build.assignment(u1, room, semester)

        report = service.check_and_end_semesters(now=NOW)

        assert report.examined == 1
        assert report.transitioned == 1
        assert report.failed == 0
        assert build.get(Semester, semester.id).status == SemesterStatus.COMPLETED

        for enrollment in (e1, e2):
            stored = build.get(SemesterEnrollment, enrollment.id)
            assert stored.enrollment_status == EnrollmentStatus.COMPLETED
            assert stored.completed_at == NOW

        closed = build.get(StudentRoomAssignment, assignment.id)
        assert closed.status == AssignmentStatus.ENDED
        assert closed.ended_at == NOW
        assert len(build.all(StudentRoomAssignment)) == 1

    def test_notifies_each_completed_student(self, service, build, notifier):
        """One semester_ending notification per student whose enrollment completed"""
        hostel = build.hostel("Makerere Heights")
        semester = build.semester(hostel, name="Semester One", end_date=date(2024, 1, 10))
        u1 = build.user(hostel, email="u1@hostel.ac.ug")
        u2 = build.user(hostel, email="u2@hostel.ac.ug")
        dropped = build.user(hostel, email="dropped@hostel.ac.ug")
        build.enrollment(semester, u1)
        build.enrollment(semester, u2)
        build.enrollment(semester, dropped, status=EnrollmentStatus.DROPPED)

        report = service.check_and_end_semesters(now=NOW)

        assert notifier.recipients(templates.SEMESTER_ENDING) == ["u1@hostel.ac.ug", "u2@hostel.ac.ug"]
        _, _, data = notifier.of_kind(templates.SEMESTER_ENDING)[0]
        assert data["semester_name"] == "Semester One"
        assert data["hostel_name"] == "Makerere Heights"
        assert data["end_date"] == "2024-01-10"
        assert report.notifications_sent == 2

    def test_dropped_enrollment_is_left_alone(self, service, build):
        """Only active enrollments are completed"""
        hostel = build.hostel()
        semester = build.semester(hostel, end_date=date(2024, 1, 10))
        dropped = build.enrollment(semester, build.user(hostel), status=EnrollmentStatus.DROPPED)

        service.check_and_end_semesters(now=NOW)

        stored = build.get(SemesterEnrollment, dropped.id)
        assert stored.enrollment_status == EnrollmentStatus.DROPPED
        assert stored.completed_at is None

    def test_boundary_today_is_not_ended(self, service, build):
        """end_date == today is not ended; end_date == yesterday is"""
        hostel = build.hostel()
        ends_today = build.semester(hostel, end_date=TODAY)
        ended_yesterday = build.semester(hostel, end_date=TODAY - timedelta(days=1))

        service.check_and_end_semesters(now=NOW)

        assert build.get(Semester, ends_today.id).status == SemesterStatus.ACTIVE
        assert build.get(Semester, ended_yesterday.id).status == SemesterStatus.COMPLETED

    def test_only_active_semesters_are_swept(self, service, build):
        """Upcoming and cancelled semesters keep their status"""
        hostel = build.hostel()
        upcoming = build.semester(hostel, status=SemesterStatus.UPCOMING)
        cancelled = build.semester(hostel, status=SemesterStatus.CANCELLED)

        report = service.check_and_end_semesters(now=NOW)

        assert report.examined == 0
        assert build.get(Semester, upcoming.id).status == SemesterStatus.UPCOMING
        assert build.get(Semester, cancelled.id).status == SemesterStatus.CANCELLED

    def test_second_run_is_a_no_op(self, service, build, notifier):
        """Re-running the sweep sends nothing new"""
        hostel = build.hostel()
        semester = build.semester(hostel, end_date=date(2024, 1, 10))
        build.enrollment(semester, build.user(hostel))

        service.check_and_end_semesters(now=NOW)
        sent = len(notifier.sent)
        report = service.check_and_end_semesters(now=NOW)

        assert report.examined == 0
        assert len(notifier.sent) == sent

    def test_assignment_outside_semester_stays_active(self, service, build):
        """Assignments tied to another semester are not closed"""
        hostel = build.hostel()
        ending = build.semester(hostel, end_date=date(2024, 1, 10))
        other = build.semester(hostel, end_date=date(2024, 5, 30))
        room = build.room(hostel)
        student = build.user(hostel)
        build.enrollment(ending, student, room)
        other_assignment = build.assignment(student, room, other)

        service.check_and_end_semesters(now=NOW)

        assert build.get(StudentRoomAssignment, other_assignment.id).status == AssignmentStatus.ACTIVE

    def test_failure_is_isolated_per_semester(self, service, build, monkeypatch):
        """One semester failing rolls back only itself and the sweep continues"""
        hostel = build.hostel()
        bad = build.semester(hostel, end_date=date(2024, 1, 5))
        good = build.semester(hostel, end_date=date(2024, 1, 9))
        bad_enrollment = build.enrollment(bad, build.user(hostel))

        original = SemesterLifecycleService._end_semester

        def flaky(self, semester_id, today, now):
            if semester_id == bad.id:
                raise RuntimeError("database hiccup")
            return original(self, semester_id, today, now)

        monkeypatch.setattr(SemesterLifecycleService, "_end_semester", flaky)

        report = service.check_and_end_semesters(now=NOW)

        assert report.examined == 2
        assert report.failed == 1
        assert report.transitioned == 1
        assert "database hiccup" in report.errors[0]
        assert build.get(Semester, bad.id).status == SemesterStatus.ACTIVE
        assert build.get(SemesterEnrollment, bad_enrollment.id).enrollment_status == EnrollmentStatus.ACTIVE
        assert build.get(Semester, good.id).status == SemesterStatus.COMPLETED

    def test_notification_failure_keeps_transition(self, session_factory, app_settings, build):
        """A failed email is counted but the semester stays completed"""
        from tests.conftest import RecordingNotifier

        failing = RecordingNotifier(fail_for={"u1@hostel.ac.ug"})
        service = SemesterLifecycleService(session_factory, failing, app_settings)
        hostel = build.hostel()
        semester = build.semester(hostel, end_date=date(2024, 1, 10))
        build.enrollment(semester, build.user(hostel, email="u1@hostel.ac.ug"))
        build.enrollment(semester, build.user(hostel, email="u2@hostel.ac.ug"))

        report = service.check_and_end_semesters(now=NOW)

        assert report.notifications_failed == 1
        assert report.notifications_sent == 1
        assert build.get(Semester, semester.id).status == SemesterStatus.COMPLETED

    def test_notifier_exception_is_swallowed(self, session_factory, app_settings, build):
        """A notifier that raises does not abort the sweep"""

        class ExplodingNotifier:
            def notify(self, recipient_email, template_kind, template_data):
                raise ConnectionError("smtp down")

        service = SemesterLifecycleService(session_factory, ExplodingNotifier(), app_settings)
        hostel = build.hostel()
        semester = build.semester(hostel, end_date=date(2024, 1, 10))
        build.enrollment(semester, build.user(hostel))

        report = service.check_and_end_semesters(now=NOW)

        assert report.failed == 0
        assert report.notifications_failed == 1
        assert build.get(Semester, semester.id).status == SemesterStatus.COMPLETED


# =============================================================================
# UPCOMING REMINDERS
# =============================================================================
class TestUpcomingSemesterReminders:
    """Test the upcoming-semester reminder sweep"""

    def test_reminds_active_enrollments_in_window(self, service, build, notifier):
        """Semester starting in 3 days: each active enrollee gets days_until_start=3"""
        hostel = build.hostel("Kikoni Hostel")
        semester = build.semester(
            hostel,
            name="Semester Two",
            start_date=TODAY + timedelta(days=3),
            end_date=TODAY + timedelta(days=120),
            status=SemesterStatus.UPCOMING,
        )
        build.enrollment(semester, build.user(hostel, email="a@hostel.ac.ug"))
        build.enrollment(semester, build.user(hostel, email="b@hostel.ac.ug"))
        build.enrollment(semester, build.user(hostel, email="gone@hostel.ac.ug"), status=EnrollmentStatus.DROPPED)

        report = service.send_upcoming_semester_reminders(now=NOW)

        assert notifier.recipients(templates.SEMESTER_UPCOMING) == ["a@hostel.ac.ug", "b@hostel.ac.ug"]
        _, _, data = notifier.sent[0]
        assert data["days_until_start"] == 3
        assert data["semester_name"] == "Semester Two"
        assert data["hostel_name"] == "Kikoni Hostel"
        assert report.examined == 1
        assert build.get(Semester, semester.id).status == SemesterStatus.UPCOMING

    @pytest.mark.parametrize("offset, expected", [(0, True), (7, True), (8, False), (-1, False)])
    def test_window_is_inclusive(self, service, build, notifier, offset, expected):
        """Window is [today, today + 7]"""
        hostel = build.hostel()
        semester = build.semester(
            hostel,
            start_date=TODAY + timedelta(days=offset),
            end_date=TODAY + timedelta(days=120),
            status=SemesterStatus.UPCOMING,
        )
        build.enrollment(semester, build.user(hostel))

        service.send_upcoming_semester_reminders(now=NOW)

        assert bool(notifier.of_kind(templates.SEMESTER_UPCOMING)) is expected

    def test_active_semesters_are_not_reminded(self, service, build, notifier):
        """Only upcoming semesters are considered"""
        hostel = build.hostel()
        semester = build.semester(
            hostel,
            start_date=TODAY + timedelta(days=2),
            end_date=TODAY + timedelta(days=120),
            status=SemesterStatus.ACTIVE,
        )
        build.enrollment(semester, build.user(hostel))

        report = service.send_upcoming_semester_reminders(now=NOW)

        assert report.examined == 0
        assert notifier.sent == []

    def test_report_serialises(self, service):
        """SweepReport.to_dict is JSON friendly"""
        report = service.send_upcoming_semester_reminders(now=datetime(2024, 1, 11, 8, 0))
        data = report.to_dict()
        assert data["job"] == "send_upcoming_semester_reminders"
        assert data["started_at"] == "2024-01-11T08:00:00"
        assert data["finished_at"] is not None
