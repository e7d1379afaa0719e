"""
Unit tests for the Celery lifecycle tasks and beat schedule
"""
from datetime import date, timedelta

import pytest

from hostel_lifecycle.config import database
from hostel_lifecycle.config.settings import settings
from hostel_lifecycle.models import HostelSubscription, Semester
from hostel_lifecycle.models.base.enums import SemesterStatus, SubscriptionStatus, UserRole
from hostel_lifecycle.services.semester import SemesterLifecycleService
from hostel_lifecycle.services.subscription import SubscriptionNotificationService
from hostel_lifecycle.tasks import celery_app
from hostel_lifecycle.tasks.celery_app import SEMESTER_SWEEP_TASK, SUBSCRIPTION_SWEEP_TASK
from hostel_lifecycle.tasks.lifecycle_tasks import run_semester_sweep, run_subscription_sweep

from tests.conftest import NOW


@pytest.fixture(autouse=True)
def task_sessions(session_factory, monkeypatch):
    """Point the tasks at the per-test database"""
    monkeypatch.setattr(database, "SessionLocal", session_factory)


class TestBeatSchedule:
    """Test the daily schedule"""

    def test_both_sweeps_are_scheduled(self):
        schedule = celery_app.conf.beat_schedule
        assert schedule["semester-lifecycle-sweep"]["task"] == SEMESTER_SWEEP_TASK
        assert schedule["subscription-lifecycle-sweep"]["task"] == SUBSCRIPTION_SWEEP_TASK

    def test_sweeps_run_daily_at_configured_hours(self):
        schedule = celery_app.conf.beat_schedule
        semester = schedule["semester-lifecycle-sweep"]["schedule"]
        subscription = schedule["subscription-lifecycle-sweep"]["schedule"]
        assert semester.hour == {settings.SEMESTER_SWEEP_HOUR}
        assert semester.minute == {0}
        assert subscription.hour == {settings.SUBSCRIPTION_SWEEP_HOUR}

    def test_tasks_are_registered(self):
        assert SEMESTER_SWEEP_TASK in celery_app.tasks
        assert SUBSCRIPTION_SWEEP_TASK in celery_app.tasks


class TestSemesterSweepTask:
    """Test run_semester_sweep"""

    def test_runs_both_jobs(self, build):
        hostel = build.hostel()
        semester = build.semester(hostel, end_date=date(2024, 1, 10))

        result = run_semester_sweep(now=NOW.isoformat())

        assert set(result) == {"check_and_end_semesters", "send_upcoming_semester_reminders"}
        assert result["check_and_end_semesters"]["transitioned"] == 1
        assert result["check_and_end_semesters"]["started_at"] == NOW.isoformat()
        assert build.get(Semester, semester.id).status == SemesterStatus.COMPLETED

    def test_reminders_run_when_ending_fails(self, build, monkeypatch):
        def explode(self, now=None):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(SemesterLifecycleService, "check_and_end_semesters", explode)

        result = run_semester_sweep(now=NOW.isoformat())

        assert result["check_and_end_semesters"] == {
            "job": "check_and_end_semesters",
            "error": "database unavailable",
        }
        assert result["send_upcoming_semester_reminders"]["failed"] == 0


class TestSubscriptionSweepTask:
    """Test run_subscription_sweep"""

    def test_expires_and_sends_digest(self, build):
        hostel = build.hostel()
        build.user(hostel, role=UserRole.HOSTEL_ADMIN, email="admin@kikoni.ac.ug")
        build.user(role=UserRole.SUPER_ADMIN, email="root@platform.ac.ug")
        plan = build.plan()
        lapsed = build.subscription(hostel, plan, end_date=NOW - timedelta(days=1))
        build.subscription(build.hostel(), plan, end_date=NOW + timedelta(days=7))

        result = run_subscription_sweep(now=NOW.isoformat())

        assert build.get(HostelSubscription, lapsed.id).status == SubscriptionStatus.EXPIRED
        assert result["check_and_notify_expiring_subscriptions"]["transitioned"] == 1
        assert result["notify_super_admin_about_expiring_subscriptions"]["examined"] == 1
        assert result["notify_super_admin_about_expiring_subscriptions"]["notifications_sent"] == 1

    def test_digest_runs_when_expiry_fails(self, build, monkeypatch):
        build.user(role=UserRole.SUPER_ADMIN, email="root@platform.ac.ug")
        build.subscription(build.hostel(), build.plan(), end_date=NOW + timedelta(days=3))

        def explode(self, now=None):
            raise RuntimeError("smtp pool exhausted")

        monkeypatch.setattr(SubscriptionNotificationService, "check_and_notify_expiring_subscriptions", explode)

        result = run_subscription_sweep(now=NOW.isoformat())

        assert result["check_and_notify_expiring_subscriptions"]["error"] == "smtp pool exhausted"
        assert result["notify_super_admin_about_expiring_subscriptions"]["notifications_sent"] == 1
