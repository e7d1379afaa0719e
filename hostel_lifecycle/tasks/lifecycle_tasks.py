"""
Daily lifecycle jobs.

Each task runs its two sweeps in order; the second sweep runs even if
the first one failed outright.
"""

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from hostel_lifecycle.config import database
from hostel_lifecycle.config.logging import get_logger
from hostel_lifecycle.services.semester import SemesterLifecycleService
from hostel_lifecycle.services.subscription import SubscriptionNotificationService
from hostel_lifecycle.tasks.celery_app import (
    SEMESTER_SWEEP_TASK,
    SUBSCRIPTION_SWEEP_TASK,
    celery_app,
)

logger = get_logger(__name__)


def _parse_now(now: Optional[str]) -> datetime:
    return datetime.fromisoformat(now) if now else datetime.utcnow()


def _run_jobs(task_name: str, jobs: List[Tuple[str, Callable[[datetime], Any]]], now: datetime) -> Dict[str, Any]:
    results: Dict[str, Any] = {}
    for job_name, job in jobs:
        try:
            report = job(now)
            results[job_name] = report.to_dict()
            logger.info(
                f"{job_name}: examined={report.examined} transitioned={report.transitioned} "
                f"failed={report.failed} notified={report.notifications_sent}",
                extra={"job": job_name},
            )
        except Exception as e:
            logger.error(f"{task_name}: {job_name} aborted: {e}", exc_info=True, extra={"job": job_name})
            results[job_name] = {"job": job_name, "error": str(e)}
    return results


@celery_app.task(name=SEMESTER_SWEEP_TASK)
def run_semester_sweep(now: Optional[str] = None) -> Dict[str, Any]:
    """End expired semesters, then send upcoming-semester reminders."""
    service = SemesterLifecycleService(database.SessionLocal)
    return _run_jobs(
        "run_semester_sweep",
        [
            ("check_and_end_semesters", service.check_and_end_semesters),
            ("send_upcoming_semester_reminders", service.send_upcoming_semester_reminders),
        ],
        _parse_now(now),
    )


@celery_app.task(name=SUBSCRIPTION_SWEEP_TASK)
def run_subscription_sweep(now: Optional[str] = None) -> Dict[str, Any]:
    """Send expiry notices and expire lapsed subscriptions, then the super-admin digest."""
    service = SubscriptionNotificationService(database.SessionLocal)
    return _run_jobs(
        "run_subscription_sweep",
        [
            ("check_and_notify_expiring_subscriptions", service.check_and_notify_expiring_subscriptions),
            ("notify_super_admin_about_expiring_subscriptions", service.notify_super_admin_about_expiring_subscriptions),
        ],
        _parse_now(now),
    )
