"""
Celery application and the daily lifecycle beat schedule.
"""

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging as celery_setup_logging

from hostel_lifecycle.config.logging import setup_logging
from hostel_lifecycle.config.settings import settings

SEMESTER_SWEEP_TASK = "hostel_lifecycle.tasks.run_semester_sweep"
SUBSCRIPTION_SWEEP_TASK = "hostel_lifecycle.tasks.run_subscription_sweep"

celery_app = Celery(
    "hostel_lifecycle",
    broker=settings.get_broker_url(),
    backend=settings.get_result_backend(),
    include=["hostel_lifecycle.tasks.lifecycle_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    worker_prefetch_multiplier=1,
    task_acks_late=True,
)

celery_app.conf.beat_schedule = {
    "semester-lifecycle-sweep": {
        "task": SEMESTER_SWEEP_TASK,
        "schedule": crontab(hour=settings.SEMESTER_SWEEP_HOUR, minute=0),
    },
    "subscription-lifecycle-sweep": {
        "task": SUBSCRIPTION_SWEEP_TASK,
        "schedule": crontab(hour=settings.SUBSCRIPTION_SWEEP_HOUR, minute=0),
    },
}


@celery_setup_logging.connect
def configure_worker_logging(**kwargs) -> None:
    """Workers log through the package configuration instead of Celery's default."""
    setup_logging()
