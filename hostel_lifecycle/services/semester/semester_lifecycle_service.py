"""
Daily semester sweeps.

``check_and_end_semesters`` completes semesters whose end date has
passed; ``send_upcoming_semester_reminders`` notifies students about
semesters starting soon. Both take ``now`` explicitly and isolate
failures per semester.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional
from uuid import UUID

from hostel_lifecycle.models.base.enums import EnrollmentStatus, SemesterStatus
from hostel_lifecycle.repositories.hostel import HostelRepository, UserRepository
from hostel_lifecycle.repositories.room import RoomAssignmentRepository
from hostel_lifecycle.repositories.semester import EnrollmentRepository, SemesterRepository
from hostel_lifecycle.services.base import BaseService
from hostel_lifecycle.services.common.reports import SweepReport
from hostel_lifecycle.services.notification import templates

UNKNOWN_HOSTEL_NAME = "Your Hostel"


@dataclass
class _PendingNotice:
    email: str
    data: dict


class SemesterLifecycleService(BaseService):
    """Time-driven semester transitions and reminders."""

    # ==================== END OF SEMESTER ====================

    def check_and_end_semesters(self, now: Optional[datetime] = None) -> SweepReport:
        """
        Complete every active semester whose ``end_date`` is before today.

        Each semester is ended in its own transaction; a failure rolls back
        that semester only and the sweep moves on. Students are notified
        after the commit.
        """
        now = now or datetime.utcnow()
        today = now.date()
        report = SweepReport(job="check_and_end_semesters", started_at=now)

        with self.transaction() as uow:
            semester_ids = uow.get_repo(SemesterRepository).get_ended_active_ids(today)
        report.examined = len(semester_ids)
        self._logger.info(f"Found {len(semester_ids)} semester(s) past their end date")

        for semester_id in semester_ids:
            try:
                notices = self._end_semester(semester_id, today, now)
            except Exception as e:
                self._logger.error(
                    f"Failed to end semester {semester_id}: {e}",
                    exc_info=True,
                    extra={"semester_id": semester_id},
                )
                report.record_failure(f"{semester_id}: {e}")
                continue

            if notices is None:
                continue
            report.transitioned += 1
            for notice in notices:
                report.record_notification(
                    self._notify(notice.email, templates.SEMESTER_ENDING, notice.data)
                )

        return report.finish(datetime.utcnow())

    def _end_semester(self, semester_id: UUID, today: date, now: datetime) -> Optional[List[_PendingNotice]]:
        with self.transaction() as uow:
            semesters = uow.get_repo(SemesterRepository)
            semester = semesters.find_by_id_for_update(semester_id)
            # Another run may already have ended it
            if semester is None or semester.status != SemesterStatus.ACTIVE or not semester.has_ended(today):
                return None

            semesters.update(semester, {"status": SemesterStatus.COMPLETED})
            completed_user_ids = uow.get_repo(EnrollmentRepository).complete_active(semester_id, now)
            closed = uow.get_repo(RoomAssignmentRepository).end_for_users_in_semester(
                semester_id, completed_user_ids, now
            )

            hostel = uow.get_repo(HostelRepository).find_by_id(semester.hostel_id)
            hostel_name = hostel.name if hostel else UNKNOWN_HOSTEL_NAME
            notices = [
                _PendingNotice(
                    email=student.email,
                    data={
                        "student_name": student.name,
                        "semester_name": semester.name,
                        "hostel_name": hostel_name,
                        "end_date": semester.end_date.isoformat(),
                    },
                )
                for student in uow.get_repo(UserRepository).get_by_ids(completed_user_ids)
            ]

        self._logger.info(
            f"Ended semester {semester_id}: {len(completed_user_ids)} enrollment(s) completed, "
            f"{closed} room assignment(s) closed",
            extra={"semester_id": semester_id},
        )
        return notices

    # ==================== UPCOMING REMINDERS ====================

    def send_upcoming_semester_reminders(self, now: Optional[datetime] = None) -> SweepReport:
        """
        Remind actively enrolled students of semesters starting within the window.

        The window is inclusive: ``[today, today + UPCOMING_SEMESTER_WINDOW_DAYS]``.
        No state changes.
        """
        now = now or datetime.utcnow()
        today = now.date()
        last_day = today + timedelta(days=self.settings.UPCOMING_SEMESTER_WINDOW_DAYS)
        report = SweepReport(job="send_upcoming_semester_reminders", started_at=now)

        with self.transaction() as uow:
            semester_ids = [s.id for s in uow.get_repo(SemesterRepository).get_starting_between(today, last_day)]
        report.examined = len(semester_ids)

        for semester_id in semester_ids:
            try:
                notices = self._collect_upcoming_notices(semester_id, today)
            except Exception as e:
                self._logger.error(
                    f"Failed to prepare reminders for semester {semester_id}: {e}",
                    exc_info=True,
                    extra={"semester_id": semester_id},
                )
                report.record_failure(f"{semester_id}: {e}")
                continue

            for notice in notices:
                report.record_notification(
                    self._notify(notice.email, templates.SEMESTER_UPCOMING, notice.data)
                )

        return report.finish(datetime.utcnow())

    def _collect_upcoming_notices(self, semester_id: UUID, today: date) -> List[_PendingNotice]:
        with self.transaction() as uow:
            semester = uow.get_repo(SemesterRepository).find_by_id(semester_id)
            if semester is None:
                return []
            enrolled = uow.get_repo(EnrollmentRepository).list_for_semester(
                semester_id, EnrollmentStatus.ACTIVE
            )
            students = uow.get_repo(UserRepository).get_by_ids([e.user_id for e in enrolled])
            hostel = uow.get_repo(HostelRepository).find_by_id(semester.hostel_id)
            hostel_name = hostel.name if hostel else UNKNOWN_HOSTEL_NAME
            days_until_start = semester.days_until_start(today)

            return [
                _PendingNotice(
                    email=student.email,
                    data={
                        "student_name": student.name,
                        "semester_name": semester.name,
                        "hostel_name": hostel_name,
                        "start_date": semester.start_date.isoformat(),
                        "days_until_start": days_until_start,
                    },
                )
                for student in students
            ]
