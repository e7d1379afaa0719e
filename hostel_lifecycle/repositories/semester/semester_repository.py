"""
Semester Repository.

Query and persistence helpers for global semester templates,
hostel semesters and semester enrollments.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy import func, select, update

from hostel_lifecycle.models.base.enums import EnrollmentStatus, SemesterStatus
from hostel_lifecycle.models.payment import Payment
from hostel_lifecycle.models.semester import GlobalSemester, Semester, SemesterEnrollment
from hostel_lifecycle.repositories.base.base_repository import BaseRepository


class GlobalSemesterRepository(BaseRepository[GlobalSemester]):
    """Repository for global semester templates."""

    model = GlobalSemester

    def find_by_name(self, name: str) -> Optional[GlobalSemester]:
        query = select(GlobalSemester).where(GlobalSemester.name == name)
        return self.session.execute(query).scalar_one_or_none()

    def list_all(self) -> List[GlobalSemester]:
        return self.find_all(order_by=GlobalSemester.name)

    def count_references(self, global_semester_id: UUID) -> int:
        query = select(func.count(Semester.id)).where(
            Semester.global_semester_id == global_semester_id
        )
        return self.session.execute(query).scalar_one()


class SemesterRepository(BaseRepository[Semester]):
    """
    Repository for hostel semesters.

    The current-semester flag is only ever changed through
    ``clear_current`` followed by ``mark_current`` in one transaction.
    """

    model = Semester

    # ==================== READ OPERATIONS ====================

    def find_in_hostel(self, semester_id: UUID, hostel_id: UUID) -> Optional[Semester]:
        query = select(Semester).where(Semester.id == semester_id, Semester.hostel_id == hostel_id)
        return self.session.execute(query).scalar_one_or_none()

    def find_current(self, hostel_id: UUID) -> Optional[Semester]:
        query = select(Semester).where(
            Semester.hostel_id == hostel_id,
            Semester.is_current.is_(True),
            Semester.status == SemesterStatus.ACTIVE,
        )
        return self.session.execute(query).scalars().first()

    def list_for_hostel(self, hostel_id: UUID) -> List[Semester]:
        query = (
            select(Semester)
            .where(Semester.hostel_id == hostel_id)
            .order_by(Semester.start_date.desc())
        )
        return list(self.session.execute(query).scalars().all())

    def list_upcoming_for_hostel(self, hostel_id: UUID) -> List[Semester]:
        query = (
            select(Semester)
            .where(Semester.hostel_id == hostel_id, Semester.status == SemesterStatus.UPCOMING)
            .order_by(Semester.start_date)
        )
        return list(self.session.execute(query).scalars().all())

    def get_ended_active_ids(self, today: date) -> List[UUID]:
        """Active semesters whose end date is strictly before ``today``."""
        query = (
            select(Semester.id)
            .where(Semester.status == SemesterStatus.ACTIVE, Semester.end_date < today)
            .order_by(Semester.end_date)
        )
        return list(self.session.execute(query).scalars().all())

    def get_starting_between(self, first_day: date, last_day: date) -> List[Semester]:
        query = (
            select(Semester)
            .where(
                Semester.status == SemesterStatus.UPCOMING,
                Semester.start_date >= first_day,
                Semester.start_date <= last_day,
            )
            .order_by(Semester.start_date)
        )
        return list(self.session.execute(query).scalars().all())

    # ==================== CURRENT FLAG ====================

    def clear_current(self, hostel_id: UUID) -> None:
        self.session.execute(
            update(Semester)
            .where(Semester.hostel_id == hostel_id, Semester.is_current.is_(True))
            .values(is_current=False)
            .execution_options(synchronize_session="fetch")
        )

    def mark_current(self, semester: Semester) -> Semester:
        semester.is_current = True
        semester.status = SemesterStatus.ACTIVE
        self.session.flush()
        return semester

    # ==================== STATISTICS ====================

    def payment_totals(self, semester_id: UUID) -> Dict[str, object]:
        query = select(
            func.coalesce(func.sum(Payment.amount), 0),
            func.count(Payment.id),
        ).where(Payment.semester_id == semester_id)
        total, count = self.session.execute(query).one()
        return {"total_revenue": Decimal(str(total)), "payment_count": int(count)}


class EnrollmentRepository(BaseRepository[SemesterEnrollment]):
    """Repository for semester enrollments."""

    model = SemesterEnrollment

    def find_by_pair(self, semester_id: UUID, user_id: UUID) -> Optional[SemesterEnrollment]:
        query = select(SemesterEnrollment).where(
            SemesterEnrollment.semester_id == semester_id,
            SemesterEnrollment.user_id == user_id,
        )
        return self.session.execute(query).scalar_one_or_none()

    def list_for_semester(
        self, semester_id: UUID, status: Optional[EnrollmentStatus] = None
    ) -> List[SemesterEnrollment]:
        query = select(SemesterEnrollment).where(SemesterEnrollment.semester_id == semester_id)
        if status is not None:
            query = query.where(SemesterEnrollment.enrollment_status == status)
        query = query.order_by(SemesterEnrollment.enrollment_date.desc())
        return list(self.session.execute(query).scalars().all())

    def list_for_user(self, user_id: UUID) -> List[SemesterEnrollment]:
        query = (
            select(SemesterEnrollment)
            .where(SemesterEnrollment.user_id == user_id)
            .order_by(SemesterEnrollment.enrollment_date.desc())
        )
        return list(self.session.execute(query).scalars().all())

    def count_by_status(self, semester_id: UUID) -> Dict[EnrollmentStatus, int]:
        query = (
            select(SemesterEnrollment.enrollment_status, func.count(SemesterEnrollment.id))
            .where(SemesterEnrollment.semester_id == semester_id)
            .group_by(SemesterEnrollment.enrollment_status)
        )
        return {status: int(count) for status, count in self.session.execute(query).all()}

    def complete_active(self, semester_id: UUID, completed_at: datetime) -> List[UUID]:
        """
        Move every active enrollment of a semester to completed.

        Returns:
            IDs of the students whose enrollment was completed
        """
        enrollments = self.list_for_semester(semester_id, EnrollmentStatus.ACTIVE)
        for enrollment in enrollments:
            enrollment.enrollment_status = EnrollmentStatus.COMPLETED
            enrollment.completed_at = completed_at
        self.session.flush()
        return [enrollment.user_id for enrollment in enrollments]

    def set_status(
        self, enrollment: SemesterEnrollment, status: EnrollmentStatus, now: datetime
    ) -> SemesterEnrollment:
        enrollment.enrollment_status = status
        if status.is_terminal:
            enrollment.completed_at = now
        self.session.flush()
        return enrollment
