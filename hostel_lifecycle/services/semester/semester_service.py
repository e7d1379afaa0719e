"""
Semester management service.

Creates hostel semesters, maintains the single current semester per
hostel, and rolls a semester's active population into a successor.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from hostel_lifecycle.models.base.enums import EnrollmentStatus, SemesterStatus
from hostel_lifecycle.models.semester import Semester
from hostel_lifecycle.repositories.hostel import HostelRepository
from hostel_lifecycle.repositories.payment import PaymentRepository
from hostel_lifecycle.repositories.room import RoomAssignmentRepository, RoomRepository
from hostel_lifecycle.repositories.semester import (
    EnrollmentRepository,
    GlobalSemesterRepository,
    SemesterRepository,
)
from hostel_lifecycle.services.base import BaseService
from hostel_lifecycle.services.common.errors import ConflictError, NotFoundError
from hostel_lifecycle.services.common.validation import coerce_enum, require_date_range, require_text


def require_current_semester(semesters: SemesterRepository, hostel_id: UUID) -> Semester:
    """
    Current active semester of a hostel, for flows that must be tagged with one.

    Raises:
        ConflictError: the hostel has no current active semester
    """
    semester = semesters.find_current(hostel_id)
    if semester is None:
        raise ConflictError(
            "No active semester. Please set a current semester before continuing.",
            conflicting_field="semester",
            details={"hostel_id": str(hostel_id)},
        )
    return semester


def find_semester(
    semesters: SemesterRepository, semester_id: UUID, hostel_id: Optional[UUID] = None
) -> Semester:
    """
    Load a semester, optionally confined to one hostel.

    A semester of another hostel is reported as missing.
    """
    if hostel_id is None:
        semester = semesters.find_by_id(semester_id)
    else:
        semester = semesters.find_in_hostel(semester_id, hostel_id)
    if semester is None:
        raise NotFoundError("Semester", semester_id)
    return semester


@dataclass
class SemesterStatistics:
    semester_id: UUID
    total_students: int
    active_students: int
    completed_students: int
    total_revenue: Decimal
    payment_count: int
    outstanding_balance: Decimal
    occupancy_rate: float


class SemesterService(BaseService):
    """Semester lifecycle operations invoked from the API layer."""

    # ==================== CREATE ====================

    def create_semester(
        self,
        hostel_id: UUID,
        name: str,
        academic_year: str,
        start_date: date,
        end_date: date,
        global_semester_id: Optional[UUID] = None,
    ) -> Semester:
        """
        Create a semester in ``upcoming`` status.

        Raises:
            ValidationError: blank name/year or ``end_date <= start_date``
            NotFoundError: unknown hostel or template
        """
        name = require_text(name, "name")
        academic_year = require_text(academic_year, "academic_year")
        require_date_range(start_date, end_date)

        with self.transaction() as uow:
            if uow.get_repo(HostelRepository).find_by_id(hostel_id) is None:
                raise NotFoundError("Hostel", hostel_id)
            if global_semester_id is not None:
                if uow.get_repo(GlobalSemesterRepository).find_by_id(global_semester_id) is None:
                    raise NotFoundError("Global semester", global_semester_id)

            semester = uow.get_repo(SemesterRepository).create(
                {
                    "hostel_id": hostel_id,
                    "global_semester_id": global_semester_id,
                    "name": name,
                    "academic_year": academic_year,
                    "start_date": start_date,
                    "end_date": end_date,
                    "is_current": False,
                    "status": SemesterStatus.UPCOMING,
                }
            )

        self._logger.info(
            f"Created semester {semester.id} ({name}) for hostel {hostel_id}",
            extra={"hostel_id": hostel_id, "semester_id": semester.id},
        )
        return semester

    # ==================== CURRENT SEMESTER ====================

    def set_current(self, semester_id: UUID, hostel_id: UUID) -> Semester:
        """
        Make one semester the hostel's current, active semester.

        Every sibling is un-flagged first; both steps share one transaction
        so a failure leaves the previous current semester in place.
        """
        with self.transaction() as uow:
            semesters = uow.get_repo(SemesterRepository)
            semester = semesters.find_in_hostel(semester_id, hostel_id)
            if semester is None:
                raise NotFoundError("Semester", semester_id)

            semesters.clear_current(hostel_id)
            semesters.mark_current(semester)

        self._logger.info(
            f"Semester {semester_id} is now current for hostel {hostel_id}",
            extra={"hostel_id": hostel_id, "semester_id": semester_id},
        )
        return semester

    def get_current(self, hostel_id: UUID) -> Semester:
        with self.transaction() as uow:
            semester = uow.get_repo(SemesterRepository).find_current(hostel_id)
        if semester is None:
            raise NotFoundError("Current semester for hostel", hostel_id)
        return semester

    def require_active_semester(self, hostel_id: UUID) -> Semester:
        with self.transaction() as uow:
            return require_current_semester(uow.get_repo(SemesterRepository), hostel_id)

    # ==================== QUERIES ====================

    def get_semester(self, semester_id: UUID, hostel_id: Optional[UUID] = None) -> Semester:
        with self.transaction() as uow:
            return find_semester(uow.get_repo(SemesterRepository), semester_id, hostel_id)

    def list_for_hostel(self, hostel_id: UUID) -> List[Semester]:
        with self.transaction() as uow:
            return uow.get_repo(SemesterRepository).list_for_hostel(hostel_id)

    def list_upcoming(self, hostel_id: UUID) -> List[Semester]:
        with self.transaction() as uow:
            return uow.get_repo(SemesterRepository).list_upcoming_for_hostel(hostel_id)

    def get_statistics(self, semester_id: UUID, hostel_id: Optional[UUID] = None) -> SemesterStatistics:
        with self.transaction() as uow:
            semester = find_semester(uow.get_repo(SemesterRepository), semester_id, hostel_id)

            counts = uow.get_repo(EnrollmentRepository).count_by_status(semester_id)
            totals = uow.get_repo(SemesterRepository).payment_totals(semester_id)

            assignments_repo = uow.get_repo(RoomAssignmentRepository)
            rooms = uow.get_repo(RoomRepository)
            payments = uow.get_repo(PaymentRepository)

            outstanding = Decimal("0")
            for assignment in assignments_repo.list_active_for_semester(semester_id):
                room = rooms.find_by_id(assignment.room_id)
                if room is None:
                    continue
                paid = payments.total_paid(assignment.user_id, semester_id)
                outstanding += max(Decimal(room.price) - paid, Decimal("0"))

            room_count = rooms.count_for_hostel(semester.hostel_id)
            occupied = assignments_repo.count_occupied_rooms(semester_id)

        return SemesterStatistics(
            semester_id=semester_id,
            total_students=sum(counts.values()),
            active_students=counts.get(EnrollmentStatus.ACTIVE, 0),
            completed_students=counts.get(EnrollmentStatus.COMPLETED, 0),
            total_revenue=totals["total_revenue"],
            payment_count=totals["payment_count"],
            outstanding_balance=outstanding,
            occupancy_rate=round(occupied * 100.0 / room_count, 2) if room_count else 0.0,
        )

    # ==================== UPDATE / DELETE ====================

    def update_status(
        self,
        semester_id: UUID,
        status: Union[str, SemesterStatus],
        hostel_id: Optional[UUID] = None,
    ) -> Semester:
        """Manual status transition; ``cancelled`` is only reachable this way."""
        new_status = coerce_enum(SemesterStatus, status, "status")
        with self.transaction() as uow:
            semesters = uow.get_repo(SemesterRepository)
            semester = find_semester(semesters, semester_id, hostel_id)
            old_status = semester.status
            semesters.update(semester, {"status": new_status})

        self._logger.info(
            f"Semester {semester_id} status {old_status.value} -> {new_status.value}",
            extra={"semester_id": semester_id},
        )
        return semester

    def delete(self, semester_id: UUID, hostel_id: Optional[UUID] = None) -> None:
        """Delete a semester together with its enrollments."""
        with self.transaction() as uow:
            semesters = uow.get_repo(SemesterRepository)
            semester = find_semester(semesters, semester_id, hostel_id)
            uow.get_repo(RoomAssignmentRepository).detach_semester(semester_id)
            uow.get_repo(PaymentRepository).detach_semester(semester_id)
            semesters.delete(semester)
        self._logger.warning(f"Deleted semester {semester_id}", extra={"semester_id": semester_id})

    # ==================== ROLLOVER ====================

    def rollover(
        self,
        old_semester_id: UUID,
        new_name: str,
        new_academic_year: str,
        start_date: date,
        end_date: date,
        now: Optional[datetime] = None,
        hostel_id: Optional[UUID] = None,
    ) -> Semester:
        """
        Create a successor semester and carry every active enrollment into it.

        The carry-forward is unconditional: each active enrollment of the old
        semester gets an active enrollment (same student, same room) in the
        new one. The template reference is not carried.
        """
        new_name = require_text(new_name, "name")
        new_academic_year = require_text(new_academic_year, "academic_year")
        require_date_range(start_date, end_date)
        now = now or datetime.utcnow()

        with self.transaction() as uow:
            semesters = uow.get_repo(SemesterRepository)
            enrollments = uow.get_repo(EnrollmentRepository)

            old_semester = find_semester(semesters, old_semester_id, hostel_id)

            new_semester = semesters.create(
                {
                    "hostel_id": old_semester.hostel_id,
                    "name": new_name,
                    "academic_year": new_academic_year,
                    "start_date": start_date,
                    "end_date": end_date,
                    "is_current": False,
                    "status": SemesterStatus.UPCOMING,
                }
            )

            carried = 0
            for enrollment in enrollments.list_for_semester(old_semester_id, EnrollmentStatus.ACTIVE):
                enrollments.create(
                    {
                        "semester_id": new_semester.id,
                        "user_id": enrollment.user_id,
                        "room_id": enrollment.room_id,
                        "enrollment_status": EnrollmentStatus.ACTIVE,
                        "enrollment_date": now,
                    }
                )
                carried += 1

        self._logger.info(
            f"Rolled semester {old_semester_id} into {new_semester.id}; carried {carried} enrollment(s)",
            extra={"semester_id": new_semester.id},
        )
        return new_semester
