"""
Semester enrollment service: enroll, drop, status changes and transfers.
"""

from datetime import datetime
from typing import List, Optional, Tuple, Union
from uuid import UUID

from hostel_lifecycle.models.base.enums import EnrollmentStatus
from hostel_lifecycle.models.semester import Semester, SemesterEnrollment
from hostel_lifecycle.repositories.hostel import UserRepository
from hostel_lifecycle.repositories.room import RoomRepository
from hostel_lifecycle.repositories.semester import EnrollmentRepository, SemesterRepository
from hostel_lifecycle.services.base import BaseService
from hostel_lifecycle.services.common.errors import ConflictError, NotFoundError
from hostel_lifecycle.services.common.validation import coerce_enum
from hostel_lifecycle.services.semester.semester_service import find_semester


def upsert_enrollment(
    enrollments: EnrollmentRepository,
    semester_id: UUID,
    user_id: UUID,
    room_id: Optional[UUID],
    now: datetime,
) -> SemesterEnrollment:
    """
    Insert the (semester, student) enrollment or reactivate the existing one.

    Runs inside the caller's transaction.
    """
    enrollment = enrollments.find_by_pair(semester_id, user_id)
    if enrollment is None:
        return enrollments.create(
            {
                "semester_id": semester_id,
                "user_id": user_id,
                "room_id": room_id,
                "enrollment_status": EnrollmentStatus.ACTIVE,
                "enrollment_date": now,
            }
        )
    return enrollments.update(enrollment, {"enrollment_status": EnrollmentStatus.ACTIVE})


class EnrollmentService(BaseService):
    """
    Enrollment operations on a single (semester, student) pairing.

    Operations taking ``hostel_id`` only see enrollments whose semester
    belongs to that hostel; ``None`` leaves them unrestricted.
    """

    def _find(
        self, uow, enrollment_id: UUID, hostel_id: Optional[UUID]
    ) -> Tuple[SemesterEnrollment, Semester]:
        enrollment = uow.get_repo(EnrollmentRepository).find_by_id(enrollment_id)
        if enrollment is None:
            raise NotFoundError("Enrollment", enrollment_id)
        semester = uow.get_repo(SemesterRepository).find_by_id(enrollment.semester_id)
        if semester is None or (hostel_id is not None and semester.hostel_id != hostel_id):
            raise NotFoundError("Enrollment", enrollment_id)
        return enrollment, semester

    def enroll(
        self,
        semester_id: UUID,
        user_id: UUID,
        room_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
        hostel_id: Optional[UUID] = None,
    ) -> SemesterEnrollment:
        """
        Enroll a student; enrolling an existing pair reactivates it.

        The student and the room must belong to the semester's hostel.

        Raises:
            NotFoundError: unknown semester, or a student or room outside its hostel
        """
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            semester = find_semester(uow.get_repo(SemesterRepository), semester_id, hostel_id)
            if uow.get_repo(UserRepository).find_student_in_hostel(user_id, semester.hostel_id) is None:
                raise NotFoundError("Student", user_id)
            rooms = uow.get_repo(RoomRepository)
            if room_id is not None and rooms.find_in_hostel(room_id, semester.hostel_id) is None:
                raise NotFoundError("Room", room_id)

            enrollment = upsert_enrollment(
                uow.get_repo(EnrollmentRepository), semester_id, user_id, room_id, now
            )

        self._logger.info(
            f"Enrolled user {user_id} in semester {semester_id}",
            extra={"semester_id": semester_id, "user_id": user_id},
        )
        return enrollment

    def update_status(
        self,
        enrollment_id: UUID,
        status: Union[str, EnrollmentStatus],
        now: Optional[datetime] = None,
        hostel_id: Optional[UUID] = None,
    ) -> SemesterEnrollment:
        """
        Direct status transition.

        ``completed_at`` is stamped when entering completed, dropped or
        transferred; nothing is cleared otherwise.
        """
        new_status = coerce_enum(EnrollmentStatus, status, "enrollment_status")
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            enrollment, _ = self._find(uow, enrollment_id, hostel_id)
            uow.get_repo(EnrollmentRepository).set_status(enrollment, new_status, now)
        return enrollment

    def drop(
        self,
        enrollment_id: UUID,
        now: Optional[datetime] = None,
        hostel_id: Optional[UUID] = None,
    ) -> SemesterEnrollment:
        return self.update_status(enrollment_id, EnrollmentStatus.DROPPED, now, hostel_id=hostel_id)

    def transfer(
        self,
        enrollment_id: UUID,
        new_semester_id: UUID,
        now: Optional[datetime] = None,
        hostel_id: Optional[UUID] = None,
    ) -> SemesterEnrollment:
        """
        Move a student to another semester of the same hostel, keeping their room.

        The source enrollment becomes ``transferred`` and a new active
        enrollment is created; both writes share one transaction.

        Raises:
            NotFoundError: unknown enrollment, or a target semester outside the source's hostel
            ConflictError: the student is already enrolled in the target semester
        """
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            enrollments = uow.get_repo(EnrollmentRepository)
            source, source_semester = self._find(uow, enrollment_id, hostel_id)
            find_semester(uow.get_repo(SemesterRepository), new_semester_id, source_semester.hostel_id)
            if enrollments.find_by_pair(new_semester_id, source.user_id) is not None:
                raise ConflictError(
                    "Student is already enrolled in the target semester",
                    conflicting_field="semester_id",
                )

            enrollments.set_status(source, EnrollmentStatus.TRANSFERRED, now)
            target = enrollments.create(
                {
                    "semester_id": new_semester_id,
                    "user_id": source.user_id,
                    "room_id": source.room_id,
                    "enrollment_status": EnrollmentStatus.ACTIVE,
                    "enrollment_date": now,
                }
            )

        self._logger.info(
            f"Transferred enrollment {enrollment_id} to semester {new_semester_id} as {target.id}",
            extra={"semester_id": new_semester_id, "user_id": target.user_id},
        )
        return target

    # ==================== QUERIES ====================

    def get(self, enrollment_id: UUID, hostel_id: Optional[UUID] = None) -> SemesterEnrollment:
        with self.transaction() as uow:
            enrollment, _ = self._find(uow, enrollment_id, hostel_id)
        return enrollment

    def list_for_semester(
        self, semester_id: UUID, hostel_id: Optional[UUID] = None
    ) -> List[SemesterEnrollment]:
        with self.transaction() as uow:
            if hostel_id is not None:
                find_semester(uow.get_repo(SemesterRepository), semester_id, hostel_id)
            return uow.get_repo(EnrollmentRepository).list_for_semester(semester_id)

    def list_for_user(self, user_id: UUID, hostel_id: Optional[UUID] = None) -> List[SemesterEnrollment]:
        with self.transaction() as uow:
            if hostel_id is not None:
                user = uow.get_repo(UserRepository).find_by_id(user_id)
                if user is None or user.hostel_id != hostel_id:
                    raise NotFoundError("User", user_id)
            return uow.get_repo(EnrollmentRepository).list_for_user(user_id)

    def list_current_for_hostel(self, hostel_id: UUID) -> List[SemesterEnrollment]:
        with self.transaction() as uow:
            current = uow.get_repo(SemesterRepository).find_current(hostel_id)
            if current is None:
                return []
            return uow.get_repo(EnrollmentRepository).list_for_semester(current.id)
