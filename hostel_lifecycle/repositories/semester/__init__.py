from hostel_lifecycle.repositories.semester.semester_repository import (
    EnrollmentRepository,
    GlobalSemesterRepository,
    SemesterRepository,
)

__all__ = ["GlobalSemesterRepository", "SemesterRepository", "EnrollmentRepository"]
