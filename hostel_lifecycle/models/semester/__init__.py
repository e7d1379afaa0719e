from hostel_lifecycle.models.semester.semester import (
    GlobalSemester,
    Semester,
    SemesterEnrollment,
)

__all__ = ["GlobalSemester", "Semester", "SemesterEnrollment"]
