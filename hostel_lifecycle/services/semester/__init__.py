from hostel_lifecycle.services.semester.enrollment_service import EnrollmentService
from hostel_lifecycle.services.semester.global_semester_service import GlobalSemesterService
from hostel_lifecycle.services.semester.semester_lifecycle_service import SemesterLifecycleService
from hostel_lifecycle.services.semester.semester_service import SemesterService, SemesterStatistics

__all__ = [
    "EnrollmentService",
    "GlobalSemesterService",
    "SemesterLifecycleService",
    "SemesterService",
    "SemesterStatistics",
]
