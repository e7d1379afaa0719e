from hostel_lifecycle.services.student.student_registration_service import (
    RegistrationResult,
    StudentRegistrationService,
)

__all__ = ["RegistrationResult", "StudentRegistrationService"]
