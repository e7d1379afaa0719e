"""
Student registration.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from hostel_lifecycle.api import deps
from hostel_lifecycle.schemas.common import SuccessResponse
from hostel_lifecycle.schemas.payment import PaymentResponse
from hostel_lifecycle.schemas.room import AssignmentResponse
from hostel_lifecycle.schemas.semester import EnrollmentResponse
from hostel_lifecycle.schemas.student import RegistrationResponse, StudentRegistration, StudentResponse
from hostel_lifecycle.services.student import StudentRegistrationService

router = APIRouter(prefix="/students", tags=["Students"])


@router.post(
    "/register",
    response_model=SuccessResponse[RegistrationResponse],
    status_code=status.HTTP_201_CREATED,
)
def register_student(
    payload: StudentRegistration,
    hostel_id: UUID = Depends(deps.require_hostel),
    caller: deps.CallerContext = Depends(deps.get_caller),
    service: StudentRegistrationService = Depends(deps.get_registration_service),
):
    result = service.register_student(
        hostel_id,
        payload.name,
        payload.email,
        payload.room_id,
        payload.initial_payment_amount,
        registered_by=caller.user_id,
        currency=payload.currency,
        payment_method=payload.payment_method,
        phone=payload.phone,
        access_number=payload.access_number,
        course=payload.course,
        guardian_name=payload.guardian_name,
        guardian_phone=payload.guardian_phone,
    )
    return SuccessResponse.create(
        RegistrationResponse(
            student=StudentResponse.model_validate(result.student),
            enrollment=EnrollmentResponse.model_validate(result.enrollment),
            assignment=AssignmentResponse.model_validate(result.assignment),
            payment=PaymentResponse.model_validate(result.payment),
            balance=result.balance,
        )
    )
