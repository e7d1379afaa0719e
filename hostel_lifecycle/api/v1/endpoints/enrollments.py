"""
Semester enrollments.
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hostel_lifecycle.api import deps
from hostel_lifecycle.schemas.common import SuccessResponse
from hostel_lifecycle.schemas.semester import (
    EnrollmentCreate,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
    EnrollmentTransfer,
)
from hostel_lifecycle.services.semester import EnrollmentService

router = APIRouter(prefix="/enrollments", tags=["Enrollments"], dependencies=[Depends(deps.require_staff)])


def _many(rows) -> List[EnrollmentResponse]:
    return [EnrollmentResponse.model_validate(row) for row in rows]


@router.post("", response_model=SuccessResponse[EnrollmentResponse], status_code=status.HTTP_201_CREATED)
def enroll_student(
    payload: EnrollmentCreate,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    enrollment = service.enroll(payload.semester_id, payload.user_id, payload.room_id, hostel_id=hostel_id)
    return SuccessResponse.create(EnrollmentResponse.model_validate(enrollment))


@router.get("/current", response_model=SuccessResponse[List[EnrollmentResponse]])
def list_current_enrollments(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    return SuccessResponse.create(_many(service.list_current_for_hostel(hostel_id)))


@router.get("/semester/{semester_id}", response_model=SuccessResponse[List[EnrollmentResponse]])
def list_semester_enrollments(
    semester_id: UUID,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    return SuccessResponse.create(_many(service.list_for_semester(semester_id, hostel_id)))


@router.get("/user/{user_id}", response_model=SuccessResponse[List[EnrollmentResponse]])
def list_user_enrollments(
    user_id: UUID,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    return SuccessResponse.create(_many(service.list_for_user(user_id, hostel_id)))


@router.get("/{enrollment_id}", response_model=SuccessResponse[EnrollmentResponse])
def get_enrollment(
    enrollment_id: UUID,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    return SuccessResponse.create(EnrollmentResponse.model_validate(service.get(enrollment_id, hostel_id)))


@router.patch("/{enrollment_id}/status", response_model=SuccessResponse[EnrollmentResponse])
def update_enrollment_status(
    enrollment_id: UUID,
    payload: EnrollmentStatusUpdate,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    enrollment = service.update_status(enrollment_id, payload.enrollment_status, hostel_id=hostel_id)
    return SuccessResponse.create(EnrollmentResponse.model_validate(enrollment))


@router.post("/{enrollment_id}/drop", response_model=SuccessResponse[EnrollmentResponse])
def drop_enrollment(
    enrollment_id: UUID,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    enrollment = service.drop(enrollment_id, hostel_id=hostel_id)
    return SuccessResponse.create(EnrollmentResponse.model_validate(enrollment))


@router.post(
    "/{enrollment_id}/transfer",
    response_model=SuccessResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(deps.require_super_admin)],
)
def transfer_enrollment(
    enrollment_id: UUID,
    payload: EnrollmentTransfer,
    service: EnrollmentService = Depends(deps.get_enrollment_service),
):
    enrollment = service.transfer(enrollment_id, payload.new_semester_id)
    return SuccessResponse.create(EnrollmentResponse.model_validate(enrollment))
