"""
Hostel semesters: creation, current-semester switching, statistics and rollover.
"""

from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hostel_lifecycle.api import deps
from hostel_lifecycle.schemas.common import SuccessResponse
from hostel_lifecycle.schemas.semester import (
    SemesterCreate,
    SemesterResponse,
    SemesterRollover,
    SemesterStatisticsResponse,
    SemesterStatusUpdate,
)
from hostel_lifecycle.services.semester import SemesterService

router = APIRouter(prefix="/semesters", tags=["Semesters"], dependencies=[Depends(deps.require_staff)])


@router.post("", response_model=SuccessResponse[SemesterResponse], status_code=status.HTTP_201_CREATED)
def create_semester(
    payload: SemesterCreate,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SemesterService = Depends(deps.get_semester_service),
):
    semester = service.create_semester(
        hostel_id,
        payload.name,
        payload.academic_year,
        payload.start_date,
        payload.end_date,
        global_semester_id=payload.global_semester_id,
    )
    return SuccessResponse.create(SemesterResponse.model_validate(semester))


@router.get("", response_model=SuccessResponse[List[SemesterResponse]])
def list_semesters(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SemesterService = Depends(deps.get_semester_service),
):
    return SuccessResponse.create([SemesterResponse.model_validate(s) for s in service.list_for_hostel(hostel_id)])


@router.get("/current", response_model=SuccessResponse[SemesterResponse])
def get_current_semester(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SemesterService = Depends(deps.get_semester_service),
):
    return SuccessResponse.create(SemesterResponse.model_validate(service.get_current(hostel_id)))


@router.get("/upcoming", response_model=SuccessResponse[List[SemesterResponse]])
def list_upcoming_semesters(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SemesterService = Depends(deps.get_semester_service),
):
    return SuccessResponse.create([SemesterResponse.model_validate(s) for s in service.list_upcoming(hostel_id)])


@router.get("/{semester_id}", response_model=SuccessResponse[SemesterResponse])
def get_semester(
    semester_id: UUID,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: SemesterService = Depends(deps.get_semester_service),
):
    return SuccessResponse.create(SemesterResponse.model_validate(service.get_semester(semester_id, hostel_id)))


@router.get("/{semester_id}/statistics", response_model=SuccessResponse[SemesterStatisticsResponse])
def get_semester_statistics(
    semester_id: UUID,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: SemesterService = Depends(deps.get_semester_service),
):
    statistics = service.get_statistics(semester_id, hostel_id)
    return SuccessResponse.create(SemesterStatisticsResponse.model_validate(statistics))


@router.post("/{semester_id}/set-current", response_model=SuccessResponse[SemesterResponse])
def set_current_semester(
    semester_id: UUID,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: SemesterService = Depends(deps.get_semester_service),
):
    return SuccessResponse.create(SemesterResponse.model_validate(service.set_current(semester_id, hostel_id)))


@router.patch("/{semester_id}/status", response_model=SuccessResponse[SemesterResponse])
def update_semester_status(
    semester_id: UUID,
    payload: SemesterStatusUpdate,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: SemesterService = Depends(deps.get_semester_service),
):
    semester = service.update_status(semester_id, payload.status, hostel_id)
    return SuccessResponse.create(SemesterResponse.model_validate(semester))


@router.post(
    "/{semester_id}/rollover",
    response_model=SuccessResponse[SemesterResponse],
    status_code=status.HTTP_201_CREATED,
)
def rollover_semester(
    semester_id: UUID,
    payload: SemesterRollover,
    hostel_id: Optional[UUID] = Depends(deps.hostel_scope),
    service: SemesterService = Depends(deps.get_semester_service),
):
    semester = service.rollover(
        semester_id,
        payload.name,
        payload.academic_year,
        payload.start_date,
        payload.end_date,
        hostel_id=hostel_id,
    )
    return SuccessResponse.create(SemesterResponse.model_validate(semester))


@router.delete(
    "/{semester_id}",
    response_model=SuccessResponse[Dict[str, bool]],
    dependencies=[Depends(deps.require_super_admin)],
)
def delete_semester(semester_id: UUID, service: SemesterService = Depends(deps.get_semester_service)):
    service.delete(semester_id)
    return SuccessResponse.create({"deleted": True})
