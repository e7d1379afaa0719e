"""
Global semester templates (super admin).
"""

from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hostel_lifecycle.api import deps
from hostel_lifecycle.schemas.common import SuccessResponse
from hostel_lifecycle.schemas.semester import (
    GlobalSemesterCreate,
    GlobalSemesterResponse,
    GlobalSemesterUpdate,
)
from hostel_lifecycle.services.semester import GlobalSemesterService

router = APIRouter(
    prefix="/global-semesters",
    tags=["Global Semesters"],
    dependencies=[Depends(deps.require_super_admin)],
)


@router.post("", response_model=SuccessResponse[GlobalSemesterResponse], status_code=status.HTTP_201_CREATED)
def create_global_semester(
    payload: GlobalSemesterCreate,
    service: GlobalSemesterService = Depends(deps.get_global_semester_service),
):
    template = service.create(payload.name, payload.description)
    return SuccessResponse.create(GlobalSemesterResponse.model_validate(template))


@router.get("", response_model=SuccessResponse[List[GlobalSemesterResponse]])
def list_global_semesters(service: GlobalSemesterService = Depends(deps.get_global_semester_service)):
    return SuccessResponse.create([GlobalSemesterResponse.model_validate(t) for t in service.list_all()])


@router.patch("/{global_semester_id}", response_model=SuccessResponse[GlobalSemesterResponse])
def update_global_semester(
    global_semester_id: UUID,
    payload: GlobalSemesterUpdate,
    service: GlobalSemesterService = Depends(deps.get_global_semester_service),
):
    template = service.update(
        global_semester_id,
        name=payload.name,
        description=payload.description,
        is_active=payload.is_active,
    )
    return SuccessResponse.create(GlobalSemesterResponse.model_validate(template))


@router.delete("/{global_semester_id}", response_model=SuccessResponse[Dict[str, bool]])
def delete_global_semester(
    global_semester_id: UUID,
    service: GlobalSemesterService = Depends(deps.get_global_semester_service),
):
    service.delete(global_semester_id)
    return SuccessResponse.create({"deleted": True})
