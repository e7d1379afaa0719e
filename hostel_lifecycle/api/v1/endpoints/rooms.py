"""
Rooms and room assignments.
"""

from typing import Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, status

from hostel_lifecycle.api import deps
from hostel_lifecycle.schemas.common import SuccessResponse
from hostel_lifecycle.schemas.room import (
    AssignmentResponse,
    RoomAssign,
    RoomAvailabilityResponse,
    RoomCreate,
    RoomResponse,
    RoomUpdate,
)
from hostel_lifecycle.services.room import RoomAvailability, RoomOccupancyService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


def _availability(rows: List[RoomAvailability]) -> List[RoomAvailabilityResponse]:
    return [
        RoomAvailabilityResponse(
            room=RoomResponse.model_validate(row.room),
            current_occupants=row.current_occupants,
            available_spaces=row.available_spaces,
        )
        for row in rows
    ]


@router.post("", response_model=SuccessResponse[RoomResponse], status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: RoomOccupancyService = Depends(deps.get_room_service),
):
    room = service.create_room(
        hostel_id,
        payload.room_number,
        payload.price,
        capacity=payload.capacity,
        room_type=payload.room_type,
        description=payload.description,
    )
    return SuccessResponse.create(RoomResponse.model_validate(room))


@router.get("", response_model=SuccessResponse[List[RoomAvailabilityResponse]])
def list_rooms(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: RoomOccupancyService = Depends(deps.get_room_service),
):
    return SuccessResponse.create(_availability(service.list_rooms(hostel_id)))


@router.get("/available", response_model=SuccessResponse[List[RoomAvailabilityResponse]])
def list_available_rooms(
    hostel_id: UUID = Depends(deps.require_hostel),
    service: RoomOccupancyService = Depends(deps.get_room_service),
):
    return SuccessResponse.create(_availability(service.list_available(hostel_id)))


@router.patch("/{room_id}", response_model=SuccessResponse[RoomResponse])
def update_room(
    room_id: UUID,
    payload: RoomUpdate,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: RoomOccupancyService = Depends(deps.get_room_service),
):
    room = service.update_room(room_id, hostel_id, **payload.model_dump(exclude_unset=True))
    return SuccessResponse.create(RoomResponse.model_validate(room))


@router.delete("/{room_id}", response_model=SuccessResponse[Dict[str, bool]])
def delete_room(
    room_id: UUID,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: RoomOccupancyService = Depends(deps.get_room_service),
):
    service.delete_room(room_id, hostel_id)
    return SuccessResponse.create({"deleted": True})


@router.post("/{room_id}/assign", response_model=SuccessResponse[AssignmentResponse])
def assign_student(
    room_id: UUID,
    payload: RoomAssign,
    hostel_id: UUID = Depends(deps.require_hostel),
    service: RoomOccupancyService = Depends(deps.get_room_service),
):
    assignment = service.assign(payload.user_id, room_id, hostel_id, semester_id=payload.semester_id)
    return SuccessResponse.create(AssignmentResponse.model_validate(assignment))


@router.post("/students/{user_id}/vacate", response_model=SuccessResponse[Dict[str, int]])
def vacate_student(
    user_id: UUID,
    _: UUID = Depends(deps.require_hostel),
    service: RoomOccupancyService = Depends(deps.get_room_service),
):
    return SuccessResponse.create({"closed": service.vacate_student(user_id)})
