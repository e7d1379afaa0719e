"""
API v1 Router - aggregates the lifecycle endpoints.
"""

from fastapi import APIRouter

from hostel_lifecycle.api.v1.endpoints import (
    enrollments,
    global_semesters,
    payments,
    rooms,
    semesters,
    students,
    subscriptions,
)

router = APIRouter(
    responses={
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(global_semesters.router)
router.include_router(semesters.router)
router.include_router(enrollments.router)
router.include_router(rooms.router)
router.include_router(students.router)
router.include_router(payments.router)
router.include_router(subscriptions.router)
