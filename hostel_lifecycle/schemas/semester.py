"""
Semester, global semester and enrollment schemas.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field, model_validator

from hostel_lifecycle.models.base.enums import EnrollmentStatus, SemesterStatus
from hostel_lifecycle.schemas.common.base import (
    BaseCreateSchema,
    BaseResponseSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "GlobalSemesterCreate",
    "GlobalSemesterUpdate",
    "GlobalSemesterResponse",
    "SemesterCreate",
    "SemesterStatusUpdate",
    "SemesterRollover",
    "SemesterResponse",
    "SemesterStatisticsResponse",
    "EnrollmentCreate",
    "EnrollmentStatusUpdate",
    "EnrollmentTransfer",
    "EnrollmentResponse",
]


# ==================== GLOBAL SEMESTERS ====================


class GlobalSemesterCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=100, description="Template name, e.g. 'Semester One'")
    description: Optional[str] = Field(default=None)


class GlobalSemesterUpdate(BaseUpdateSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class GlobalSemesterResponse(BaseResponseSchema):
    name: str
    description: Optional[str] = None
    is_active: bool


# ==================== SEMESTERS ====================


class _DateRange(BaseCreateSchema):
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def validate_dates(self):
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class SemesterCreate(_DateRange):
    name: str = Field(..., min_length=1, max_length=100)
    academic_year: str = Field(..., min_length=1, max_length=20, description="e.g. '2025/2026'")
    global_semester_id: Optional[UUID] = None


class SemesterRollover(_DateRange):
    name: str = Field(..., min_length=1, max_length=100)
    academic_year: str = Field(..., min_length=1, max_length=20)


class SemesterStatusUpdate(BaseUpdateSchema):
    status: SemesterStatus


class SemesterResponse(BaseResponseSchema):
    hostel_id: UUID
    global_semester_id: Optional[UUID] = None
    name: str
    academic_year: str
    start_date: date
    end_date: date
    is_current: bool
    status: SemesterStatus


class SemesterStatisticsResponse(BaseSchema):
    semester_id: UUID
    total_students: int
    active_students: int
    completed_students: int
    total_revenue: Decimal
    payment_count: int
    outstanding_balance: Decimal
    occupancy_rate: float = Field(..., description="Percentage of rooms with an active assignment")


# ==================== ENROLLMENTS ====================


class EnrollmentCreate(BaseCreateSchema):
    semester_id: UUID
    user_id: UUID
    room_id: Optional[UUID] = None


class EnrollmentStatusUpdate(BaseUpdateSchema):
    enrollment_status: EnrollmentStatus


class EnrollmentTransfer(BaseCreateSchema):
    new_semester_id: UUID


class EnrollmentResponse(BaseResponseSchema):
    semester_id: UUID
    user_id: UUID
    room_id: Optional[UUID] = None
    enrollment_status: EnrollmentStatus
    enrollment_date: datetime
    completed_at: Optional[datetime] = None
