"""
Student registration schemas.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field

from hostel_lifecycle.models.base.enums import UserRole
from hostel_lifecycle.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema
from hostel_lifecycle.schemas.payment import PaymentResponse
from hostel_lifecycle.schemas.room import AssignmentResponse
from hostel_lifecycle.schemas.semester import EnrollmentResponse

__all__ = ["StudentRegistration", "StudentResponse", "RegistrationResponse"]


class StudentRegistration(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    room_id: UUID
    initial_payment_amount: Decimal = Field(..., gt=0, description="Booking fee")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    phone: Optional[str] = Field(default=None, max_length=20)
    access_number: Optional[str] = Field(default=None, max_length=50)
    course: Optional[str] = Field(default=None, max_length=255)
    guardian_name: Optional[str] = Field(default=None, max_length=255)
    guardian_phone: Optional[str] = Field(default=None, max_length=20)


class StudentResponse(BaseResponseSchema):
    email: str
    name: str
    phone: Optional[str] = None
    role: UserRole
    hostel_id: Optional[UUID] = None
    access_number: Optional[str] = None
    course: Optional[str] = None


class RegistrationResponse(BaseSchema):
    student: StudentResponse
    enrollment: EnrollmentResponse
    assignment: AssignmentResponse
    payment: PaymentResponse
    balance: Decimal
