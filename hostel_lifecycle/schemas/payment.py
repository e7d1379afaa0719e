"""
Payment schemas.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from hostel_lifecycle.models.base.enums import PaymentPurpose
from hostel_lifecycle.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "PaymentCreate",
    "PaymentResponse",
    "PaymentResultResponse",
    "StudentBalance",
    "PaymentSummaryResponse",
]


class PaymentCreate(BaseCreateSchema):
    user_id: UUID
    amount: Decimal = Field(..., gt=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    purpose: PaymentPurpose = PaymentPurpose.RENT
    payment_method: Optional[str] = Field(default=None, max_length=50)
    reference: Optional[str] = Field(default=None, max_length=100)


class PaymentResponse(BaseResponseSchema):
    user_id: UUID
    hostel_id: UUID
    semester_id: Optional[UUID] = None
    amount: Decimal
    currency: str
    purpose: PaymentPurpose
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    recorded_by: Optional[UUID] = None
    paid_at: datetime


class PaymentResultResponse(BaseSchema):
    payment: PaymentResponse
    total_paid: Decimal
    expected: Optional[Decimal] = None
    balance: Optional[Decimal] = None


class StudentBalance(BaseSchema):
    user_id: UUID
    name: str
    email: str
    room_number: Optional[str] = None
    expected: Optional[float] = None
    paid: float
    balance: Optional[float] = None
    status: str = Field(..., description="unassigned, paid, partial or unpaid")


class PaymentSummaryResponse(BaseSchema):
    hostel_id: UUID
    semester_id: Optional[UUID] = None
    total_collected: float
    total_outstanding: float
    students: List[StudentBalance]
