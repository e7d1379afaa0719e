"""
Subscription plan and hostel subscription schemas.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import Field

from hostel_lifecycle.models.base.enums import SubscriptionStatus
from hostel_lifecycle.schemas.common.base import BaseCreateSchema, BaseResponseSchema, BaseSchema

__all__ = [
    "PlanCreate",
    "PlanResponse",
    "SubscribeRequest",
    "SubscriptionResponse",
    "AccessDecisionResponse",
]


class PlanCreate(BaseCreateSchema):
    name: str = Field(..., min_length=1, max_length=100)
    duration_months: int = Field(..., gt=0)
    price_per_month: Decimal = Field(..., ge=0)
    total_price: Optional[Decimal] = Field(default=None, ge=0, description="Defaults to price x months")
    description: Optional[str] = None


class PlanResponse(BaseResponseSchema):
    name: str
    description: Optional[str] = None
    duration_months: int
    price_per_month: Decimal
    total_price: Decimal
    is_active: bool


class SubscribeRequest(BaseCreateSchema):
    plan_id: UUID
    amount_paid: Optional[Decimal] = Field(default=None, ge=0)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    payment_reference: Optional[str] = Field(default=None, max_length=100)


class SubscriptionResponse(BaseResponseSchema):
    hostel_id: UUID
    plan_id: UUID
    start_date: datetime
    end_date: datetime
    amount_paid: Decimal
    status: SubscriptionStatus
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None


class AccessDecisionResponse(BaseSchema):
    allowed: bool
    code: Optional[str] = None
    message: Optional[str] = None
    subscription_id: Optional[UUID] = None
    end_date: Optional[datetime] = None
    days_left: Optional[int] = None
    warning_days_left: Optional[int] = None
