"""
Subscription Models.

Billing plans and the per-hostel subscription periods that gate
staff logins.
"""

import math
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from hostel_lifecycle.models.base.base_model import TimestampModel
from hostel_lifecycle.models.base.enums import SubscriptionStatus
from hostel_lifecycle.models.base.mixins import UUIDMixin, enum_column

__all__ = ["SubscriptionPlan", "HostelSubscription"]

SECONDS_PER_DAY = 86400


class SubscriptionPlan(UUIDMixin, TimestampModel):
    """Catalogue entry a hostel subscribes to."""

    __tablename__ = "subscription_plans"
    __table_args__ = (
        CheckConstraint("duration_months > 0", name="ck_plans_duration_positive"),
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_months: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_month: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class HostelSubscription(UUIDMixin, TimestampModel):
    """
    One billing period of a hostel against a plan.

    Renewals create a new row; expired rows are never reactivated.
    """

    __tablename__ = "hostel_subscriptions"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_subscription_end_after_start"),
        CheckConstraint("amount_paid >= 0", name="ck_subscription_amount_positive"),
        Index("ix_subscription_status_end_date", "status", "end_date"),
        Index("ix_subscription_hostel_end_date", "hostel_id", "end_date"),
    )

    hostel_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=False,
        comment="Hostel ID",
    )
    plan_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("subscription_plans.id", ondelete="RESTRICT"),
        nullable=False,
        comment="Subscription plan ID",
    )
    start_date: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(), nullable=False)
    amount_paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    status: Mapped[SubscriptionStatus] = mapped_column(
        enum_column(SubscriptionStatus, "subscription_status"),
        nullable=False,
        default=SubscriptionStatus.ACTIVE,
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    def days_left(self, now: datetime) -> int:
        """Whole days until expiry, rounded up; negative once a full day past end."""
        return math.ceil((self.end_date - now).total_seconds() / SECONDS_PER_DAY)

    def is_expired_at(self, now: datetime) -> bool:
        return self.end_date < now
