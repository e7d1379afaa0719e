"""
Student payment model.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hostel_lifecycle.models.base.base_model import TimestampModel
from hostel_lifecycle.models.base.enums import PaymentPurpose
from hostel_lifecycle.models.base.mixins import UUIDMixin, enum_column

__all__ = ["Payment"]


class Payment(UUIDMixin, TimestampModel):
    """Money received from a student, tagged with the semester it was taken in."""

    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        Index("ix_payments_hostel_semester", "hostel_id", "semester_id"),
        Index("ix_payments_user_semester", "user_id", "semester_id"),
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    hostel_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("hostels.id", ondelete="CASCADE"), nullable=False
    )
    semester_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("semesters.id", ondelete="SET NULL"), nullable=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    purpose: Mapped[PaymentPurpose] = mapped_column(
        enum_column(PaymentPurpose, "payment_purpose"),
        nullable=False,
        default=PaymentPurpose.RENT,
    )
    payment_method: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    recorded_by: Mapped[Optional[UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True)
    paid_at: Mapped[datetime] = mapped_column(
        DateTime(), nullable=False, default=datetime.utcnow
    )
