"""
Hostel (tenant) and user models.

Every lifecycle entity is owned by exactly one hostel; users carry
the role that decides who receives lifecycle notifications.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from hostel_lifecycle.models.base.base_model import TimestampModel
from hostel_lifecycle.models.base.enums import UserRole
from hostel_lifecycle.models.base.mixins import UUIDMixin, enum_column

__all__ = ["Hostel", "User"]


class Hostel(UUIDMixin, TimestampModel):
    """
    Hostel tenant.

    ``current_subscription_id`` points at the subscription that is
    authoritative for login gating.
    """

    __tablename__ = "hostels"

    name: Mapped[str] = mapped_column(String(255), nullable=False, comment="Hostel name")
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    contact_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    current_subscription_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey(
            "hostel_subscriptions.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_hostels_current_subscription",
        ),
        nullable=True,
        comment="Subscription used for login gating",
    )


class User(UUIDMixin, TimestampModel):
    """Portal user: super admin, hostel staff or student."""

    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_hostel_role", "hostel_id", "role"),
    )

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    role: Mapped[UserRole] = mapped_column(enum_column(UserRole, "user_role"), nullable=False)
    hostel_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("hostels.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Student profile details captured at registration
    access_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    course: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    guardian_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    guardian_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
