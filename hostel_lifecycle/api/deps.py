"""
FastAPI dependencies.

Caller identity arrives from the upstream authentication layer as
``X-User-Id``, ``X-User-Role`` and ``X-Hostel-Id`` headers; nothing here
re-derives it.

Example usage in a router:
    @router.get("/current")
    def read_current(
        hostel_id: UUID = Depends(deps.require_hostel),
        service: SemesterService = Depends(deps.get_semester_service),
    ): ...
"""

from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from hostel_lifecycle.config import database
from hostel_lifecycle.config.settings import settings
from hostel_lifecycle.models.base.enums import UserRole
from hostel_lifecycle.services.base import CacheService
from hostel_lifecycle.services.common.errors import ValidationError
from hostel_lifecycle.services.notification import NotificationDispatcher
from hostel_lifecycle.services.payment import PaymentService
from hostel_lifecycle.services.payment.payment_service import build_summary_cache
from hostel_lifecycle.services.room import RoomOccupancyService
from hostel_lifecycle.services.semester import (
    EnrollmentService,
    GlobalSemesterService,
    SemesterService,
)
from hostel_lifecycle.services.student import StudentRegistrationService
from hostel_lifecycle.services.subscription import SubscriptionService

STAFF_ROLES = (UserRole.SUPER_ADMIN, UserRole.HOSTEL_ADMIN, UserRole.CUSTODIAN)


# --- Infrastructure -----------------------------------------------------------


def get_session_factory() -> Callable[[], Session]:
    return database.SessionLocal


def get_notifier() -> NotificationDispatcher:
    return NotificationDispatcher(settings)


def get_summary_cache() -> CacheService:
    return build_summary_cache(settings)


# --- Caller context -----------------------------------------------------------


@dataclass
class CallerContext:
    user_id: Optional[UUID]
    role: Optional[UserRole]
    hostel_id: Optional[UUID]


def get_caller(
    x_user_id: Optional[UUID] = Header(default=None),
    x_user_role: Optional[UserRole] = Header(default=None),
    x_hostel_id: Optional[UUID] = Header(default=None),
) -> CallerContext:
    return CallerContext(user_id=x_user_id, role=x_user_role, hostel_id=x_hostel_id)


def require_roles(*roles: UserRole) -> Callable[[CallerContext], CallerContext]:
    """Dependency factory rejecting callers whose role is not in ``roles``."""

    def dependency(caller: CallerContext = Depends(get_caller)) -> CallerContext:
        if caller.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role for this operation",
            )
        return caller

    return dependency


require_staff = require_roles(*STAFF_ROLES)
require_super_admin = require_roles(UserRole.SUPER_ADMIN)


def require_hostel(caller: CallerContext = Depends(require_staff)) -> UUID:
    if caller.hostel_id is None:
        raise ValidationError("X-Hostel-Id header is required", field="X-Hostel-Id")
    return caller.hostel_id


def hostel_scope(caller: CallerContext = Depends(require_staff)) -> Optional[UUID]:
    """
    Hostel whose records the caller may reach by id.

    Super admins reach every hostel and get ``None``; other staff are
    confined to their ``X-Hostel-Id``.
    """
    if caller.role == UserRole.SUPER_ADMIN:
        return None
    return require_hostel(caller)


# --- Services -----------------------------------------------------------------


def get_global_semester_service(
    session_factory=Depends(get_session_factory),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> GlobalSemesterService:
    return GlobalSemesterService(session_factory, notifier)


def get_semester_service(
    session_factory=Depends(get_session_factory),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> SemesterService:
    return SemesterService(session_factory, notifier)


def get_enrollment_service(
    session_factory=Depends(get_session_factory),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> EnrollmentService:
    return EnrollmentService(session_factory, notifier)


def get_room_service(
    session_factory=Depends(get_session_factory),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> RoomOccupancyService:
    return RoomOccupancyService(session_factory, notifier)


def get_registration_service(
    session_factory=Depends(get_session_factory),
    notifier: NotificationDispatcher = Depends(get_notifier),
    cache: CacheService = Depends(get_summary_cache),
) -> StudentRegistrationService:
    return StudentRegistrationService(session_factory, notifier, cache=cache)


def get_payment_service(
    session_factory=Depends(get_session_factory),
    notifier: NotificationDispatcher = Depends(get_notifier),
    cache: CacheService = Depends(get_summary_cache),
) -> PaymentService:
    return PaymentService(session_factory, notifier, cache=cache)


def get_subscription_service(
    session_factory=Depends(get_session_factory),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> SubscriptionService:
    return SubscriptionService(session_factory, notifier)
