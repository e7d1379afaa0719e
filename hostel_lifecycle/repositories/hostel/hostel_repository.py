"""
Hostel and user repositories.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from hostel_lifecycle.models.base.enums import UserRole
from hostel_lifecycle.models.hostel import Hostel, User
from hostel_lifecycle.repositories.base.base_repository import BaseRepository

NOTIFIABLE_STAFF_ROLES = (UserRole.HOSTEL_ADMIN, UserRole.CUSTODIAN)


class HostelRepository(BaseRepository[Hostel]):
    """Repository for hostel tenants."""

    model = Hostel

    def set_current_subscription(self, hostel: Hostel, subscription_id: UUID) -> Hostel:
        hostel.current_subscription_id = subscription_id
        self.session.flush()
        return hostel


class UserRepository(BaseRepository[User]):
    """Repository for portal users."""

    model = User

    def find_by_email(self, email: str) -> Optional[User]:
        query = select(User).where(User.email == email.strip().lower())
        return self.session.execute(query).scalar_one_or_none()

    def find_student_in_hostel(self, user_id: UUID, hostel_id: UUID) -> Optional[User]:
        query = select(User).where(
            User.id == user_id,
            User.hostel_id == hostel_id,
            User.role == UserRole.STUDENT,
        )
        return self.session.execute(query).scalar_one_or_none()

    def get_staff_recipients(self, hostel_id: UUID) -> List[User]:
        """Hostel admins and custodians who receive subscription notices."""
        query = (
            select(User)
            .where(
                User.hostel_id == hostel_id,
                User.role.in_(NOTIFIABLE_STAFF_ROLES),
                User.is_active.is_(True),
            )
            .order_by(User.email)
        )
        return list(self.session.execute(query).scalars().all())

    def get_super_admins(self) -> List[User]:
        query = (
            select(User)
            .where(User.role == UserRole.SUPER_ADMIN, User.is_active.is_(True))
            .order_by(User.email)
        )
        return list(self.session.execute(query).scalars().all())

    def get_students(self, hostel_id: UUID) -> List[User]:
        query = (
            select(User)
            .where(User.hostel_id == hostel_id, User.role == UserRole.STUDENT)
            .order_by(User.name)
        )
        return list(self.session.execute(query).scalars().all())

    def get_by_ids(self, user_ids: List[UUID]) -> List[User]:
        if not user_ids:
            return []
        query = select(User).where(User.id.in_(user_ids))
        return list(self.session.execute(query).scalars().all())
