"""
Payment Repository.
"""

from decimal import Decimal
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import func, select, update

from hostel_lifecycle.models.payment import Payment
from hostel_lifecycle.repositories.base.base_repository import BaseRepository


class PaymentRepository(BaseRepository[Payment]):
    """Repository for student payments."""

    model = Payment

    def total_paid(self, user_id: UUID, semester_id: UUID) -> Decimal:
        query = select(func.coalesce(func.sum(Payment.amount), 0)).where(
            Payment.user_id == user_id, Payment.semester_id == semester_id
        )
        return Decimal(str(self.session.execute(query).scalar_one()))

    def totals_by_user(self, hostel_id: UUID, semester_id: Optional[UUID] = None) -> Dict[UUID, Decimal]:
        query = (
            select(Payment.user_id, func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.hostel_id == hostel_id)
            .group_by(Payment.user_id)
        )
        if semester_id is not None:
            query = query.where(Payment.semester_id == semester_id)
        return {user_id: Decimal(str(total)) for user_id, total in self.session.execute(query).all()}

    def detach_semester(self, semester_id: UUID) -> None:
        self.session.execute(
            update(Payment)
            .where(Payment.semester_id == semester_id)
            .values(semester_id=None)
            .execution_options(synchronize_session="fetch")
        )
