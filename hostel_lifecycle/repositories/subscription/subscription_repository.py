"""
Subscription Repository.

Plans, hostel subscription periods and the queries the daily
subscription sweep runs.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select

from hostel_lifecycle.models.base.enums import SubscriptionStatus
from hostel_lifecycle.models.subscription import HostelSubscription, SubscriptionPlan
from hostel_lifecycle.repositories.base.base_repository import BaseRepository


class SubscriptionPlanRepository(BaseRepository[SubscriptionPlan]):
    """Repository for subscription plans."""

    model = SubscriptionPlan

    def find_by_name(self, name: str) -> Optional[SubscriptionPlan]:
        query = select(SubscriptionPlan).where(SubscriptionPlan.name == name)
        return self.session.execute(query).scalar_one_or_none()

    def list_active(self) -> List[SubscriptionPlan]:
        query = (
            select(SubscriptionPlan)
            .where(SubscriptionPlan.is_active.is_(True))
            .order_by(SubscriptionPlan.duration_months)
        )
        return list(self.session.execute(query).scalars().all())


class SubscriptionRepository(BaseRepository[HostelSubscription]):
    """
    Repository for hostel subscriptions.
    """

    model = HostelSubscription

    # ==================== READ OPERATIONS ====================

    def get_active_ordered_by_end(self) -> List[HostelSubscription]:
        query = (
            select(HostelSubscription)
            .where(HostelSubscription.status == SubscriptionStatus.ACTIVE)
            .order_by(HostelSubscription.end_date)
        )
        return list(self.session.execute(query).scalars().all())

    def get_expiring_between(self, start: datetime, end: datetime) -> List[HostelSubscription]:
        query = (
            select(HostelSubscription)
            .where(
                HostelSubscription.status == SubscriptionStatus.ACTIVE,
                HostelSubscription.end_date >= start,
                HostelSubscription.end_date <= end,
            )
            .order_by(HostelSubscription.end_date)
        )
        return list(self.session.execute(query).scalars().all())

    def get_expired_still_active(self, now: datetime) -> List[HostelSubscription]:
        query = (
            select(HostelSubscription)
            .where(
                HostelSubscription.status == SubscriptionStatus.ACTIVE,
                HostelSubscription.end_date < now,
            )
            .order_by(HostelSubscription.end_date)
        )
        return list(self.session.execute(query).scalars().all())

    def get_latest_for_hostel(self, hostel_id: UUID) -> Optional[HostelSubscription]:
        query = (
            select(HostelSubscription)
            .where(HostelSubscription.hostel_id == hostel_id)
            .order_by(HostelSubscription.end_date.desc())
            .limit(1)
        )
        return self.session.execute(query).scalar_one_or_none()

    def list_for_hostel(self, hostel_id: UUID) -> List[HostelSubscription]:
        query = (
            select(HostelSubscription)
            .where(HostelSubscription.hostel_id == hostel_id)
            .order_by(HostelSubscription.start_date.desc())
        )
        return list(self.session.execute(query).scalars().all())

    # ==================== STATUS ====================

    def mark_expired_if_active(self, subscription_id: UUID) -> bool:
        """Expire a subscription unless another run already did."""
        subscription = self.find_by_id_for_update(subscription_id)
        if subscription is None or subscription.status != SubscriptionStatus.ACTIVE:
            return False
        subscription.status = SubscriptionStatus.EXPIRED
        self.session.flush()
        return True
