"""
Subscription Service.

Plan catalogue, subscribe/renew flows and the login gate that decides
whether a hostel's staff may sign in.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta

from hostel_lifecycle.models.base.enums import SubscriptionStatus
from hostel_lifecycle.models.subscription import HostelSubscription, SubscriptionPlan
from hostel_lifecycle.repositories.hostel import HostelRepository
from hostel_lifecycle.repositories.subscription import (
    SubscriptionPlanRepository,
    SubscriptionRepository,
)
from hostel_lifecycle.services.base import BaseService
from hostel_lifecycle.services.common.errors import ConflictError, NotFoundError, ValidationError
from hostel_lifecycle.services.common.validation import require_text

SUBSCRIPTION_MISSING = "SUBSCRIPTION_MISSING"
SUBSCRIPTION_EXPIRED = "SUBSCRIPTION_EXPIRED"


@dataclass
class AccessDecision:
    """Result of the login gate for one hostel."""

    allowed: bool
    code: Optional[str] = None
    message: Optional[str] = None
    subscription_id: Optional[UUID] = None
    end_date: Optional[datetime] = None
    days_left: Optional[int] = None
    warning_days_left: Optional[int] = None


class SubscriptionService(BaseService):
    """Subscription lifecycle operations invoked from the API layer."""

    # ==================== PLANS ====================

    def create_plan(
        self,
        name: str,
        duration_months: int,
        price_per_month: Decimal,
        description: Optional[str] = None,
        total_price: Optional[Decimal] = None,
    ) -> SubscriptionPlan:
        name = require_text(name, "name")
        if duration_months <= 0:
            raise ValidationError("Duration must be at least one month", field="duration_months")
        price_per_month = Decimal(price_per_month)
        if price_per_month < 0:
            raise ValidationError("Price cannot be negative", field="price_per_month")
        if total_price is None:
            total_price = price_per_month * duration_months

        with self.transaction() as uow:
            plans = uow.get_repo(SubscriptionPlanRepository)
            if plans.find_by_name(name) is not None:
                raise ConflictError(f"Plan '{name}' already exists", conflicting_field="name")
            return plans.create(
                {
                    "name": name,
                    "description": description,
                    "duration_months": duration_months,
                    "price_per_month": price_per_month,
                    "total_price": Decimal(total_price),
                    "is_active": True,
                }
            )

    def list_active_plans(self) -> List[SubscriptionPlan]:
        with self.transaction() as uow:
            return uow.get_repo(SubscriptionPlanRepository).list_active()

    def deactivate_plan(self, plan_id: UUID) -> SubscriptionPlan:
        with self.transaction() as uow:
            plans = uow.get_repo(SubscriptionPlanRepository)
            plan = plans.find_by_id(plan_id)
            if plan is None:
                raise NotFoundError("Subscription plan", plan_id)
            return plans.update(plan, {"is_active": False})

    # ==================== SUBSCRIBE / RENEW ====================

    def subscribe(
        self,
        hostel_id: UUID,
        plan_id: UUID,
        now: Optional[datetime] = None,
        amount_paid: Optional[Decimal] = None,
        payment_method: Optional[str] = None,
        payment_reference: Optional[str] = None,
    ) -> HostelSubscription:
        """
        Start a subscription period now and make it the hostel's current one.

        ``end_date`` is ``now`` plus the plan's duration in calendar months.
        ``amount_paid`` defaults to the plan's total price.
        """
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            hostels = uow.get_repo(HostelRepository)
            hostel = hostels.find_by_id(hostel_id)
            if hostel is None:
                raise NotFoundError("Hostel", hostel_id)
            plan = uow.get_repo(SubscriptionPlanRepository).find_by_id(plan_id)
            if plan is None or not plan.is_active:
                raise NotFoundError("Subscription plan", plan_id)

            paid = plan.total_price if amount_paid is None else Decimal(amount_paid)
            if paid < 0:
                raise ValidationError("Amount paid cannot be negative", field="amount_paid")

            subscription = uow.get_repo(SubscriptionRepository).create(
                {
                    "hostel_id": hostel_id,
                    "plan_id": plan_id,
                    "start_date": now,
                    "end_date": now + relativedelta(months=plan.duration_months),
                    "amount_paid": paid,
                    "status": SubscriptionStatus.ACTIVE,
                    "payment_method": payment_method,
                    "payment_reference": payment_reference,
                }
            )
            hostels.set_current_subscription(hostel, subscription.id)

        self._logger.info(
            f"Hostel {hostel_id} subscribed to plan {plan_id} until {subscription.end_date.isoformat()}",
            extra={"hostel_id": hostel_id, "subscription_id": subscription.id},
        )
        return subscription

    def renew(
        self,
        hostel_id: UUID,
        plan_id: UUID,
        now: Optional[datetime] = None,
        amount_paid: Optional[Decimal] = None,
        payment_method: Optional[str] = None,
        payment_reference: Optional[str] = None,
    ) -> HostelSubscription:
        """Renewal creates a fresh period; earlier rows are left untouched."""
        return self.subscribe(
            hostel_id,
            plan_id,
            now=now,
            amount_paid=amount_paid,
            payment_method=payment_method,
            payment_reference=payment_reference,
        )

    # ==================== QUERIES ====================

    def list_for_hostel(self, hostel_id: UUID) -> List[HostelSubscription]:
        with self.transaction() as uow:
            return uow.get_repo(SubscriptionRepository).list_for_hostel(hostel_id)

    def list_expired_still_active(self, now: Optional[datetime] = None) -> List[HostelSubscription]:
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            return uow.get_repo(SubscriptionRepository).get_expired_still_active(now)

    # ==================== LOGIN GATE ====================

    def evaluate_access(self, hostel_id: UUID, now: Optional[datetime] = None) -> AccessDecision:
        """
        Decide whether staff of a hostel may log in.

        Uses the hostel's current subscription, falling back to the one with
        the latest end date.
        """
        now = now or datetime.utcnow()
        with self.transaction() as uow:
            subscriptions = uow.get_repo(SubscriptionRepository)
            hostel = uow.get_repo(HostelRepository).find_by_id(hostel_id)
            if hostel is None:
                raise NotFoundError("Hostel", hostel_id)

            subscription = None
            if hostel.current_subscription_id is not None:
                subscription = subscriptions.find_by_id(hostel.current_subscription_id)
            if subscription is None:
                subscription = subscriptions.get_latest_for_hostel(hostel_id)

        if subscription is None:
            return AccessDecision(
                allowed=False,
                code=SUBSCRIPTION_MISSING,
                message="This hostel has no subscription. Please contact the administrator.",
            )

        days_left = subscription.days_left(now)
        if subscription.status != SubscriptionStatus.ACTIVE or subscription.is_expired_at(now):
            return AccessDecision(
                allowed=False,
                code=SUBSCRIPTION_EXPIRED,
                message="Your hostel subscription has expired. Please renew to continue.",
                subscription_id=subscription.id,
                end_date=subscription.end_date,
                days_left=days_left,
            )

        warning = days_left if days_left <= self.settings.SUBSCRIPTION_WARNING_DAYS else None
        return AccessDecision(
            allowed=True,
            subscription_id=subscription.id,
            end_date=subscription.end_date,
            days_left=days_left,
            warning_days_left=warning,
        )
