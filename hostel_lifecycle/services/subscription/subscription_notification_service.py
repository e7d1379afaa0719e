"""
Daily subscription sweeps.

Notices go out on exact day counts only (``SUBSCRIPTION_NOTICE_DAYS``);
a run missed on a threshold day skips that notice for good.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional
from uuid import UUID

from hostel_lifecycle.models.subscription import HostelSubscription
from hostel_lifecycle.repositories.hostel import HostelRepository, UserRepository
from hostel_lifecycle.repositories.subscription import (
    SubscriptionPlanRepository,
    SubscriptionRepository,
)
from hostel_lifecycle.services.base import BaseService
from hostel_lifecycle.services.common.reports import SweepReport
from hostel_lifecycle.services.notification import templates

DATE_FORMAT = "%B %d, %Y"


@dataclass
class _SubscriptionSnapshot:
    id: UUID
    hostel_id: UUID
    hostel_name: str
    plan_name: str
    end_date: datetime
    days_left: int
    recipients: List[Dict[str, str]] = field(default_factory=list)


class SubscriptionNotificationService(BaseService):
    """Expiry notices, automatic expiry and the super-admin digest."""

    def check_and_notify_expiring_subscriptions(self, now: Optional[datetime] = None) -> SweepReport:
        """
        Walk active subscriptions in end-date order.

        - ``days_left`` in the notice days: one ``subscription_expiring``
          email per hostel admin/custodian, status unchanged.
        - ``days_left < 0``: status becomes ``expired`` (committed first),
          then one ``subscription_expired`` email per recipient.
        """
        now = now or datetime.utcnow()
        notice_days = set(self.settings.SUBSCRIPTION_NOTICE_DAYS)
        report = SweepReport(job="check_and_notify_expiring_subscriptions", started_at=now)

        with self.transaction() as uow:
            subscription_ids = [s.id for s in uow.get_repo(SubscriptionRepository).get_active_ordered_by_end()]
        report.examined = len(subscription_ids)

        for subscription_id in subscription_ids:
            try:
                snapshot = self._snapshot(subscription_id, now)
                if snapshot is None:
                    continue

                if snapshot.days_left in notice_days:
                    self._send_to_recipients(report, snapshot, templates.SUBSCRIPTION_EXPIRING)
                elif snapshot.days_left < 0:
                    if self._expire(subscription_id):
                        report.transitioned += 1
                        self._send_to_recipients(report, snapshot, templates.SUBSCRIPTION_EXPIRED)
            except Exception as e:
                self._logger.error(
                    f"Failed to process subscription {subscription_id}: {e}",
                    exc_info=True,
                    extra={"subscription_id": subscription_id},
                )
                report.record_failure(f"{subscription_id}: {e}")

        return report.finish(datetime.utcnow())

    def notify_super_admin_about_expiring_subscriptions(self, now: Optional[datetime] = None) -> SweepReport:
        """
        One digest per super admin listing every active subscription ending
        within ``SUPER_ADMIN_DIGEST_WINDOW_DAYS``. Nothing is sent when the
        list is empty.
        """
        now = now or datetime.utcnow()
        window_days = self.settings.SUPER_ADMIN_DIGEST_WINDOW_DAYS
        report = SweepReport(job="notify_super_admin_about_expiring_subscriptions", started_at=now)

        with self.transaction() as uow:
            expiring = uow.get_repo(SubscriptionRepository).get_expiring_between(
                now, now + timedelta(days=window_days)
            )
            items = [self._digest_item(uow, subscription, now) for subscription in expiring]
            admins = [(a.email, a.name) for a in uow.get_repo(UserRepository).get_super_admins()]
        report.examined = len(items)

        if not items:
            self._logger.info("No subscriptions expiring within the digest window")
            return report.finish(datetime.utcnow())

        for email, name in admins:
            report.record_notification(
                self._notify(
                    email,
                    templates.SUBSCRIPTION_DIGEST,
                    {"recipient_name": name, "subscriptions": items, "window_days": window_days},
                )
            )

        return report.finish(datetime.utcnow())

    # ==================== HELPERS ====================

    def _snapshot(self, subscription_id: UUID, now: datetime) -> Optional[_SubscriptionSnapshot]:
        with self.transaction() as uow:
            subscription = uow.get_repo(SubscriptionRepository).find_by_id(subscription_id)
            if subscription is None:
                return None
            hostel = uow.get_repo(HostelRepository).find_by_id(subscription.hostel_id)
            plan = uow.get_repo(SubscriptionPlanRepository).find_by_id(subscription.plan_id)
            recipients = [
                {"email": user.email, "name": user.name}
                for user in uow.get_repo(UserRepository).get_staff_recipients(subscription.hostel_id)
            ]
            return _SubscriptionSnapshot(
                id=subscription.id,
                hostel_id=subscription.hostel_id,
                hostel_name=hostel.name if hostel else "Your Hostel",
                plan_name=plan.name if plan else "",
                end_date=subscription.end_date,
                days_left=subscription.days_left(now),
                recipients=recipients,
            )

    def _expire(self, subscription_id: UUID) -> bool:
        with self.transaction() as uow:
            expired = uow.get_repo(SubscriptionRepository).mark_expired_if_active(subscription_id)
        if expired:
            self._logger.info(
                f"Subscription {subscription_id} expired",
                extra={"subscription_id": subscription_id},
            )
        return expired

    def _send_to_recipients(self, report: SweepReport, snapshot: _SubscriptionSnapshot, kind: str) -> None:
        if not snapshot.recipients:
            self._logger.warning(
                f"No admin or custodian found for hostel {snapshot.hostel_name}",
                extra={"hostel_id": snapshot.hostel_id},
            )
            return
        for recipient in snapshot.recipients:
            report.record_notification(
                self._notify(
                    recipient["email"],
                    kind,
                    {
                        "recipient_name": recipient["name"],
                        "hostel_name": snapshot.hostel_name,
                        "plan_name": snapshot.plan_name,
                        "end_date": snapshot.end_date.strftime(DATE_FORMAT),
                        "days_left": snapshot.days_left,
                    },
                )
            )

    @staticmethod
    def _digest_item(uow, subscription: HostelSubscription, now: datetime) -> Dict[str, object]:
        hostel = uow.get_repo(HostelRepository).find_by_id(subscription.hostel_id)
        return {
            "hostel_name": hostel.name if hostel else str(subscription.hostel_id),
            "end_date": subscription.end_date.strftime(DATE_FORMAT),
            "days_left": subscription.days_left(now),
        }
