"""
Unit tests for the daily subscription sweeps

Covers exact-day expiry notices, automatic expiry and the super-admin digest.
"""
from datetime import timedelta

import pytest

from hostel_lifecycle.models import HostelSubscription
from hostel_lifecycle.models.base.enums import SubscriptionStatus, UserRole
from hostel_lifecycle.services.notification import templates
from hostel_lifecycle.services.subscription import SubscriptionNotificationService

from tests.conftest import NOW


@pytest.fixture
def service(session_factory, notifier, app_settings):
    return SubscriptionNotificationService(session_factory, notifier, app_settings)


@pytest.fixture
def staffed_hostel(build):
    """Hostel with one admin, one custodian, one student and an inactive admin"""

    def make(name):
        hostel = build.hostel(name)
        slug = name.lower().replace(" ", "")
        build.user(hostel, role=UserRole.HOSTEL_ADMIN, email=f"admin@{slug}.ac.ug")
        build.user(hostel, role=UserRole.CUSTODIAN, email=f"custodian@{slug}.ac.ug")
        build.user(hostel, role=UserRole.STUDENT, email=f"student@{slug}.ac.ug")
        build.user(hostel, role=UserRole.HOSTEL_ADMIN, email=f"former@{slug}.ac.ug", is_active=False)
        return hostel

    return make


class TestExpiringSubscriptions:
    """Test per-hostel expiry notices and automatic expiry"""

    def test_seven_days_left_notifies_staff(self, service, build, notifier, staffed_hostel):
        """Exactly one subscription_expiring per admin/custodian; status unchanged"""
        hostel = staffed_hostel("Hostel Two")
        subscription = build.subscription(hostel, build.plan(name="Termly"), end_date=NOW + timedelta(days=7))

        report = service.check_and_notify_expiring_subscriptions(now=NOW)

        assert notifier.recipients(templates.SUBSCRIPTION_EXPIRING) == [
            "admin@hosteltwo.ac.ug",
            "custodian@hosteltwo.ac.ug",
        ]
        assert len(notifier.sent) == 2
        _, _, data = notifier.sent[0]
        assert data["days_left"] == 7
        assert data["plan_name"] == "Termly"
        assert data["hostel_name"] == "Hostel Two"
        assert build.get(HostelSubscription, subscription.id).status == SubscriptionStatus.ACTIVE
        assert report.transitioned == 0

    @pytest.mark.parametrize("days", [30, 15, 7, 3, 1])
    def test_each_notice_day(self, service, build, notifier, staffed_hostel, days):
        hostel = staffed_hostel("Hostel N")
        build.subscription(hostel, build.plan(), end_date=NOW + timedelta(days=days))

        service.check_and_notify_expiring_subscriptions(now=NOW)

        assert len(notifier.of_kind(templates.SUBSCRIPTION_EXPIRING)) == 2

    @pytest.mark.parametrize("days", [29, 14, 8, 2])
    def test_other_days_are_silent(self, service, build, notifier, staffed_hostel, days):
        """Notices are edge-triggered on exact day counts"""
        hostel = staffed_hostel("Hostel Quiet")
        build.subscription(hostel, build.plan(), end_date=NOW + timedelta(days=days))

        service.check_and_notify_expiring_subscriptions(now=NOW)

        assert notifier.sent == []

    def test_lapsed_subscription_is_expired(self, service, build, notifier, staffed_hostel):
        """end_date = now - 1 day: status expired and one subscription_expired per recipient"""
        hostel = staffed_hostel("Hostel Three")
        subscription = build.subscription(hostel, build.plan(), end_date=NOW - timedelta(days=1))

        report = service.check_and_notify_expiring_subscriptions(now=NOW)

        assert build.get(HostelSubscription, subscription.id).status == SubscriptionStatus.EXPIRED
        assert notifier.recipients(templates.SUBSCRIPTION_EXPIRED) == [
            "admin@hostelthree.ac.ug",
            "custodian@hostelthree.ac.ug",
        ]
        assert notifier.of_kind(templates.SUBSCRIPTION_EXPIRING) == []
        assert report.transitioned == 1
        assert report.notifications_sent == 2

    def test_expired_once_only(self, service, build, notifier, staffed_hostel):
        hostel = staffed_hostel("Hostel Once")
        build.subscription(hostel, build.plan(), end_date=NOW - timedelta(days=2))

        service.check_and_notify_expiring_subscriptions(now=NOW)
        service.check_and_notify_expiring_subscriptions(now=NOW + timedelta(days=1))

        assert len(notifier.of_kind(templates.SUBSCRIPTION_EXPIRED)) == 2

    def test_expiry_survives_notification_failure(self, session_factory, app_settings, build, staffed_hostel):
        from tests.conftest import RecordingNotifier

        failing = RecordingNotifier(fail_for={"admin@hostelfour.ac.ug"})
        service = SubscriptionNotificationService(session_factory, failing, app_settings)
        hostel = staffed_hostel("Hostel Four")
        subscription = build.subscription(hostel, build.plan(), end_date=NOW - timedelta(days=3))

        report = service.check_and_notify_expiring_subscriptions(now=NOW)

        assert build.get(HostelSubscription, subscription.id).status == SubscriptionStatus.EXPIRED
        assert report.notifications_failed == 1
        assert report.notifications_sent == 1

    def test_hostel_without_staff(self, service, build, notifier):
        hostel = build.hostel("Empty Hostel")
        subscription = build.subscription(hostel, build.plan(), end_date=NOW - timedelta(days=1))

        report = service.check_and_notify_expiring_subscriptions(now=NOW)

        assert build.get(HostelSubscription, subscription.id).status == SubscriptionStatus.EXPIRED
        assert notifier.sent == []
        assert report.failed == 0

    def test_failure_isolated_per_subscription(self, service, build, notifier, staffed_hostel, monkeypatch):
        bad_hostel = staffed_hostel("Hostel Bad")
        good_hostel = staffed_hostel("Hostel Good")
        bad = build.subscription(bad_hostel, build.plan(), end_date=NOW - timedelta(days=5))
        good = build.subscription(good_hostel, build.plan(), end_date=NOW - timedelta(days=2))

        original = SubscriptionNotificationService._expire

        def flaky(self, subscription_id):
            if subscription_id == bad.id:
                raise RuntimeError("lock timeout")
            return original(self, subscription_id)

        monkeypatch.setattr(SubscriptionNotificationService, "_expire", flaky)

        report = service.check_and_notify_expiring_subscriptions(now=NOW)

        assert report.failed == 1
        assert build.get(HostelSubscription, bad.id).status == SubscriptionStatus.ACTIVE
        assert build.get(HostelSubscription, good.id).status == SubscriptionStatus.EXPIRED


class TestSuperAdminDigest:
    """Test the super-admin digest"""

    def test_digest_lists_expiring_subscriptions(self, service, build, notifier):
        build.user(role=UserRole.SUPER_ADMIN, email="root@platform.ac.ug", name="Root")
        build.user(role=UserRole.SUPER_ADMIN, email="ops@platform.ac.ug", name="Ops")
        plan = build.plan()
        build.subscription(build.hostel("Alpha"), plan, end_date=NOW + timedelta(days=5))
        build.subscription(build.hostel("Beta"), plan, end_date=NOW + timedelta(days=25))
        build.subscription(build.hostel("Gamma"), plan, end_date=NOW + timedelta(days=45))

        report = service.notify_super_admin_about_expiring_subscriptions(now=NOW)

        assert notifier.recipients(templates.SUBSCRIPTION_DIGEST) == ["ops@platform.ac.ug", "root@platform.ac.ug"]
        _, _, data = notifier.sent[0]
        assert [item["hostel_name"] for item in data["subscriptions"]] == ["Alpha", "Beta"]
        assert data["subscriptions"][0]["days_left"] == 5
        assert report.examined == 2

    def test_nothing_expiring_sends_nothing(self, service, build, notifier):
        build.user(role=UserRole.SUPER_ADMIN, email="root@platform.ac.ug")
        build.subscription(build.hostel(), build.plan(), end_date=NOW + timedelta(days=90))

        service.notify_super_admin_about_expiring_subscriptions(now=NOW)

        assert notifier.sent == []

    def test_digest_ignores_expired_rows(self, service, build, notifier):
        build.user(role=UserRole.SUPER_ADMIN, email="root@platform.ac.ug")
        build.subscription(
            build.hostel(), build.plan(), end_date=NOW + timedelta(days=5), status=SubscriptionStatus.EXPIRED
        )

        service.notify_super_admin_about_expiring_subscriptions(now=NOW)

        assert notifier.sent == []
