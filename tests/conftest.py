"""
Hostel lifecycle - test configuration and fixtures
"""
import os
import tempfile
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Set testing environment before the package reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['CACHE_BACKEND'] = 'memory'
os.environ['LOG_DIR'] = tempfile.mkdtemp(prefix='hostel-lifecycle-logs-')
os.environ['LOG_JSON'] = 'false'
os.environ.pop('SMTP_HOST', None)

from hostel_lifecycle.config.database import build_session_factory, init_db
from hostel_lifecycle.config.settings import Settings
from hostel_lifecycle.models import (
    Hostel,
    HostelSubscription,
    Payment,
    Room,
    Semester,
    SemesterEnrollment,
    StudentRoomAssignment,
    SubscriptionPlan,
    User,
)
from hostel_lifecycle.models.base.enums import (
    AssignmentStatus,
    EnrollmentStatus,
    PaymentPurpose,
    RoomStatus,
    SemesterStatus,
    SubscriptionStatus,
    UserRole,
)
from hostel_lifecycle.services.base import CacheService, MemoryCacheClient

NOW = datetime(2024, 1, 11, 8, 0, 0)
TODAY = NOW.date()


class RecordingNotifier:
    """Notification dispatcher fake that records every call."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def notify(self, recipient_email, template_kind, template_data):
        self.sent.append((recipient_email, template_kind, dict(template_data)))
        return recipient_email not in self.fail_for

    def of_kind(self, template_kind):
        return [entry for entry in self.sent if entry[1] == template_kind]

    def recipients(self, template_kind):
        return sorted(email for email, kind, _ in self.sent if kind == template_kind)


class Builder:
    """Inserts fixture rows, each in its own committed session."""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._counter = 0

    def _next(self):
        self._counter += 1
        return self._counter

    def _save(self, instance):
        session = self.session_factory()
        try:
            session.add(instance)
            session.commit()
            return instance
        finally:
            session.close()

    def hostel(self, name=None):
        return self._save(Hostel(name=name or f"Hostel {self._next()}", is_active=True))

    def user(self, hostel=None, role=UserRole.STUDENT, email=None, name=None, is_active=True):
        n = self._next()
        return self._save(
            User(
                email=email or f"user{n}@hostel.ac.ug",
                name=name or f"User {n}",
                role=role,
                hostel_id=hostel.id if hostel else None,
                is_active=is_active,
            )
        )

    def room(self, hostel, room_number=None, capacity=2, price=Decimal("500000"), status=RoomStatus.AVAILABLE):
        return self._save(
            Room(
                hostel_id=hostel.id,
                room_number=room_number or f"R{self._next()}",
                capacity=capacity,
                price=price,
                status=status,
            )
        )

    def semester(
        self,
        hostel,
        name=None,
        start_date=date(2023, 9, 1),
        end_date=date(2024, 1, 10),
        status=SemesterStatus.ACTIVE,
        is_current=False,
    ):
        return self._save(
            Semester(
                hostel_id=hostel.id,
                name=name or f"Semester {self._next()}",
                academic_year="2023/2024",
                start_date=start_date,
                end_date=end_date,
                status=status,
                is_current=is_current,
            )
        )

    def enrollment(self, semester, user, room=None, status=EnrollmentStatus.ACTIVE):
        return self._save(
            SemesterEnrollment(
                semester_id=semester.id,
                user_id=user.id,
                room_id=room.id if room else None,
                enrollment_status=status,
                enrollment_date=NOW - timedelta(days=90),
            )
        )

    def assignment(self, user, room, semester=None, status=AssignmentStatus.ACTIVE):
        return self._save(
            StudentRoomAssignment(
                user_id=user.id,
                room_id=room.id,
                semester_id=semester.id if semester else None,
                status=status,
                assigned_at=NOW - timedelta(days=90),
            )
        )

    def payment(self, hostel, user, semester, amount, purpose=PaymentPurpose.RENT):
        return self._save(
            Payment(
                user_id=user.id,
                hostel_id=hostel.id,
                semester_id=semester.id if semester else None,
                amount=Decimal(amount),
                currency="UGX",
                purpose=purpose,
                paid_at=NOW,
            )
        )

    def plan(self, name=None, duration_months=6, price_per_month=Decimal("100000")):
        return self._save(
            SubscriptionPlan(
                name=name or f"Plan {self._next()}",
                duration_months=duration_months,
                price_per_month=price_per_month,
                total_price=price_per_month * duration_months,
                is_active=True,
            )
        )

    def subscription(self, hostel, plan, end_date, start_date=None, status=SubscriptionStatus.ACTIVE, current=True):
        subscription = self._save(
            HostelSubscription(
                hostel_id=hostel.id,
                plan_id=plan.id,
                start_date=start_date or end_date - timedelta(days=180),
                end_date=end_date,
                amount_paid=plan.total_price,
                status=status,
            )
        )
        if current:
            session = self.session_factory()
            try:
                session.get(Hostel, hostel.id).current_subscription_id = subscription.id
                session.commit()
            finally:
                session.close()
        return subscription

    def get(self, model, ident):
        session = self.session_factory()
        try:
            return session.get(model, ident)
        finally:
            session.close()

    def all(self, model, **filters):
        session = self.session_factory()
        try:
            return session.query(model).filter_by(**filters).all()
        finally:
            session.close()


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    test_engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app_settings():
    return Settings(ENVIRONMENT='testing', SMTP_HOST=None)


@pytest.fixture
def cache():
    return CacheService(MemoryCacheClient(), namespace='payments', default_ttl=10)


@pytest.fixture
def build(session_factory):
    return Builder(session_factory)
