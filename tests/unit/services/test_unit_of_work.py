"""
Unit tests for UnitOfWork transaction handling
"""
from decimal import Decimal

import pytest

from hostel_lifecycle.models import SubscriptionPlan
from hostel_lifecycle.repositories.subscription import SubscriptionPlanRepository
from hostel_lifecycle.services.common.errors import NotFoundError, StoreError
from hostel_lifecycle.services.common.unit_of_work import UnitOfWork


def plan_data(name):
    return {
        "name": name,
        "duration_months": 1,
        "price_per_month": Decimal("1"),
        "total_price": Decimal("1"),
        "is_active": True,
    }


class TestUnitOfWork:
    """Test commit, rollback and error translation"""

    def test_commits_on_clean_exit(self, session_factory, build):
        with UnitOfWork(session_factory) as uow:
            uow.get_repo(SubscriptionPlanRepository).create(plan_data("Monthly"))

        assert len(build.all(SubscriptionPlan)) == 1

    def test_service_errors_roll_back_and_propagate(self, session_factory, build):
        with pytest.raises(NotFoundError):
            with UnitOfWork(session_factory) as uow:
                uow.get_repo(SubscriptionPlanRepository).create(plan_data("Monthly"))
                raise NotFoundError("Hostel")

        assert build.all(SubscriptionPlan) == []

    def test_database_errors_become_store_errors(self, session_factory, build):
        build.plan(name="Monthly")

        with pytest.raises(StoreError) as exc_info:
            with UnitOfWork(session_factory) as uow:
                uow.get_repo(SubscriptionPlanRepository).create(plan_data("Monthly"))

        assert exc_info.value.details["error_type"] == "IntegrityError"
        assert len(build.all(SubscriptionPlan)) == 1

    def test_repositories_are_cached_per_unit(self, session_factory):
        with UnitOfWork(session_factory) as uow:
            assert uow.get_repo(SubscriptionPlanRepository) is uow.get_repo(SubscriptionPlanRepository)

    def test_get_repo_outside_context(self, session_factory):
        with pytest.raises(RuntimeError):
            UnitOfWork(session_factory).get_repo(SubscriptionPlanRepository)
