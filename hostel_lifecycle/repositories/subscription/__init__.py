from hostel_lifecycle.repositories.subscription.subscription_repository import (
    SubscriptionPlanRepository,
    SubscriptionRepository,
)

__all__ = ["SubscriptionPlanRepository", "SubscriptionRepository"]
