from hostel_lifecycle.services.subscription.subscription_notification_service import (
    SubscriptionNotificationService,
)
from hostel_lifecycle.services.subscription.subscription_service import (
    SUBSCRIPTION_EXPIRED,
    SUBSCRIPTION_MISSING,
    AccessDecision,
    SubscriptionService,
)

__all__ = [
    "AccessDecision",
    "SubscriptionService",
    "SubscriptionNotificationService",
    "SUBSCRIPTION_EXPIRED",
    "SUBSCRIPTION_MISSING",
]
