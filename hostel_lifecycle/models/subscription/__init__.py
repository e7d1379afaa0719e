from hostel_lifecycle.models.subscription.subscription import HostelSubscription, SubscriptionPlan

__all__ = ["SubscriptionPlan", "HostelSubscription"]
