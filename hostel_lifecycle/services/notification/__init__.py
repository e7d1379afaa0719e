from hostel_lifecycle.services.notification.notification_dispatcher import NotificationDispatcher

__all__ = ["NotificationDispatcher"]
