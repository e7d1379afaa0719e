"""
Base service class providing common functionality for all services.
"""

from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from hostel_lifecycle.config.logging import get_logger
from hostel_lifecycle.config.settings import Settings, settings as default_settings
from hostel_lifecycle.services.common.unit_of_work import UnitOfWork
from hostel_lifecycle.services.notification import NotificationDispatcher


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and settings
    - Transaction scope through ``UnitOfWork``
    - Best-effort notification after commit
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        notifier: Optional[NotificationDispatcher] = None,
        app_settings: Optional[Settings] = None,
    ):
        """
        Initialize base service.

        Args:
            session_factory: Callable returning a new SQLAlchemy session
            notifier: Notification dispatcher (defaults to the SMTP/log dispatcher)
            app_settings: Settings override, mainly for tests
        """
        self.session_factory = session_factory
        self.settings = app_settings or default_settings
        self.notifier = notifier or NotificationDispatcher(self.settings)
        self._logger = get_logger(self.__class__.__name__)

    def transaction(self) -> UnitOfWork:
        """Start a unit of work; commits on clean exit, rolls back otherwise."""
        return UnitOfWork(self.session_factory)

    def _notify(self, recipient_email: str, template_kind: str, template_data: Dict[str, Any]) -> bool:
        """Send a notification; failures are logged and never propagate."""
        try:
            delivered = self.notifier.notify(recipient_email, template_kind, template_data)
        except Exception:
            self._logger.error(
                f"Notifier raised while sending {template_kind} to {recipient_email}",
                exc_info=True,
            )
            return False
        if not delivered:
            self._logger.warning(f"Notification {template_kind} to {recipient_email} was not delivered")
        return delivered
