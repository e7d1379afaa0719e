"""
Notification dispatcher.

Renders lifecycle emails and hands them to SMTP. When SMTP is not
configured the rendered message is logged instead. ``notify`` never
raises: delivery outcome is reported as a boolean.
"""

from typing import Any, Dict, Optional

from jinja2 import TemplateError

from hostel_lifecycle.config.logging import get_logger
from hostel_lifecycle.config.settings import Settings, settings as default_settings
from hostel_lifecycle.services.notification import templates
from hostel_lifecycle.utils.email import EmailConfig, EmailError, EmailMessage, send_email


class NotificationDispatcher:
    """Sends one templated email per call."""

    def __init__(self, app_settings: Optional[Settings] = None) -> None:
        self._settings = app_settings or default_settings
        self._logger = get_logger(self.__class__.__name__)
        self._email_config = (
            EmailConfig.from_settings(self._settings) if self._settings.smtp_configured() else None
        )

    @property
    def delivers_email(self) -> bool:
        return self._email_config is not None

    def notify(self, recipient_email: str, template_kind: str, template_data: Dict[str, Any]) -> bool:
        """
        Render and send a notification.

        Args:
            recipient_email: Destination address
            template_kind: One of ``templates.TEMPLATE_KINDS``
            template_data: Values referenced by the template

        Returns:
            True when the message was sent (or logged because SMTP is off)
        """
        context = {"portal_name": self._settings.PORTAL_NAME, **template_data}
        try:
            subject, body_text, body_html = templates.render(template_kind, context)
            message = EmailMessage(
                subject=subject, to=[recipient_email], body_text=body_text, body_html=body_html
            )
        except (KeyError, TemplateError, EmailError) as e:
            self._logger.error(
                f"Could not build {template_kind} notification for {recipient_email}: {e}"
            )
            return False

        if self._email_config is None:
            self._logger.info(
                f"SMTP not configured; {template_kind} email to {recipient_email}: {subject}"
            )
            return True

        try:
            send_email(message, self._email_config)
        except EmailError as e:
            self._logger.warning(f"Delivery of {template_kind} to {recipient_email} failed: {e}")
            return False

        self._logger.info(f"Sent {template_kind} email to {recipient_email}")
        return True
