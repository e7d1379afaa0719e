"""
Email utilities: message structure, SMTP configuration and sending.
"""
from __future__ import annotations

import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from email_validator import EmailNotValidError, validate_email

from hostel_lifecycle.config.logging import get_logger
from hostel_lifecycle.config.settings import Settings

logger = get_logger(__name__)


class EmailError(Exception):
    """Custom exception for email operations."""
    pass


@dataclass
class EmailMessage:
    """Email message structure with validation."""
    subject: str
    to: list[str]
    body_text: str | None = None
    body_html: str | None = None

    def __post_init__(self) -> None:
        if not self.subject.strip():
            raise EmailError("Subject cannot be empty")

        if not self.to:
            raise EmailError("At least one recipient is required")

        if not self.body_text and not self.body_html:
            raise EmailError("Either body_text or body_html must be provided")

        for address in self.to:
            try:
                validate_email(address, check_deliverability=False)
            except EmailNotValidError as e:
                raise EmailError(f"Invalid recipient email: {address}") from e


@dataclass
class EmailConfig:
    """SMTP configuration."""
    smtp_host: str
    smtp_port: int
    username: str | None
    password: str | None
    use_tls: bool = True
    from_email: str | None = None
    from_name: str | None = None
    timeout: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> EmailConfig:
        return cls(
            smtp_host=settings.SMTP_HOST or "localhost",
            smtp_port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            use_tls=settings.SMTP_TLS,
            from_email=settings.EMAIL_FROM_ADDRESS or settings.SMTP_USER,
            from_name=settings.EMAIL_FROM_NAME,
        )

    @property
    def sender(self) -> str:
        address = self.from_email or self.username or ""
        return formataddr((self.from_name, address)) if self.from_name else address


def send_email(message: EmailMessage, config: EmailConfig) -> None:
    """Send an email using SMTP."""
    try:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = message.subject
        msg['From'] = config.sender
        msg['To'] = ', '.join(message.to)

        if message.body_text:
            msg.attach(MIMEText(message.body_text, 'plain'))
        if message.body_html:
            msg.attach(MIMEText(message.body_html, 'html'))

        with smtplib.SMTP(config.smtp_host, config.smtp_port, timeout=config.timeout) as server:
            if config.use_tls:
                server.starttls()

            if config.username and config.password:
                server.login(config.username, config.password)

            server.send_message(msg, to_addrs=message.to)

        logger.info(f"Email sent successfully to {len(message.to)} recipients")

    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send email: {e}")
        raise EmailError(f"Failed to send email: {e}") from e
