"""
Email notifier using SMTP.

Supports:
- HTML bodies with a plain text fallback
- STARTTLS and authenticated relays
- High priority headers for failure messages
"""

from __future__ import annotations

import logging
import re
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr

from dataaudit.domain.config.settings import SmtpSettings
from dataaudit.infrastructure.notifications.message import AuditNotification, Priority

logger = logging.getLogger(__name__)

_X_PRIORITY = {
    Priority.HIGH: "1 (Highest)",
    Priority.NORMAL: "3 (Normal)",
    Priority.LOW: "5 (Lowest)",
}

_TAG = re.compile(r"<[^>]+>")


class SmtpNotifier:
    """Delivers notifications through an SMTP relay."""

    def __init__(self, settings: SmtpSettings):
        """
        Initialize SMTP notifier.

        Args:
            settings: Relay host, sender and credentials
        """
        self.settings = settings

    def build_message(self, notification: AuditNotification) -> EmailMessage:
        """Build the MIME message for a notification."""
        message = EmailMessage()
        message["Subject"] = notification.subject
        message["From"] = formataddr((self.settings.sender_description, self.settings.sender))
        message["To"] = ", ".join(notification.recipients)
        message["X-Priority"] = _X_PRIORITY[notification.priority]
        if notification.priority is Priority.HIGH:
            message["Importance"] = "High"

        text_body = _TAG.sub("", notification.html_body.replace("<br/>", "\n"))
        message.set_content(text_body)
        message.add_alternative(notification.html_body, subtype="html")
        return message

    def send(self, notification: AuditNotification) -> None:
        """
        Send a notification.

        Raises:
            ValueError: If the notification has no recipients
            smtplib.SMTPException: If the relay rejects the message
        """
        if not notification.recipients:
            raise ValueError(f"No recipients for notification '{notification.subject}'")

        message = self.build_message(notification)
        settings = self.settings

        with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout) as server:
            if settings.use_tls:
                server.starttls(context=ssl.create_default_context())
            if settings.username:
                server.login(settings.username, settings.get_password() or "")
            server.send_message(message)

        logger.info(
            "Sent '%s' to %d recipient(s) via %s:%d",
            notification.subject, len(notification.recipients), settings.host, settings.port
        )
