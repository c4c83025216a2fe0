"""
Notification boundary.

The engine hands a fully composed AuditNotification to a Notifier; the
transport configuration belongs to the notifier, never to the engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class Priority(Enum):
    """Message priority, mapped to the X-Priority header by SMTP."""
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


@dataclass(frozen=True)
class AuditNotification:
    """
    A composed audit message.

    Attributes:
        subject: Message subject
        html_body: HTML body
        recipients: Ordered recipient addresses
        priority: Message priority
        is_report: True for report-only messages (the test passed)
        audit_name: Name of the audit the message is about
    """
    subject: str
    html_body: str
    recipients: tuple[str, ...] = field(default_factory=tuple)
    priority: Priority = Priority.HIGH
    is_report: bool = False
    audit_name: str = ""


class Notifier(Protocol):
    """Transport that delivers audit notifications."""

    def send(self, notification: AuditNotification) -> None:
        """Deliver the notification. Blocking."""
        ...


class LoggingNotifier:
    """Notifier that only logs; used for dry runs and hosts without SMTP."""

    def __init__(self) -> None:
        self.sent: list[AuditNotification] = []

    def send(self, notification: AuditNotification) -> None:
        self.sent.append(notification)
        logger.info(
            "[dry-run] %s '%s' to %s",
            "Report" if notification.is_report else "Failure notification",
            notification.subject,
            ", ".join(notification.recipients) or "<no recipients>",
        )
