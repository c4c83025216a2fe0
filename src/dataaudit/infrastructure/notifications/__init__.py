"""
Notification package.

Composes audit messages and delivers them through a Notifier.
"""

from dataaudit.infrastructure.notifications.composer import (
    NotificationComposer,
    compose_notification,
)
from dataaudit.infrastructure.notifications.message import (
    AuditNotification,
    LoggingNotifier,
    Notifier,
    Priority,
)
from dataaudit.infrastructure.notifications.smtp import SmtpNotifier

__all__ = [
    "AuditNotification",
    "LoggingNotifier",
    "NotificationComposer",
    "Notifier",
    "Priority",
    "SmtpNotifier",
    "compose_notification",
]
