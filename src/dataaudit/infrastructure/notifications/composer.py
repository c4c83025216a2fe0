"""
Notification composer - renders audit messages from a Jinja2 template.

The body lists the tested statement, the failure message, the instructions
of every test and, when enabled, the rendered result table.
"""

from __future__ import annotations

import logging
from datetime import datetime

from jinja2 import Environment, PackageLoader, StrictUndefined

from dataaudit.domain.models import Audit
from dataaudit.domain.report_template import get_template
from dataaudit.domain.results import ResultSet
from dataaudit.infrastructure.html_report import render_result_set
from dataaudit.infrastructure.notifications.message import AuditNotification, Priority

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "notification.html.j2"
DEFAULT_SUBJECT_PREFIX = "Audit Failure - "


class NotificationComposer:
    """
    Builds AuditNotification objects for failed or reported tests.

    Features:
    - Jinja2 templating loaded from the package ``templates`` directory
    - Strict undefined variables, so template typos fail loudly
    """

    def __init__(self, template_name: str = TEMPLATE_NAME):
        self._env = Environment(
            loader=PackageLoader("dataaudit", "templates"),
            trim_blocks=True,
            lstrip_blocks=True,
            autoescape=False,  # data_html is pre-rendered; text fields use |e
            undefined=StrictUndefined,
        )
        self._template = self._env.get_template(template_name)

    def compose(
        self,
        audit: Audit,
        test_index: int,
        result_set: ResultSet,
        ran_at: datetime | None = None,
    ) -> AuditNotification:
        """
        Compose the message for one test.

        Args:
            audit: Audit the test belongs to
            test_index: Index of the failed or reported test
            result_set: Data returned for the test
            ran_at: Timestamp printed in the footer (defaults to now)

        Returns:
            AuditNotification ready for a Notifier
        """
        test = audit.tests[test_index]
        ran_at = ran_at or datetime.now()

        data_html = ""
        if audit.include_data_in_email:
            data_html = render_result_set(result_set, get_template(test.template_color_scheme))

        body = self._template.render(
            audit=audit,
            test=test,
            instructions=[t.instructions for t in audit.tests if t.instructions],
            data_html=data_html,
            ran_at=ran_at.strftime("%m/%d/%Y %H:%M:%S"),
        )

        subject = audit.email_subject or f"{DEFAULT_SUBJECT_PREFIX}{audit.name}"
        return AuditNotification(
            subject=subject,
            html_body=body,
            recipients=tuple(audit.email_subscribers),
            priority=Priority.HIGH,
            is_report=test.send_report,
            audit_name=audit.name,
        )


_composer: NotificationComposer | None = None


def compose_notification(
    audit: Audit,
    test_index: int,
    result_set: ResultSet,
    ran_at: datetime | None = None,
) -> AuditNotification:
    """Compose a notification with the shared default composer."""
    global _composer
    if _composer is None:
        _composer = NotificationComposer()
    return _composer.compose(audit, test_index, result_set, ran_at)
