"""
Progress observers for audit runs.

Observers are purely informational: the runner calls them strictly before
and after the associated work and ignores anything they return.
"""

from __future__ import annotations

import logging

from dataaudit.domain.models import Audit

logger = logging.getLogger(__name__)


class AuditObserver:
    """
    Base observer with no-op callbacks.

    Subclass and override the callbacks a host needs.
    """

    def on_collection_starting(self) -> None:
        """A collection run is about to start."""

    def on_audit_running(self, index: int, name: str) -> None:
        """Audit ``index`` of a collection run is starting."""

    def on_audit_done(self, index: int, name: str) -> None:
        """Audit ``index`` of a collection run has finished its tests."""

    def on_single_audit_running(self, audit: Audit) -> None:
        """A single-audit run is starting."""

    def on_single_audit_done(self, audit: Audit) -> None:
        """A single-audit run has finished."""


class LoggingObserver(AuditObserver):
    """Writes progress events to the log."""

    def on_collection_starting(self) -> None:
        logger.info("Starting audit collection run")

    def on_audit_running(self, index: int, name: str) -> None:
        logger.info("[%d] Running audit: %s", index + 1, name)

    def on_audit_done(self, index: int, name: str) -> None:
        logger.info("[%d] Audit done: %s", index + 1, name)

    def on_single_audit_running(self, audit: Audit) -> None:
        logger.info("Running audit: %s", audit.name)

    def on_single_audit_done(self, audit: Audit) -> None:
        logger.info("Audit done: %s (%s)", audit.name, audit.result.value)
