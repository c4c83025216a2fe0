"""
Audit runner - executes audits and their tests sequentially.

Per test: build SQL -> open session -> execute -> evaluate -> notify.
Connection and execution failures are recorded on the test and the run
moves on; only running a collection that was never loaded is fatal.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from dataaudit.application.observers import AuditObserver
from dataaudit.domain.config.settings import RunnerSettings
from dataaudit.domain.errors import NoAuditsLoadedError, ProviderNotFoundError
from dataaudit.domain.models import Audit, AuditCollection, AuditResult
from dataaudit.domain.results import EMPTY_RESULT_SET, ResultSet
from dataaudit.domain.threshold import Dispatch, ThresholdEvaluator, ThresholdOutcome
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.notifications.composer import NotificationComposer
from dataaudit.infrastructure.notifications.message import Notifier
from dataaudit.infrastructure.providers.base import AuditDbProvider
from dataaudit.infrastructure.providers.registry import ProviderRegistry, default_registry
from dataaudit.infrastructure.sql.query_builder import QueryBuilder

logger = logging.getLogger(__name__)

NO_AUDITS_MESSAGE = "No audits have been loaded. Please load some audits and try again."
NO_RESULT_SET_MESSAGE = "This audit did not return a result set."


def timeout_message(connection_timeout: int | None, command_timeout: int | None) -> str:
    """Failure message for statements that ran out of time."""
    return (
        "Timeout expired while running this audit. "
        f"The connection timeout was {connection_timeout} seconds. "
        f"The command timeout was {command_timeout} seconds."
    )


class AuditRunner:
    """
    Runs audits one test at a time.

    Usage:
        runner = AuditRunner(notifier=SmtpNotifier(settings.smtp))
        runner.audits = ConfigLoader("config").load_audits()
        runner.add_observer(LoggingObserver())
        runner.run_audits()
    """

    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        notifier: Notifier | None = None,
        audits: AuditCollection | None = None,
        settings: RunnerSettings | None = None,
        observers: Iterable[AuditObserver] = (),
        query_builder: QueryBuilder | None = None,
        evaluator: ThresholdEvaluator | None = None,
        composer: NotificationComposer | None = None,
    ) -> None:
        """
        Initialize audit runner.

        Args:
            registry: Provider registry (defaults to the built-in providers)
            notifier: Transport for failure and report messages
            audits: Collection run by ``run_audits``
            settings: Connection and command timeouts
            observers: Progress observers
            query_builder: Statement builder
            evaluator: Threshold evaluator
            composer: Notification composer
        """
        self.registry = registry or default_registry()
        self.notifier = notifier
        self.settings = settings or RunnerSettings()
        self._audits = audits
        self._observers: list[AuditObserver] = list(observers)
        self._query_builder = query_builder or QueryBuilder()
        self._evaluator = evaluator or ThresholdEvaluator()
        self._composer = composer

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def audits(self) -> AuditCollection | None:
        return self._audits

    @audits.setter
    def audits(self, audits: AuditCollection | None) -> None:
        self._audits = audits

    def add_observer(self, observer: AuditObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: AuditObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def run_audits(self) -> None:
        """
        Run every audit of the loaded collection, in order.

        Raises:
            NoAuditsLoadedError: If no collection (or an empty one) is loaded
        """
        if not self._audits:
            raise NoAuditsLoadedError(NO_AUDITS_MESSAGE)

        self._fire("on_collection_starting")

        for index, audit in enumerate(self._audits):
            self._fire("on_audit_running", index, audit.name)
            self._run_tests(audit)
            self._fire("on_audit_done", index, audit.name)

        failed = sum(1 for audit in self._audits if audit.result is AuditResult.FAILED)
        logger.info("Audit run completed: %d passed, %d failed", len(self._audits) - failed, failed)

    def run_audit(self, audit: Audit) -> None:
        """Run a single audit outside of the collection loop."""
        self._fire("on_single_audit_running", audit)
        self._run_tests(audit)
        self._fire("on_single_audit_done", audit)

    # ------------------------------------------------------------------
    # Test execution
    # ------------------------------------------------------------------

    def _fire(self, event: str, *args) -> None:
        for observer in list(self._observers):
            try:
                getattr(observer, event)(*args)
            except Exception as e:
                logger.error("Observer %s failed on %s: %s", type(observer).__name__, event, e)
                logger.debug("Observer failure details", exc_info=True)

    def _run_tests(self, audit: Audit) -> None:
        audit.reset()
        logger.info("Running audit '%s' (%d tests)", audit.name, len(audit.tests))

        for index, test in enumerate(audit.tests):
            result_set = self._get_test_result_set(audit, index)
            outcome = self._evaluator.evaluate(test, result_set)
            self._apply_outcome(audit, index, outcome, result_set)

        if audit.result is AuditResult.NOT_RUN:
            audit.result = AuditResult.PASSED
        audit.has_run = True
        logger.info("Audit '%s' finished: %s", audit.name, audit.result.value)

    def _get_test_result_set(self, audit: Audit, index: int) -> ResultSet:
        """
        Execute one test's statement.

        The session, command and adapter live only for this call and are
        released on every exit path.
        """
        test = audit.tests[index]
        sql = self._query_builder.build(audit, index)

        descriptor = ConnectionDescriptor(audit.connection_string, audit.provider)
        descriptor.connection_timeout = self.settings.connection_timeout
        descriptor.command_timeout = self.settings.command_timeout

        try:
            provider = self.registry.create(audit.provider)
        except ProviderNotFoundError as e:
            test.test_failed_message = str(e)
            logger.error("Audit '%s': %s", audit.name, e)
            return EMPTY_RESULT_SET

        connection_string = descriptor.to_string() or audit.connection_string

        try:
            session = provider.create_session(connection_string, descriptor.connection_timeout)
        except Exception as e:
            test.test_failed_message = provider.describe_error(e)
            logger.warning("Audit '%s': cannot connect to %s: %s", audit.name, provider.ENGINE_NAME, e)
            logger.debug("Connection failure details", exc_info=True)
            return EMPTY_RESULT_SET

        with session:
            try:
                with provider.create_command(session, sql, audit.sql_type, descriptor.command_timeout) as command:
                    with provider.create_data_adapter(command) as adapter:
                        return adapter.fill()
            except Exception as e:
                test.test_failed_message = self._execution_failure_message(provider, descriptor, e)
                logger.debug(
                    "Audit '%s' test %d failed to execute: %s", audit.name, index, e, exc_info=True
                )
                return EMPTY_RESULT_SET

    @staticmethod
    def _execution_failure_message(
        provider: AuditDbProvider, descriptor: ConnectionDescriptor, error: Exception
    ) -> str:
        if provider.is_timeout(error):
            return timeout_message(descriptor.connection_timeout, descriptor.command_timeout)
        return provider.describe_error(error)

    def _apply_outcome(self, audit: Audit, index: int, outcome: ThresholdOutcome, result_set: ResultSet) -> None:
        test = audit.tests[index]

        if outcome.passed:
            test.result = AuditResult.PASSED
        else:
            test.result = AuditResult.FAILED
            test.test_failed_message = outcome.message or test.test_failed_message or NO_RESULT_SET_MESSAGE
            audit.result = AuditResult.FAILED
            logger.warning("Audit '%s' test %d failed: %s", audit.name, index, test.test_failed_message)

        if outcome.dispatch is not Dispatch.NONE:
            self._dispatch(audit, index, result_set)

    def _dispatch(self, audit: Audit, index: int, result_set: ResultSet) -> None:
        if self._composer is None:
            self._composer = NotificationComposer()
        notification = self._composer.compose(audit, index, result_set, datetime.now())

        if self.notifier is None:
            logger.warning("No notifier configured - '%s' was not sent", notification.subject)
            return

        try:
            self.notifier.send(notification)
        except Exception as e:
            logger.error("Failed to send '%s' for audit '%s': %s", notification.subject, audit.name, e)
            logger.debug("Notification failure details", exc_info=True)
