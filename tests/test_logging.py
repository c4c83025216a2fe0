"""
Tests for logging configuration and the logging observer.
"""

import logging

import pytest

from dataaudit.application import LoggingObserver
from dataaudit.domain.models import Audit, AuditResult
from dataaudit.infrastructure.logging_config import ColoredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way pytest configured it."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


class TestColoredFormatter:
    def _record(self):
        return logging.LogRecord("dataaudit.test", logging.WARNING, __file__, 1, "careful", None, None)

    def test_colors_are_applied_and_record_restored(self):
        record = self._record()
        formatter = ColoredFormatter("%(levelname)s %(name)s %(message)s", use_colors=True)

        output = formatter.format(record)

        assert "\033[" in output
        assert record.levelname == "WARNING"
        assert record.name == "dataaudit.test"

    def test_plain_output(self):
        formatter = ColoredFormatter("%(levelname)s %(message)s", use_colors=False)
        assert formatter.format(self._record()) == "WARNING careful"


class TestSetupLogging:
    def test_file_handler_captures_debug(self, tmp_path, restore_root_logger):
        log_file = tmp_path / "logs" / "audit.log"

        setup_logging(logging.INFO, log_file, use_colors=False)
        logging.getLogger("dataaudit.test").debug("connection traceback")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "connection traceback" in log_file.read_text(encoding="utf-8")


class TestLoggingObserver:
    def test_progress_is_logged(self, caplog):
        observer = LoggingObserver()
        audit = Audit(name="Orders")
        audit.result = AuditResult.PASSED

        with caplog.at_level(logging.INFO, logger="dataaudit.application.observers"):
            observer.on_collection_starting()
            observer.on_audit_running(0, "Orders")
            observer.on_audit_done(0, "Orders")
            observer.on_single_audit_done(audit)

        assert "Starting audit collection run" in caplog.text
        assert "[1] Running audit: Orders" in caplog.text
        assert "Audit done: Orders (passed)" in caplog.text
