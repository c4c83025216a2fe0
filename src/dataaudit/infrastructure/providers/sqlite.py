"""
SQLite provider (sqlite3).

The ``Data Source`` of the connection string is the database path; an
empty source opens an in-memory database. Command timeouts are enforced
with a progress handler that interrupts long statements.
"""

from __future__ import annotations

import logging
import sqlite3
import time
from typing import Any, ClassVar

from dataaudit.domain.errors import ProviderError
from dataaudit.infrastructure import connection_string as dialects
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.providers.dbapi import DbApiCommand, DbApiProvider

logger = logging.getLogger(__name__)

# SQLite VM instructions between progress handler calls
_PROGRESS_INTERVAL = 1000


class SqliteProvider(DbApiProvider):
    """SQLite databases on the local file system."""

    PROVIDER_ID: ClassVar[str] = dialects.SQLITE
    ENGINE_NAME: ClassVar[str] = "SQLite"

    def connect(self, descriptor: ConnectionDescriptor, connection_timeout: int | None) -> Any:
        database = descriptor.server or ":memory:"
        uri = database.startswith("file:")
        if not uri and database != ":memory:":
            # sqlite3 would silently create a missing file
            database = f"file:{database}?mode=rw"
            uri = True
        return sqlite3.connect(database, timeout=connection_timeout or 5, uri=uri)

    def apply_command_timeout(self, command: DbApiCommand, cursor: Any) -> None:
        if not command.timeout:
            return
        deadline = time.monotonic() + command.timeout

        def _interrupt_after_deadline() -> int:
            if time.monotonic() > deadline:
                command.timed_out = True
                return 1
            return 0

        command.session.connection.set_progress_handler(_interrupt_after_deadline, _PROGRESS_INTERVAL)

    def procedure_statement(self, name: str) -> str:
        raise ProviderError("SQLite does not support stored procedures")

    def translate_error(self, command: DbApiCommand, error: Exception) -> BaseException:
        if command.timed_out:
            return TimeoutError(f"Statement interrupted after {command.timeout} seconds")
        return error
