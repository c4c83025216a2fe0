"""
Generic DB-API 2.0 provider.

Implements the provider contract on top of any PEP 249 driver. Engine
providers only supply the connect call and the engine-specific details
(command timeouts, procedure call syntax, error classification).
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any, ClassVar

from dataaudit.domain.models import CommandType
from dataaudit.domain.results import ResultSet, ResultTable
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.providers.base import (
    AuditDbProvider,
    DataAdapter,
    DbCommand,
    DbSession,
    column_names,
)

logger = logging.getLogger(__name__)


class DbApiSession(DbSession):
    """Session wrapping a DB-API connection."""

    def __init__(self, connection: Any, descriptor: ConnectionDescriptor):
        self.connection = connection
        self.descriptor = descriptor
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.connection.close()
        logger.debug("Session closed (%s)", self.descriptor.server or self.descriptor.provider_id)


class DbApiCommand(DbCommand):
    """
    Statement bound to a DB-API session.

    The cursor is opened lazily by the adapter and closed with the command.
    """

    def __init__(
        self,
        session: DbApiSession,
        text: str,
        command_type: CommandType,
        timeout: int | None,
        statement: str,
    ):
        self.session = session
        self.text = text
        self.command_type = command_type
        self.timeout = timeout
        self.statement = statement
        self.timed_out = False
        self._cursor: Any = None

    def cursor(self) -> Any:
        if self._cursor is None:
            self._cursor = self.session.connection.cursor()
        return self._cursor

    def close(self) -> None:
        if self._cursor is not None:
            cursor, self._cursor = self._cursor, None
            cursor.close()


class DbApiDataAdapter(DataAdapter):
    """Runs a DB-API command and collects every result table."""

    def __init__(self, provider: DbApiProvider, command: DbApiCommand):
        self._provider = provider
        self._command = command

    def fill(self) -> ResultSet:
        cursor = self._command.cursor()
        try:
            self._provider.apply_command_timeout(self._command, cursor)
            cursor.execute(self._command.statement)
            tables = self._collect_tables(cursor)
        except Exception as error:
            translated = self._provider.translate_error(self._command, error)
            if translated is error:
                raise
            raise translated from error

        logger.debug(
            "Statement returned %d table(s), %d row(s) in first table",
            len(tables), tables[0].row_count if tables else 0
        )
        return ResultSet(tuple(tables))

    def _collect_tables(self, cursor: Any) -> list[ResultTable]:
        tables = []
        while True:
            if cursor.description:
                tables.append(ResultTable.from_rows(column_names(cursor.description), cursor.fetchall()))
            if not self._provider.SUPPORTS_MULTIPLE_RESULTS or not cursor.nextset():
                break
        return tables


class DbApiProvider(AuditDbProvider):
    """
    Base class for providers backed by a PEP 249 driver.

    Subclasses implement ``connect`` and may override the hooks below.
    """

    SUPPORTS_MULTIPLE_RESULTS: ClassVar[bool] = False

    @abstractmethod
    def connect(self, descriptor: ConnectionDescriptor, connection_timeout: int | None) -> Any:
        """Open a native DB-API connection."""

    def create_session(self, connection_string: str, connection_timeout: int | None = None) -> DbApiSession:
        descriptor = ConnectionDescriptor(connection_string, self.PROVIDER_ID)
        logger.debug(
            "Opening %s session to %s (timeout=%s)",
            self.ENGINE_NAME, descriptor.server or "<dsn>", connection_timeout
        )
        connection = self.connect(descriptor, connection_timeout)
        return DbApiSession(connection, descriptor)

    def create_command(
        self,
        session: DbSession,
        text: str,
        command_type: CommandType = CommandType.TEXT,
        timeout: int | None = None,
    ) -> DbApiCommand:
        if not isinstance(session, DbApiSession):
            raise TypeError(f"{type(self).__name__} cannot use session {type(session).__name__}")
        if command_type is CommandType.STORED_PROCEDURE:
            statement = self.procedure_statement(text.strip())
        else:
            statement = text
        return DbApiCommand(session, text, command_type, timeout, statement)

    def create_data_adapter(self, command: DbCommand) -> DbApiDataAdapter:
        if not isinstance(command, DbApiCommand):
            raise TypeError(f"{type(self).__name__} cannot use command {type(command).__name__}")
        return DbApiDataAdapter(self, command)

    # ------------------------------------------------------------------
    # Engine hooks
    # ------------------------------------------------------------------

    def apply_command_timeout(self, command: DbApiCommand, cursor: Any) -> None:
        """Apply ``command.timeout`` before execution. No-op by default."""

    def procedure_statement(self, name: str) -> str:
        """Statement that calls a stored procedure (ODBC escape syntax)."""
        return "{CALL %s}" % name

    def translate_error(self, command: DbApiCommand, error: Exception) -> BaseException:
        """Map a native execution error; the default keeps it unchanged."""
        return error
