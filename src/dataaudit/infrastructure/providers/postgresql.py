"""PostgreSQL provider (psycopg2)."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from dataaudit.infrastructure import connection_string as dialects
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.providers.dbapi import DbApiCommand, DbApiProvider

logger = logging.getLogger(__name__)

# SQLSTATE query_canceled, raised when statement_timeout expires
QUERY_CANCELED = "57014"

# Npgsql style keys understood by libpq under another name
_LIBPQ_KEYWORDS = {
    "sslmode": "sslmode",
    "ssl mode": "sslmode",
    "application name": "application_name",
    "applicationname": "application_name",
    "search path": "options",
    "searchpath": "options",
}


class PostgreSqlProvider(DbApiProvider):
    """PostgreSQL through psycopg2, in autocommit mode."""

    PROVIDER_ID: ClassVar[str] = dialects.POSTGRESQL
    ENGINE_NAME: ClassVar[str] = "PostgreSQL"

    def connect(self, descriptor: ConnectionDescriptor, connection_timeout: int | None) -> Any:
        import psycopg2

        params: dict[str, Any] = {
            "host": descriptor.server,
            "dbname": descriptor.database,
            "user": descriptor.user or None,
            "password": descriptor.password or None,
        }
        if descriptor.port:
            params["port"] = descriptor.port
        if connection_timeout:
            params["connect_timeout"] = connection_timeout

        for key, value in descriptor.extra_pairs:
            keyword = _LIBPQ_KEYWORDS.get(key.lower())
            if keyword is None:
                logger.debug("Ignoring connection setting not understood by libpq: %s", key)
                continue
            params[keyword] = f"-c search_path={value}" if keyword == "options" else value

        connection = psycopg2.connect(**{k: v for k, v in params.items() if v is not None})
        connection.autocommit = True
        return connection

    def apply_command_timeout(self, command: DbApiCommand, cursor: Any) -> None:
        if command.timeout:
            cursor.execute("SET statement_timeout = %s", (int(command.timeout * 1000),))

    def procedure_statement(self, name: str) -> str:
        return f"SELECT * FROM {name}()"

    def is_timeout(self, error: BaseException) -> bool:
        if getattr(error, "pgcode", None) == QUERY_CANCELED:
            return True
        return super().is_timeout(error)
