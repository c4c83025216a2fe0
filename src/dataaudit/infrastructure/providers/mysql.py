"""MySQL provider (mysql-connector-python)."""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from dataaudit.infrastructure import connection_string as dialects
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.providers.dbapi import DbApiCommand, DbApiProvider

logger = logging.getLogger(__name__)

# ER_QUERY_TIMEOUT, raised when MAX_EXECUTION_TIME is exceeded
ER_QUERY_TIMEOUT = 3024

DEFAULT_PORT = 3306


class MySqlProvider(DbApiProvider):
    """MySQL and MariaDB through mysql-connector-python."""

    PROVIDER_ID: ClassVar[str] = dialects.MYSQL
    ENGINE_NAME: ClassVar[str] = "MySQL"

    def connect(self, descriptor: ConnectionDescriptor, connection_timeout: int | None) -> Any:
        import mysql.connector

        params: dict[str, Any] = {
            "host": descriptor.server,
            "port": int(descriptor.port) if descriptor.port else DEFAULT_PORT,
            "database": descriptor.database or None,
            "user": descriptor.user or None,
            "password": descriptor.password or None,
        }
        if connection_timeout:
            params["connection_timeout"] = connection_timeout

        return mysql.connector.connect(**{k: v for k, v in params.items() if v is not None})

    def apply_command_timeout(self, command: DbApiCommand, cursor: Any) -> None:
        if command.timeout:
            cursor.execute(f"SET SESSION MAX_EXECUTION_TIME = {int(command.timeout * 1000)}")

    def procedure_statement(self, name: str) -> str:
        return f"CALL {name}()"

    def is_timeout(self, error: BaseException) -> bool:
        if getattr(error, "errno", None) == ER_QUERY_TIMEOUT:
            return True
        return super().is_timeout(error)
