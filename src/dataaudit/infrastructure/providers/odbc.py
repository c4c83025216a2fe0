"""
ODBC providers (pyodbc).

Handles:
- ODBC driver detection and fallback for SQL Server
- SQL Server and Hadoop Hive connection strings
- Query timeouts and SQLSTATE based timeout detection
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from dataaudit.infrastructure import connection_string as dialects
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.providers.dbapi import DbApiCommand, DbApiProvider

logger = logging.getLogger(__name__)

# SQLSTATEs raised by ODBC drivers on timeouts
TIMEOUT_SQLSTATES = frozenset({"HYT00", "HYT01"})


def _braced(driver: str) -> str:
    driver = driver.strip()
    if driver.startswith("{"):
        return driver
    return "{%s}" % driver


class OdbcProvider(DbApiProvider):
    """Base class for engines reached through pyodbc."""

    SUPPORTS_MULTIPLE_RESULTS: ClassVar[bool] = True
    AUTOCOMMIT: ClassVar[bool] = False

    def build_odbc_string(self, descriptor: ConnectionDescriptor) -> str:
        """Translate the descriptor into an ODBC connection string."""
        return descriptor.to_string()

    def connect(self, descriptor: ConnectionDescriptor, connection_timeout: int | None) -> Any:
        import pyodbc

        odbc_string = self.build_odbc_string(descriptor)
        logger.debug("Connecting through ODBC (credentials masked)")
        return pyodbc.connect(
            odbc_string,
            timeout=connection_timeout or 0,
            autocommit=self.AUTOCOMMIT,
        )

    def apply_command_timeout(self, command: DbApiCommand, cursor: Any) -> None:
        if command.timeout:
            # pyodbc applies the query timeout per connection
            command.session.connection.timeout = command.timeout

    def is_timeout(self, error: BaseException) -> bool:
        args = getattr(error, "args", ())
        if args and isinstance(args[0], str) and args[0] in TIMEOUT_SQLSTATES:
            return True
        return super().is_timeout(error)


class SqlServerProvider(OdbcProvider):
    """
    Microsoft SQL Server through the best available ODBC driver.

    Supports SQL authentication (User ID / Password) and falls back to
    integrated authentication when no user is given.
    """

    PROVIDER_ID: ClassVar[str] = dialects.SQL_SERVER
    ENGINE_NAME: ClassVar[str] = "SQL Server"

    PREFERRED_DRIVERS: ClassVar[tuple[str, ...]] = (
        "ODBC Driver 18 for SQL Server",
        "ODBC Driver 17 for SQL Server",
        "ODBC Driver 13 for SQL Server",
        "ODBC Driver 11 for SQL Server",
    )
    FALLBACK_DRIVERS: ClassVar[tuple[str, ...]] = (
        "SQL Server Native Client 11.0",
        "SQL Server Native Client 10.0",
        "SQL Server",
    )

    def detect_odbc_driver(self) -> str:
        """
        Detect best available ODBC driver.

        Returns:
            ODBC driver name

        Raises:
            RuntimeError: If no suitable driver found
        """
        import pyodbc

        drivers = pyodbc.drivers()
        logger.debug("Available ODBC drivers: %s", drivers)

        for driver in self.PREFERRED_DRIVERS:
            if driver in drivers:
                logger.debug("Using ODBC driver: %s", driver)
                return driver

        for driver in self.FALLBACK_DRIVERS:
            if driver in drivers:
                logger.warning("Using fallback ODBC driver: %s", driver)
                return driver

        raise RuntimeError("No SQL Server ODBC driver found. Please install ODBC Driver 17 or 18.")

    def build_odbc_string(self, descriptor: ConnectionDescriptor) -> str:
        server = descriptor.server
        if descriptor.port:
            server = f"{server},{descriptor.port}"

        parts = [
            f"DRIVER={_braced(descriptor.driver or self.detect_odbc_driver())}",
            f"SERVER={server}",
        ]
        if descriptor.database:
            parts.append(f"DATABASE={descriptor.database}")

        if descriptor.user:
            parts.append(f"UID={descriptor.user}")
            parts.append(f"PWD={descriptor.password}")
        else:
            parts.append("Trusted_Connection=yes")

        parts += [f"{key}={value}" for key, value in descriptor.extra_pairs]
        return ";".join(parts)


class HiveProvider(OdbcProvider):
    """
    Hadoop Hive through an ODBC driver or a configured DSN.

    Hive drivers do not support transactions, so sessions run in
    autocommit mode.
    """

    PROVIDER_ID: ClassVar[str] = dialects.HIVE
    ENGINE_NAME: ClassVar[str] = "Hadoop Hive"
    AUTOCOMMIT: ClassVar[bool] = True

    def build_odbc_string(self, descriptor: ConnectionDescriptor) -> str:
        text = descriptor.to_string()
        if descriptor.is_dsn_only or not descriptor.driver:
            return text
        return text.replace(f"DRIVER={descriptor.driver};", f"DRIVER={_braced(descriptor.driver)};", 1)
