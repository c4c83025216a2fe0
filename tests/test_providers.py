"""
Tests for the provider contract, the registry and the built-in providers.

SQLite runs against real temporary databases; the other engines are
exercised through their connection-string and error-classification logic.
"""

import sqlite3

import pytest

from dataaudit.domain.errors import ProviderError, ProviderNotFoundError
from dataaudit.domain.models import CommandType
from dataaudit.infrastructure.connection_string import (
    HIVE,
    KNOWN_PROVIDERS,
    SQL_SERVER,
    SQLITE,
    ConnectionDescriptor,
)
from dataaudit.infrastructure.providers import ProviderRegistry, default_registry
from dataaudit.infrastructure.providers.dbapi import DbApiSession
from dataaudit.infrastructure.providers.mysql import MySqlProvider
from dataaudit.infrastructure.providers.odbc import HiveProvider, SqlServerProvider
from dataaudit.infrastructure.providers.postgresql import PostgreSqlProvider
from dataaudit.infrastructure.providers.sqlite import SqliteProvider


class FakeCursor:
    """DB-API cursor returning canned result sets."""

    def __init__(self, results):
        self._results = list(results)
        self._index = 0
        self.executed = []
        self.closed = False

    @property
    def description(self):
        if self._index < len(self._results):
            return self._results[self._index][0]
        return None

    def execute(self, sql, params=None):
        self.executed.append(sql)

    def fetchall(self):
        return self._results[self._index][1]

    def nextset(self):
        self._index += 1
        return True if self._index < len(self._results) else None

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.timeout = 0
        self.closed = False

    def cursor(self):
        return self._cursor

    def close(self):
        self.closed = True


class TestProviderRegistry:
    """Test cases for ProviderRegistry."""

    def test_default_registry_has_builtin_providers(self):
        registry = default_registry()
        assert registry.provider_ids == sorted(KNOWN_PROVIDERS)

    def test_create_returns_new_instances(self):
        registry = default_registry()
        first = registry.create(SQLITE)

        assert isinstance(first, SqliteProvider)
        assert registry.create(SQLITE) is not first

    def test_lookup_is_case_insensitive(self):
        assert isinstance(default_registry().create("System.Data.SqlClient"), SqlServerProvider)

    def test_unknown_provider(self):
        with pytest.raises(ProviderNotFoundError) as excinfo:
            ProviderRegistry().create("oracle.dataaccess")

        assert excinfo.value.provider_id == "oracle.dataaccess"
        assert "oracle.dataaccess" in str(excinfo.value)
        assert isinstance(excinfo.value, LookupError)

    def test_register_and_unregister(self):
        registry = ProviderRegistry()
        registry.register("custom.engine", SqliteProvider)

        assert registry.is_registered("CUSTOM.ENGINE")
        assert isinstance(registry.create("custom.engine"), SqliteProvider)

        registry.unregister("custom.engine")
        assert not registry.is_registered("custom.engine")

    def test_empty_identifier_rejected(self):
        with pytest.raises(ValueError):
            ProviderRegistry().register("  ", SqliteProvider)


class TestBaseErrorClassification:
    """Test cases for the default is_timeout / describe_error rules."""

    def setup_method(self):
        self.provider = SqliteProvider()

    def test_timeout_error(self):
        assert self.provider.is_timeout(TimeoutError()) is True

    def test_legacy_message(self):
        error = Exception("Timeout expired.  The timeout period elapsed prior to completion.")
        assert self.provider.is_timeout(error) is True

    def test_message_must_start_with_marker(self):
        assert self.provider.is_timeout(Exception("Query failed: Timeout expired")) is False

    def test_describe_error(self):
        assert self.provider.describe_error(Exception("no such table: x")) == "no such table: x"
        assert self.provider.describe_error(RuntimeError()) == "RuntimeError"


class TestSqliteProvider:
    """Test cases for SqliteProvider against real databases."""

    def setup_method(self):
        self.provider = SqliteProvider()

    def _fill(self, connection_string, sql, command_type=CommandType.TEXT, timeout=None):
        with self.provider.create_session(connection_string, 5) as session:
            with self.provider.create_command(session, sql, command_type, timeout) as command:
                with self.provider.create_data_adapter(command) as adapter:
                    return adapter.fill()

    def test_select(self, audit_db):
        result = self._fill(f"Data Source={audit_db}", "SELECT id, name FROM customers ORDER BY id")

        table = result.first_table
        assert table.columns == ("id", "name")
        assert table.rows == ((1, "Alice"), (2, "Bob"), (3, "Carol"))

    def test_in_memory_database(self):
        result = self._fill("Data Source=", "SELECT 1 AS one")
        assert result.first_table.rows == ((1,),)

    def test_statement_without_rows_gives_empty_result_set(self, audit_db):
        result = self._fill(f"Data Source={audit_db}", "UPDATE customers SET status = status")
        assert result.is_empty is True

    def test_missing_database_is_not_created(self, tmp_path):
        missing = tmp_path / "missing.db"

        with pytest.raises(sqlite3.OperationalError):
            self.provider.create_session(f"Data Source={missing}", 1)

        assert not missing.exists()

    def test_execution_error_propagates(self, audit_db):
        with pytest.raises(sqlite3.OperationalError, match="no such table"):
            self._fill(f"Data Source={audit_db}", "SELECT * FROM missing_table")

    def test_stored_procedures_unsupported(self, audit_db):
        with self.provider.create_session(f"Data Source={audit_db}") as session:
            with pytest.raises(ProviderError):
                self.provider.create_command(session, "refresh_stats", CommandType.STORED_PROCEDURE)

    def test_command_timeout(self):
        """Test that a runaway statement is interrupted and reported as a timeout."""
        endless = (
            "WITH RECURSIVE counter(x) AS (SELECT 1 UNION ALL SELECT x + 1 FROM counter) "
            "SELECT count(*) FROM counter"
        )
        with pytest.raises(TimeoutError) as excinfo:
            self._fill("Data Source=:memory:", endless, timeout=1)

        assert self.provider.is_timeout(excinfo.value) is True

    def test_session_close_is_idempotent(self, audit_db):
        session = self.provider.create_session(f"Data Source={audit_db}")
        session.close()
        session.close()

        assert session.closed is True


class TestOdbcProviders:
    """Test cases for the pyodbc based providers."""

    def test_sql_server_odbc_string(self):
        descriptor = ConnectionDescriptor(
            "Data Source=sql01;Initial Catalog=crm;User ID=u;Password=p;"
            "Driver=ODBC Driver 18 for SQL Server;Encrypt=no",
            SQL_SERVER,
        )

        assert SqlServerProvider().build_odbc_string(descriptor) == (
            "DRIVER={ODBC Driver 18 for SQL Server};SERVER=sql01;DATABASE=crm;UID=u;PWD=p;Encrypt=no"
        )

    def test_sql_server_trusted_connection_and_port(self, monkeypatch):
        provider = SqlServerProvider()
        monkeypatch.setattr(provider, "detect_odbc_driver", lambda: "ODBC Driver 17 for SQL Server")
        descriptor = ConnectionDescriptor("Server=sql01;Port=1444", SQL_SERVER)

        assert provider.build_odbc_string(descriptor) == (
            "DRIVER={ODBC Driver 17 for SQL Server};SERVER=sql01,1444;Trusted_Connection=yes"
        )

    def test_hive_driver_is_braced(self):
        descriptor = ConnectionDescriptor("Driver=Hive;Host=h;Port=10000;Schema=s;DefaultTable=t", HIVE)
        assert HiveProvider().build_odbc_string(descriptor).startswith("DRIVER={Hive};Host=h;")

    def test_hive_dsn_is_passed_through(self):
        descriptor = ConnectionDescriptor("DSN=HiveProd;", HIVE)
        assert HiveProvider().build_odbc_string(descriptor) == "DSN=HiveProd;"

    def test_sqlstate_timeouts(self):
        provider = SqlServerProvider()

        assert provider.is_timeout(Exception("HYT00", "[HYT00] Query timeout expired")) is True
        assert provider.is_timeout(Exception("HYT01", "Connection timeout expired")) is True
        assert provider.is_timeout(Exception("42S02", "Invalid object name 'x'.")) is False

    def test_procedure_call_syntax(self):
        assert SqlServerProvider().procedure_statement("dbo.check_orders") == "{CALL dbo.check_orders}"

    def test_multiple_result_sets_and_timeout(self):
        """Test that every result table is collected and the timeout applied."""
        cursor = FakeCursor([
            ((("id", None),), [(1,), (2,)]),
            (None, []),
            ((("name", None),), [("a",)]),
        ])
        connection = FakeConnection(cursor)
        provider = SqlServerProvider()
        session = DbApiSession(connection, ConnectionDescriptor("Server=x", SQL_SERVER))

        command = provider.create_command(session, "EXEC report", CommandType.TEXT, 30)
        result = provider.create_data_adapter(command).fill()
        command.close()
        session.close()

        assert [table.columns for table in result.tables] == [("id",), ("name",)]
        assert result.row_count == 2
        assert connection.timeout == 30
        assert cursor.executed == ["EXEC report"]
        assert cursor.closed is True
        assert connection.closed is True


class TestOtherEngines:
    """Engine specific details of the PostgreSQL and MySQL providers."""

    def test_postgresql_timeout_code(self):
        class QueryCanceled(Exception):
            pgcode = "57014"

        class SyntaxError_(Exception):
            pgcode = "42601"

        provider = PostgreSqlProvider()
        assert provider.is_timeout(QueryCanceled("canceling statement due to statement timeout")) is True
        assert provider.is_timeout(SyntaxError_("syntax error")) is False

    def test_mysql_timeout_errno(self):
        class MySqlError(Exception):
            def __init__(self, errno, msg):
                super().__init__(msg)
                self.errno = errno

        provider = MySqlProvider()
        assert provider.is_timeout(MySqlError(3024, "Query execution was interrupted")) is True
        assert provider.is_timeout(MySqlError(1146, "Table doesn't exist")) is False

    def test_procedure_call_syntax(self):
        assert PostgreSqlProvider().procedure_statement("refresh_stats") == "SELECT * FROM refresh_stats()"
        assert MySqlProvider().procedure_statement("refresh_stats") == "CALL refresh_stats()"

    def test_postgresql_command_timeout_in_milliseconds(self):
        cursor = FakeCursor([((("n", None),), [(1,)])])
        provider = PostgreSqlProvider()
        session = DbApiSession(FakeConnection(cursor), ConnectionDescriptor("Server=pg", "npgsql"))
        command = provider.create_command(session, "SELECT 1", CommandType.TEXT, 180)

        provider.create_data_adapter(command).fill()

        assert cursor.executed == ["SET statement_timeout = %s", "SELECT 1"]
