"""
Shared test configuration.

Adds ``src`` to the import path and provides audit factories backed by a
real temporary SQLite database.
"""

from __future__ import annotations

import sqlite3
import sys
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from dataaudit.domain.models import Audit, AuditTest  # noqa: E402
from dataaudit.infrastructure.connection_string import SQLITE  # noqa: E402


CUSTOMERS_SQL = """
CREATE TABLE customers (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    status TEXT NOT NULL,
    email TEXT
);
INSERT INTO customers (name, status, email) VALUES ('Alice', 'active', 'alice@example.com');
INSERT INTO customers (name, status, email) VALUES ('Bob', 'active', NULL);
INSERT INTO customers (name, status, email) VALUES ('Carol', 'inactive', 'carol@example.com');
"""


@pytest.fixture
def audit_db(tmp_path) -> Path:
    """SQLite database with a three-row ``customers`` table."""
    path = tmp_path / "audit.db"
    connection = sqlite3.connect(path)
    try:
        connection.executescript(CUSTOMERS_SQL)
        connection.commit()
    finally:
        connection.close()
    return path


@pytest.fixture
def make_audit(audit_db):
    """Factory for SQLite-backed audits against ``audit_db``."""

    def _make(
        sql: str = "SELECT id, name FROM customers",
        tests: list[AuditTest] | None = None,
        name: str = "Customers",
        **kwargs,
    ) -> Audit:
        kwargs.setdefault("connection_string", f"Data Source={audit_db}")
        kwargs.setdefault("provider", SQLITE)
        kwargs.setdefault("test_server", "local-sqlite")
        kwargs.setdefault("email_subscribers", ["dba@example.com"])
        return Audit(
            name=name,
            sql_statement=sql,
            tests=tests if tests is not None else [AuditTest()],
            **kwargs,
        )

    return _make
