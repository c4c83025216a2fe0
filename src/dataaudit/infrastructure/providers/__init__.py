"""
Database provider package.

Provides the provider contract, the registry and the built-in engine
providers (SQL Server, MySQL, SQLite, PostgreSQL, Hadoop Hive).
"""

from dataaudit.infrastructure.providers.base import (
    AuditDbProvider,
    DataAdapter,
    DbCommand,
    DbSession,
)
from dataaudit.infrastructure.providers.registry import (
    ProviderRegistry,
    default_registry,
)

__all__ = [
    "AuditDbProvider",
    "DataAdapter",
    "DbCommand",
    "DbSession",
    "ProviderRegistry",
    "default_registry",
]
