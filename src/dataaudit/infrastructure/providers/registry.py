"""
Provider registry.

Maps provider identifiers to provider factories. The host populates the
registry at start-up; the runner only asks it for providers by identifier.

Usage:
    registry = default_registry()
    registry.register("my.engine", MyEngineProvider)
    provider = registry.create("system.data.sqlite")
"""

from __future__ import annotations

import logging
from typing import Callable

from dataaudit.domain.errors import ProviderNotFoundError
from dataaudit.infrastructure.providers.base import AuditDbProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[], AuditDbProvider]


class ProviderRegistry:
    """Explicit mapping of provider identifier -> factory."""

    def __init__(self) -> None:
        self._factories: dict[str, ProviderFactory] = {}

    @staticmethod
    def _key(provider_id: str) -> str:
        return (provider_id or "").strip().lower()

    def register(self, provider_id: str, factory: ProviderFactory) -> None:
        """
        Register (or replace) the factory for ``provider_id``.

        Raises:
            ValueError: If provider_id is empty
        """
        key = self._key(provider_id)
        if not key:
            raise ValueError("Provider identifier cannot be empty")
        if key in self._factories:
            logger.debug("Replacing provider factory for '%s'", key)
        self._factories[key] = factory

    def unregister(self, provider_id: str) -> None:
        self._factories.pop(self._key(provider_id), None)

    def is_registered(self, provider_id: str) -> bool:
        return self._key(provider_id) in self._factories

    @property
    def provider_ids(self) -> list[str]:
        return sorted(self._factories)

    def create(self, provider_id: str) -> AuditDbProvider:
        """
        Create a provider instance.

        Raises:
            ProviderNotFoundError: If no factory is registered for provider_id
        """
        factory = self._factories.get(self._key(provider_id))
        if factory is None:
            raise ProviderNotFoundError(provider_id)
        return factory()


def default_registry() -> ProviderRegistry:
    """Registry populated with the built-in providers."""
    from dataaudit.infrastructure.providers.mysql import MySqlProvider
    from dataaudit.infrastructure.providers.odbc import HiveProvider, SqlServerProvider
    from dataaudit.infrastructure.providers.postgresql import PostgreSqlProvider
    from dataaudit.infrastructure.providers.sqlite import SqliteProvider

    registry = ProviderRegistry()
    for provider_class in (SqlServerProvider, MySqlProvider, SqliteProvider, PostgreSqlProvider, HiveProvider):
        registry.register(provider_class.PROVIDER_ID, provider_class)
    return registry
