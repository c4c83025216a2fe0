"""
Connection string parsing and dialect serialization.

Handles:
- Parsing semicolon separated key=value connection strings
- Normalizing engine-specific key aliases into one set of fields
- Re-emitting the string in the dialect of the target provider

Unrecognized keys are kept verbatim, in encounter order, so that a
descriptor survives a round trip through its own provider dialect.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


# Provider identifiers
SQL_SERVER = "system.data.sqlclient"
MYSQL = "mysql.data.mysqlclient"
SQLITE = "system.data.sqlite"
POSTGRESQL = "npgsql"
HIVE = "hadoop.hive"

KNOWN_PROVIDERS = (SQL_SERVER, MYSQL, SQLITE, POSTGRESQL, HIVE)

# Lower-cased key -> field name
_KEY_ALIASES = {
    "data source": "server",
    "server": "server",
    "host": "server",
    "initial catalog": "database",
    "database": "database",
    "schema": "database",
    "user id": "user",
    "uid": "user",
    "password": "password",
    "pwd": "password",
    "port": "port",
    "defaulttable": "target_table",
    "driver": "driver",
}

_FIELDS = ("server", "database", "user", "password", "port", "target_table", "driver")


class ConnectionDescriptor:
    """
    Normalized, provider-agnostic view of a connection string.

    All fields are read-only except the two timeouts, which callers set
    before handing the descriptor to a provider.

    Usage:
        descriptor = ConnectionDescriptor("Host=db1;Port=10000;Schema=sales", "hadoop.hive")
        descriptor.server         # "db1"
        str(descriptor)           # Hive DSN dialect
    """

    def __init__(self, connection_string: str, provider_id: str):
        """
        Parse a connection string.

        Malformed fragments are never rejected: empty fragments are skipped
        and unknown keys land in ``extra_settings``.

        Args:
            connection_string: Raw ``key=value;key=value`` text
            provider_id: Provider identifier that selects the output dialect
        """
        self._provider_id = (provider_id or "").strip().lower()
        self._values = dict.fromkeys(_FIELDS, "")
        self._extras: list[str] = []

        self.connection_timeout: int | None = None
        self.command_timeout: int | None = None

        for item in (connection_string or "").split(";"):
            key, _, value = item.partition("=")
            field_name = _KEY_ALIASES.get(key.strip().lower())
            if field_name:
                self._values[field_name] = value
            elif key.strip():
                self._extras.append(f"{key}={value};")

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    @property
    def provider_id(self) -> str:
        return self._provider_id

    @property
    def server(self) -> str:
        return self._values["server"]

    @property
    def database(self) -> str:
        return self._values["database"]

    @property
    def user(self) -> str:
        return self._values["user"]

    @property
    def password(self) -> str:
        return self._values["password"]

    @property
    def port(self) -> str:
        return self._values["port"]

    @property
    def target_table(self) -> str:
        """Table required in the connection string by some engines (Hive)."""
        return self._values["target_table"]

    @property
    def driver(self) -> str:
        return self._values["driver"]

    @property
    def extra_settings(self) -> str:
        """Unrecognized pairs re-joined as ``key=value;`` in encounter order."""
        return "".join(self._extras)

    @property
    def extra_pairs(self) -> list[tuple[str, str]]:
        """Unrecognized pairs as (key, value) tuples."""
        pairs = []
        for item in self._extras:
            key, _, value = item[:-1].partition("=")
            pairs.append((key.strip(), value))
        return pairs

    @property
    def is_dsn_only(self) -> bool:
        """True when only extras (typically ``DSN=...``) were given."""
        return (
            not self.driver
            and not self.server
            and not self.port
            and not self.database
            and not self.target_table
            and bool(self.extra_settings)
        )

    def as_dict(self) -> dict[str, str]:
        """Field values plus extras, for display and comparison."""
        values = dict(self._values)
        values["extra_settings"] = self.extra_settings
        return values

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_string(self, mask_password: bool = False) -> str:
        """
        Serialize into the dialect of ``provider_id``.

        Args:
            mask_password: Replace the password with asterisks (for display)

        Returns:
            Connection string, or an empty string for unknown providers
        """
        builders = {
            SQL_SERVER: self._build_sql_server,
            MYSQL: self._build_mysql,
            SQLITE: self._build_sqlite,
            POSTGRESQL: self._build_postgresql,
            HIVE: self._build_hive,
        }
        builder = builders.get(self._provider_id)
        if builder is None:
            logger.debug("No connection string dialect for provider '%s'", self._provider_id)
            return ""

        password = "****" if mask_password and self.password else self.password
        return builder(password)

    def _optional_pairs(self, *labels: tuple[str, str]) -> list[str]:
        """Pairs for non-empty fields the base dialect does not carry."""
        return [f"{label}={self._values[name]}" for label, name in labels if self._values[name]]

    def _with_extras(self, text: str) -> str:
        if not self.extra_settings:
            return text
        if text and not text.endswith(";"):
            text += ";"
        return text + self.extra_settings

    def _build_sql_server(self, password: str) -> str:
        text = (
            f"Data Source={self.server};Initial Catalog={self.database};"
            f"User ID={self.user};Password={password};"
        )
        extra = self._optional_pairs(("Port", "port"), ("Driver", "driver"), ("DefaultTable", "target_table"))
        if extra:
            text += ";".join(extra) + ";"
        return self._with_extras(text)

    def _build_mysql(self, password: str) -> str:
        parts = [
            f"Server={self.server}",
            f"Database={self.database}",
            f"Uid={self.user}",
            f"Pwd={password}",
        ]
        parts += self._optional_pairs(("Port", "port"), ("Driver", "driver"), ("DefaultTable", "target_table"))
        return self._with_extras(";".join(parts))

    def _build_postgresql(self, password: str) -> str:
        parts = [
            f"Server={self.server}",
            f"Database={self.database}",
            f"User ID={self.user}",
            f"Password={password}",
        ]
        parts += self._optional_pairs(("Port", "port"), ("Driver", "driver"), ("DefaultTable", "target_table"))
        return self._with_extras(";".join(parts))

    def _build_sqlite(self, password: str) -> str:
        parts = [f"Data Source={self.server}"]
        parts += self._optional_pairs(
            ("Database", "database"),
            ("User ID", "user"),
            ("Port", "port"),
            ("Driver", "driver"),
            ("DefaultTable", "target_table"),
        )
        if self.password:
            parts.append(f"Password={password}")
        return self._with_extras(";".join(parts))

    def _build_hive(self, password: str) -> str:
        credentials = []
        if self.user:
            credentials.append(f"UID={self.user};")
        if self.password:
            credentials.append(f"PWD={password};")

        if self.is_dsn_only:
            # DSN only: the extras carry the whole connection definition
            return self.extra_settings + "".join(credentials)

        return (
            f"DRIVER={self.driver};Host={self.server};Port={self.port};"
            f"Schema={self.database};DefaultTable={self.target_table};"
            + "".join(credentials)
            + self.extra_settings
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return (
            f"ConnectionDescriptor(provider={self._provider_id!r}, server={self.server!r}, "
            f"database={self.database!r}, user={self.user!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConnectionDescriptor):
            return NotImplemented
        return self._provider_id == other._provider_id and self.as_dict() == other.as_dict()

    __hash__ = None
