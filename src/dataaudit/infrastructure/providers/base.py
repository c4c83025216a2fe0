"""
Database provider contract.

Each database engine is reached through a provider implementing three
capabilities:

- ``create_session``: open a connection for one test execution
- ``create_command``: prepare a statement with its kind and timeout
- ``create_data_adapter``: fill a ResultSet from a command

The engine only calls these operations and consumes the connection-agnostic
structures (connection string text, statement text, ResultSet). Providers
also classify their own failures through ``is_timeout``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from dataaudit.domain.models import CommandType
from dataaudit.domain.results import ResultSet


class DbSession(ABC):
    """An open database session, scoped to one test execution."""

    @abstractmethod
    def close(self) -> None:
        """Release the session. Safe to call more than once."""

    def __enter__(self) -> DbSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DbCommand(ABC):
    """A statement bound to a session."""

    text: str
    command_type: CommandType
    timeout: int

    @abstractmethod
    def close(self) -> None:
        """Release the command. Safe to call more than once."""

    def __enter__(self) -> DbCommand:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class DataAdapter(ABC):
    """Executes a command and collects every tabular result it produces."""

    @abstractmethod
    def fill(self) -> ResultSet:
        """
        Execute the command and return its tables.

        Raises:
            Exception: Whatever the native client raises on execution errors
        """

    def close(self) -> None:
        """Release adapter resources."""

    def __enter__(self) -> DataAdapter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class AuditDbProvider(ABC):
    """
    Capability interface implemented once per database engine.

    Subclasses declare the identifier they answer to in PROVIDER_ID; the
    registry maps identifiers to provider factories.
    """

    PROVIDER_ID: ClassVar[str] = ""
    ENGINE_NAME: ClassVar[str] = "Unknown"

    # Message fragment used by engines that report timeouts only as text
    TIMEOUT_MARKER: ClassVar[str] = "Timeout expired"

    @abstractmethod
    def create_session(self, connection_string: str, connection_timeout: int | None = None) -> DbSession:
        """
        Open a database session.

        Args:
            connection_string: Connection string in this provider's dialect
            connection_timeout: Seconds allowed for opening the session

        Returns:
            Open session

        Raises:
            Exception: If the session cannot be opened
        """

    @abstractmethod
    def create_command(
        self,
        session: DbSession,
        text: str,
        command_type: CommandType = CommandType.TEXT,
        timeout: int | None = None,
    ) -> DbCommand:
        """Bind a statement to an open session."""

    @abstractmethod
    def create_data_adapter(self, command: DbCommand) -> DataAdapter:
        """Create an adapter able to fill a ResultSet from ``command``."""

    def is_timeout(self, error: BaseException) -> bool:
        """
        Classify an execution failure as a timeout.

        The base rule accepts TimeoutError and the legacy message text.
        Providers override this with native error codes.
        """
        if isinstance(error, TimeoutError):
            return True
        return str(error).startswith(self.TIMEOUT_MARKER)

    def describe_error(self, error: BaseException) -> str:
        """Message recorded on the test for a failed operation."""
        message = str(error).strip()
        return message or type(error).__name__

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider_id={self.PROVIDER_ID!r})"


def column_names(description: Any) -> tuple[str, ...]:
    """Column names from a DB-API cursor description."""
    return tuple(str(column[0]) for column in description or ())
