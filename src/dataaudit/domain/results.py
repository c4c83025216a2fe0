"""
Connection-agnostic tabular results.

A ResultSet holds zero or more tables. Zero tables means the statement
produced no tabular result at all (or could not run), which is a different
condition from a table with zero rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ResultTable:
    """One tabular result: ordered column names and ordered rows."""
    columns: tuple[str, ...]
    rows: tuple[tuple[Any, ...], ...] = ()

    @classmethod
    def from_rows(cls, columns, rows) -> ResultTable:
        return cls(tuple(columns), tuple(tuple(row) for row in rows))

    @property
    def row_count(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class ResultSet:
    """Ordered tables returned by one statement."""
    tables: tuple[ResultTable, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """True when no table came back."""
        return not self.tables

    @property
    def first_table(self) -> ResultTable | None:
        return self.tables[0] if self.tables else None

    @property
    def row_count(self) -> int:
        """Rows in the first table; zero when there is no table."""
        table = self.first_table
        return table.row_count if table else 0


EMPTY_RESULT_SET = ResultSet()
