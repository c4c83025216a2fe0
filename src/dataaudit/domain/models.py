"""
Domain models for DataAudit.

This module contains the core business entities that represent:
- Audits and the ordered tests evaluated against them
- Collections of audits, in execution order
- Threshold operators and statement types

These models are pure data structures with no I/O dependencies.
The runner is the only component that mutates their derived state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from dataaudit.domain.report_template import TemplateName


# Reserved criteria keywords
CRITERIA_TODAY = "TODAY"
CRITERIA_COUNTROWS = "COUNTROWS"

DEFAULT_PROVIDER = "system.data.sqlclient"


# ============================================================================
# Enumerations
# ============================================================================

class AuditResult(Enum):
    """Tri-state result of an audit or a single test."""
    NOT_RUN = "not_run"
    PASSED = "passed"
    FAILED = "failed"


class CommandType(Enum):
    """How the audit statement is sent to the engine."""
    TEXT = "text"
    STORED_PROCEDURE = "stored_procedure"


class ThresholdOperator(Enum):
    """
    Comparison operators for row-count thresholds.

    The value is the canonical symbol. The aliases ``=>`` and ``=<`` are
    accepted by ``parse`` and map to ``>=`` and ``<=``.
    """
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    EQUAL = "="

    @classmethod
    def parse(cls, value: str | ThresholdOperator) -> ThresholdOperator:
        """
        Parse an operator symbol, including the reversed aliases.

        Raises:
            ValueError: If the symbol is not a known operator
        """
        if isinstance(value, cls):
            return value
        symbol = str(value).strip()
        symbol = _OPERATOR_ALIASES.get(symbol, symbol)
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown threshold operator: {value!r}") from None

    @property
    def phrase(self) -> str:
        """Human-readable relation used in failure messages."""
        return _OPERATOR_PHRASES[self]


_OPERATOR_ALIASES = {"=>": ">=", "=<": "<="}

_OPERATOR_PHRASES = {
    ThresholdOperator.GREATER_THAN: "greater than",
    ThresholdOperator.GREATER_THAN_OR_EQUAL: "greater than or equal to",
    ThresholdOperator.LESS_THAN: "less than",
    ThresholdOperator.LESS_THAN_OR_EQUAL: "less than or equal to",
    ThresholdOperator.EQUAL: "equal to",
}


# ============================================================================
# Core Domain Models
# ============================================================================

@dataclass
class AuditTest:
    """
    One pass/fail rule evaluated against the result of an audit's query.

    Attributes:
        criteria: Free text, or one of the keywords TODAY / COUNTROWS
        column_name: Column used by the TODAY criteria
        operator: Comparison operator for thresholds and TODAY clauses
        row_count: Row-count threshold used with COUNTROWS
        where_clause: Stored where-clause (cached when derived from TODAY)
        sql_statement_to_check: Exact statement built for the most recent run
        test_returned_rows: True if rows are expected, False if none are
        fail_if_condition_is_true: Fail when no result set comes back
        send_report: Send a non-failure report when the test passes
        instructions: Free-text comments included in notifications
        template_color_scheme: Color preset for the HTML data table
        use_criteria: Narrow the base statement with a WHERE clause
        test_failed_message: Reason for the most recent failure, empty otherwise
        result: Outcome of the most recent run
    """
    criteria: str = ""
    column_name: str = ""
    operator: ThresholdOperator = ThresholdOperator.GREATER_THAN
    row_count: int = 0
    where_clause: str = ""
    sql_statement_to_check: str = ""
    test_returned_rows: bool = False
    fail_if_condition_is_true: bool = False
    send_report: bool = False
    instructions: str = ""
    template_color_scheme: TemplateName = TemplateName.DEFAULT
    use_criteria: bool = False
    test_failed_message: str = ""
    result: AuditResult = AuditResult.NOT_RUN

    def __post_init__(self) -> None:
        self.operator = ThresholdOperator.parse(self.operator)
        if not isinstance(self.template_color_scheme, TemplateName):
            self.template_color_scheme = TemplateName.parse(self.template_color_scheme)
        if self.row_count < 0:
            raise ValueError(f"row_count threshold cannot be negative: {self.row_count}")

    @property
    def is_today_criteria(self) -> bool:
        return self.criteria.strip().upper() == CRITERIA_TODAY

    @property
    def is_count_rows_criteria(self) -> bool:
        return self.criteria.strip().upper() == CRITERIA_COUNTROWS

    def reset(self) -> None:
        """Clear the state derived from a previous run."""
        self.sql_statement_to_check = ""
        self.test_failed_message = ""
        self.result = AuditResult.NOT_RUN


@dataclass
class Audit:
    """
    One named, schedulable check against one data source.

    Attributes:
        name: Audit identity, used in subjects and progress events
        connection_string: Raw connection string for the provider
        provider: Provider identifier (e.g. "system.data.sqlite")
        test_server: Label of the server the query runs on, for reports
        sql_statement: Base SQL statement (or procedure name)
        order_by_clause: Optional ORDER BY appended after the criteria
        sql_type: Plain text or stored procedure
        tests: Ordered tests evaluated against this audit
        email_subscribers: Notification recipients
        show_query_message: Include the statement in notifications
        show_threshold_message: Include the failure message in notifications
        include_data_in_email: Include the result table in notifications
        email_subject: Custom subject, overrides the default
        result: Aggregate outcome of the most recent run
        has_run: Set once every test of the audit has been processed
    """
    name: str
    connection_string: str = ""
    provider: str = DEFAULT_PROVIDER
    test_server: str = ""
    sql_statement: str = ""
    order_by_clause: str | None = None
    sql_type: CommandType = CommandType.TEXT
    tests: list[AuditTest] = field(default_factory=list)
    email_subscribers: list[str] = field(default_factory=list)
    show_query_message: bool = True
    show_threshold_message: bool = True
    include_data_in_email: bool = False
    email_subject: str | None = None
    result: AuditResult = AuditResult.NOT_RUN
    has_run: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.sql_type, CommandType):
            self.sql_type = CommandType(self.sql_type)
        # Subscribers behave as a set but keep their configured order
        self.email_subscribers = list(dict.fromkeys(self.email_subscribers))

    def add_subscriber(self, address: str) -> None:
        if address not in self.email_subscribers:
            self.email_subscribers.append(address)

    def reset(self) -> None:
        """Clear run state on the audit and all of its tests."""
        self.result = AuditResult.NOT_RUN
        self.has_run = False
        for test in self.tests:
            test.reset()

    @property
    def passed(self) -> bool:
        return self.result is AuditResult.PASSED

    @property
    def failed_tests(self) -> list[AuditTest]:
        return [test for test in self.tests if test.result is AuditResult.FAILED]


class AuditCollection:
    """
    Ordered collection of audits.

    Insertion order is execution order. Audits are addressable by index
    and can be looked up by name.
    """

    def __init__(self, audits: list[Audit] | None = None):
        self._audits: list[Audit] = list(audits or [])

    def append(self, audit: Audit) -> None:
        self._audits.append(audit)

    def get(self, name: str) -> Audit | None:
        """Return the first audit with the given name, or None."""
        for audit in self._audits:
            if audit.name == name:
                return audit
        return None

    @property
    def names(self) -> list[str]:
        return [audit.name for audit in self._audits]

    def __getitem__(self, index: int) -> Audit:
        return self._audits[index]

    def __len__(self) -> int:
        return len(self._audits)

    def __iter__(self) -> Iterator[Audit]:
        return iter(self._audits)

    def __repr__(self) -> str:
        return f"AuditCollection({self.names!r})"
