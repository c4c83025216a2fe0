"""
Audit query builder.

Turns an audit's base statement plus one test's criteria into the concrete
SQL statement sent to the engine. The built text is written back onto the
test as ``sql_statement_to_check`` so reports show exactly what ran.
"""

from __future__ import annotations

import logging

from dataaudit.domain.models import Audit, AuditTest, CRITERIA_COUNTROWS, CRITERIA_TODAY

logger = logging.getLogger(__name__)

# Criteria keywords that never stand for a where-clause themselves
_RESERVED_CRITERIA = frozenset({CRITERIA_TODAY, CRITERIA_COUNTROWS})


def today_clause(column_name: str, operator: str) -> str:
    """Where-clause comparing the age in days of ``column_name`` with zero."""
    return f"DATEDIFF(day, {column_name}, getdate()) {operator}0"


class QueryBuilder:
    """
    Builds audit statements.

    Usage:
        builder = QueryBuilder()
        sql = builder.build(audit, 0)
        audit.tests[0].sql_statement_to_check == sql   # True
    """

    def build(self, audit: Audit, test_index: int) -> str:
        """
        Build the statement for one test.

        Args:
            audit: Audit providing the base statement and order-by clause
            test_index: Index of the test in ``audit.tests``

        Returns:
            SQL text, also stored on the test

        Raises:
            IndexError: If test_index is out of range
        """
        test = audit.tests[test_index]

        if test.use_criteria:
            sql = f"{audit.sql_statement} WHERE {self.resolve_where_clause(test)}"
            if audit.order_by_clause:
                sql += f" ORDER BY {audit.order_by_clause}"
        else:
            sql = audit.sql_statement

        test.sql_statement_to_check = sql
        logger.debug("Built statement for '%s' test %d: %s", audit.name, test_index, sql)
        return sql

    def resolve_where_clause(self, test: AuditTest) -> str:
        """
        Resolve the where-clause of a test.

        TODAY produces a DATEDIFF comparison that is cached on the test. Any
        other criteria uses the stored where-clause unchanged; free-text
        criteria stand in for it when nothing is stored.
        """
        if test.is_today_criteria:
            test.where_clause = today_clause(test.column_name, test.operator.value)
            return test.where_clause

        if test.where_clause:
            return test.where_clause

        criteria = test.criteria.strip()
        if criteria.upper() in _RESERVED_CRITERIA:
            return test.where_clause
        return criteria
