"""
SQL infrastructure package.

Provides the builder that assembles audit statements from base queries
and test criteria.
"""

from dataaudit.infrastructure.sql.query_builder import QueryBuilder, today_clause

__all__ = [
    "QueryBuilder",
    "today_clause",
]
