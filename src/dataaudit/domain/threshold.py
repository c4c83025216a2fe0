"""
Threshold evaluation for audit tests.

Decides pass/fail from the result set returned for a test and states which
notification, if any, has to follow.

Architecture Note:
    - Pure domain logic - no I/O, no database calls
    - The runner applies the outcome to the test and dispatches notifications
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from dataaudit.domain.models import AuditTest, ThresholdOperator
from dataaudit.domain.results import ResultSet


class Dispatch(Enum):
    """Notification that follows an evaluation."""
    NONE = "none"
    FAILURE = "failure"
    REPORT = "report"


@dataclass(frozen=True)
class ThresholdOutcome:
    """Result of evaluating one test."""
    passed: bool
    message: str = ""
    dispatch: Dispatch = Dispatch.NONE


def compare(row_count: int, operator: ThresholdOperator | str, threshold: int) -> bool:
    """
    Apply a threshold operator.

    Args:
        row_count: Rows returned by the audit query
        operator: Operator or symbol (aliases ``=>`` and ``=<`` accepted)
        threshold: Configured limit

    Returns:
        True if the comparison holds (the test passes)
    """
    operator = ThresholdOperator.parse(operator)
    if operator is ThresholdOperator.GREATER_THAN:
        return row_count > threshold
    if operator is ThresholdOperator.GREATER_THAN_OR_EQUAL:
        return row_count >= threshold
    if operator is ThresholdOperator.LESS_THAN:
        return row_count < threshold
    if operator is ThresholdOperator.LESS_THAN_OR_EQUAL:
        return row_count <= threshold
    return row_count == threshold


class ThresholdEvaluator:
    """
    Classifies a test run as pass or fail.

    Two regimes exist: an empty result set (no table came back at all) and a
    non-empty one, where the row count of the first table is tested.
    """

    def evaluate(self, test: AuditTest, result_set: ResultSet) -> ThresholdOutcome:
        """Evaluate ``test`` against whatever the engine returned."""
        if result_set.is_empty:
            return self.evaluate_empty(test)
        return self.evaluate_rows(test, result_set.row_count)

    def evaluate_empty(self, test: AuditTest) -> ThresholdOutcome:
        """
        Evaluate a run that produced no table.

        A report test that would fail here passes quietly instead: it has to
        report on success without ever alerting, so nothing is dispatched.
        """
        if not test.fail_if_condition_is_true:
            return ThresholdOutcome(passed=True)
        if test.send_report:
            return ThresholdOutcome(passed=True)
        return ThresholdOutcome(
            passed=False,
            message=test.test_failed_message,
            dispatch=Dispatch.FAILURE,
        )

    def evaluate_rows(self, test: AuditTest, row_count: int) -> ThresholdOutcome:
        """
        Evaluate the row count of a returned table.

        Raises:
            ValueError: If row_count is negative
        """
        if row_count < 0:
            raise ValueError(f"row_count cannot be negative: {row_count}")

        if test.test_returned_rows:
            if test.is_count_rows_criteria:
                passed = compare(row_count, test.operator, test.row_count)
                message = (
                    f"The failure threshold was {test.operator.phrase} {test.row_count} rows. "
                    f"This audit returned {row_count} rows."
                )
            else:
                passed = row_count > 0
                message = (
                    "This audit was set to have more than zero rows returned. "
                    f"This audit returned {row_count} rows."
                )
        else:
            passed = row_count == 0
            message = (
                "This audit was set to not return any rows. "
                f"This audit returned {row_count} rows."
            )

        if not passed:
            return ThresholdOutcome(passed=False, message=message, dispatch=Dispatch.FAILURE)
        if test.send_report:
            return ThresholdOutcome(passed=True, dispatch=Dispatch.REPORT)
        return ThresholdOutcome(passed=True)
