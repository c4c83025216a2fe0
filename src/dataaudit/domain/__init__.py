"""
Domain layer package.

Contains pure data models and evaluation logic with no I/O dependencies.
"""

from dataaudit.domain.models import (
    # Enums
    AuditResult,
    CommandType,
    ThresholdOperator,
    # Core Models
    Audit,
    AuditCollection,
    AuditTest,
)

from dataaudit.domain.report_template import (
    ReportTemplate,
    TemplateName,
    get_template,
)

from dataaudit.domain.results import ResultSet, ResultTable

from dataaudit.domain.threshold import (
    Dispatch,
    ThresholdEvaluator,
    ThresholdOutcome,
    compare,
)

from dataaudit.domain.errors import (
    NoAuditsLoadedError,
    ProviderError,
    ProviderNotFoundError,
)

__all__ = [
    "AuditResult",
    "CommandType",
    "ThresholdOperator",
    "Audit",
    "AuditCollection",
    "AuditTest",
    "ReportTemplate",
    "TemplateName",
    "get_template",
    "ResultSet",
    "ResultTable",
    "Dispatch",
    "ThresholdEvaluator",
    "ThresholdOutcome",
    "compare",
    "NoAuditsLoadedError",
    "ProviderError",
    "ProviderNotFoundError",
]
