"""
Configuration domain models package.

This package contains the pydantic models for settings and audit
definition files.
"""

from .audit_definition import AuditDefinition, AuditFile, AuditTestDefinition
from .settings import AppSettings, RunnerSettings, SmtpSettings

__all__ = [
    "AppSettings",
    "AuditDefinition",
    "AuditFile",
    "AuditTestDefinition",
    "RunnerSettings",
    "SmtpSettings",
]
