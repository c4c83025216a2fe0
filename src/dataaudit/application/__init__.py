"""
Application layer package.

Contains the audit runner and its progress observers.
"""

from dataaudit.application.audit_runner import AuditRunner
from dataaudit.application.observers import AuditObserver, LoggingObserver

__all__ = ["AuditObserver", "AuditRunner", "LoggingObserver"]
