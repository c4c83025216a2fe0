"""
DataAudit - database data-quality audits.

Runs SQL audits against SQL Server, MySQL, SQLite, PostgreSQL and Hive,
checks the returned row counts against thresholds and e-mails subscribers
when an audit fails.

Usage:
    # CLI (recommended)
    dataaudit run --config-dir config

    # Programmatic
    from dataaudit.application import AuditRunner
    from dataaudit.infrastructure import ConfigLoader

    runner = AuditRunner(audits=ConfigLoader("config").load_audits())
    runner.run_audits()
"""

__version__ = "0.1.0"
__author__ = "DataAudit Team"

__all__ = ["__version__"]
