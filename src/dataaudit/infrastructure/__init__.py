"""
Infrastructure layer package.

Contains connection strings, database providers, SQL building, HTML
rendering, notifications, configuration loading and logging.
"""

from dataaudit.infrastructure.config_loader import ConfigLoader
from dataaudit.infrastructure.connection_string import ConnectionDescriptor
from dataaudit.infrastructure.html_report import render_html_table, render_result_set
from dataaudit.infrastructure.logging_config import setup_logging

__all__ = [
    "ConfigLoader",
    "ConnectionDescriptor",
    "render_html_table",
    "render_result_set",
    "setup_logging",
]
