"""
Interface layer package.

Contains the command-line interface.
"""

from dataaudit.interface.cli import app, main

__all__ = ["app", "main"]
