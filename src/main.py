"""
DataAudit - Database Data-Quality Audit Tool

Runs configured SQL audits, checks their row counts against thresholds and
notifies subscribers of failures.
"""

import sys
from dataaudit.interface.cli import main


if __name__ == "__main__":
    sys.exit(main())
