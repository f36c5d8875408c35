#!/usr/bin/env python3
"""
Interactive Sales Report CLI.

Usage:
    python3 scripts/interactive.py

Set SALES_REPORT_CONFIG to a YAML file to override the bundled defaults.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from scripts.cli.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
