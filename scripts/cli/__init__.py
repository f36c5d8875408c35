"""
Interactive sales report CLI.

Log in as an agent or supervisor, submit booking reports, record installment
payments, and (supervisors) view statistics, filter, export and manage users.

Entry point: scripts/interactive.py or python -m scripts.cli
"""

from scripts.cli.main import main

__all__ = ["main"]
