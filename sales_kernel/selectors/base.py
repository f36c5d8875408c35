"""
Module: sales_kernel.selectors.base
Responsibility: Abstract base class for read-only selectors.  Selectors are
    the query side: they read reports through the ReportStore and return
    Reports or computed results.
Architecture position: Kernel > Selectors.  May import from domain/; uses
    services/report_store.py for reading only (type-level import, so the
    write side can depend on selectors without a cycle).

Invariants enforced:
    - Read-only access: selectors never call save_report or delete_report.
"""

from __future__ import annotations

from abc import ABC
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sales_kernel.services.report_store import ReportStore


class BaseSelector(ABC):
    """
    Abstract base class for all selectors.

    Non-goals:
        - BaseSelector defines no query methods; subclasses do.
    """

    def __init__(self, reports: ReportStore):
        """
        Args:
            reports: Report store to read from.
        """
        self.reports = reports
        self.clock = reports.clock
