"""
Module: sales_kernel.selectors.report_selector
Responsibility: Report listing and filtering for the saved-reports view and
    the supervisor's advanced filter.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - ``saved_reports`` applies the access filter; the region narrowing it
      offers is honoured for supervisors only.
    - ``advanced_filter`` and ``filter_options`` read the whole store and
      require the ADVANCED_FILTER capability.
"""

from __future__ import annotations

from sales_kernel.domain.access import Capability
from sales_kernel.domain.filters import ReportFilter, distinct_values
from sales_kernel.domain.report import Report
from sales_kernel.logging_config import get_logger
from sales_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.reports")

FILTER_OPTION_FIELDS = (
    "booking_type",
    "region",
    "agent_name",
    "service",
    "provider",
    "destination",
    "payment_method",
)


class ReportSelector(BaseSelector):

    def saved_reports(self, region: str = "") -> list[Report]:
        """Reports visible to the current user, optionally one region (supervisors)."""
        reports = self.reports.get_saved_reports()
        if region and self.reports.auth.is_supervisor():
            reports = [r for r in reports if r.region == region]
        return reports

    def advanced_filter(self, criteria: ReportFilter) -> list[Report]:
        """
        Raises:
            PermissionDeniedError: caller is not a supervisor.
        """
        self.reports.auth.require(Capability.ADVANCED_FILTER, "use the advanced filter")
        matched = criteria.apply(self.reports.get_saved_reports(filter_by_user=False))
        logger.debug("advanced_filter_applied", extra={"matched": len(matched)})
        return matched

    def filter_options(self) -> dict[str, list[str]]:
        """Pick-list values per filterable field."""
        self.reports.auth.require(Capability.ADVANCED_FILTER, "use the advanced filter")
        reports = self.reports.get_saved_reports(filter_by_user=False)
        return {name: distinct_values(reports, name) for name in FILTER_OPTION_FIELDS}
