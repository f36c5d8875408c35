"""
Filters -- report selection criteria.

Responsibility:
    ``ReportFilter`` holds the criteria used by the advanced filter, the
    export screen and the saved-reports region picker.  Blank criteria are
    ignored, so ``ReportFilter()`` matches everything.

    ``DashboardPeriod`` is the coarse date window used by the statistics
    view.

Invariants enforced:
    - Date bounds are inclusive whole days compared against the UTC date of
      the report's ``timestamp``; a report without a readable timestamp
      fails any date bound.
    - Amount bounds compare the leading number of ``sellingRate`` ("1000 USD"
      is 1000); a report whose rate has no leading number fails any bound.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable

from sales_kernel.domain.report import Report, parse_timestamp
from sales_kernel.domain.values import leading_amount

# ReportFilter attribute -> Report attribute, exact-match criteria
_EXACT_CRITERIA: tuple[tuple[str, str], ...] = (
    ("booking_type", "booking_type"),
    ("region", "region"),
    ("agent_name", "agent_name"),
    ("service", "service"),
    ("provider", "provider"),
    ("destination", "destination"),
    ("payment_method", "payment_method"),
    ("installment", "installment"),
)


@dataclass(frozen=True)
class ReportFilter:
    start_date: date | None = None
    end_date: date | None = None
    booking_type: str = ""
    region: str = ""
    agent_name: str = ""
    service: str = ""
    provider: str = ""
    destination: str = ""
    customer_name: str = ""
    min_amount: Decimal | None = None
    max_amount: Decimal | None = None
    payment_method: str = ""
    installment: str = ""

    def matches(self, report: Report) -> bool:
        if self.start_date or self.end_date:
            created = parse_timestamp(report.timestamp)
            if created is None:
                return False
            if self.start_date and created.date() < self.start_date:
                return False
            if self.end_date and created.date() > self.end_date:
                return False

        for criterion, attribute in _EXACT_CRITERIA:
            wanted = getattr(self, criterion)
            if wanted and getattr(report, attribute) != wanted:
                return False

        if self.customer_name:
            if self.customer_name.lower() not in (report.customer_name or "").lower():
                return False

        if self.min_amount is not None or self.max_amount is not None:
            rate = leading_amount(report.selling_rate)
            if rate is None:
                return False
            if self.min_amount is not None and rate < self.min_amount:
                return False
            if self.max_amount is not None and rate > self.max_amount:
                return False

        return True

    def apply(self, reports: Iterable[Report]) -> list[Report]:
        return [r for r in reports if self.matches(r)]


def distinct_values(reports: Iterable[Report], attribute: str) -> list[str]:
    """Sorted, non-empty distinct values of ``attribute`` (pick-list options)."""
    values = {getattr(r, attribute) for r in reports}
    return sorted(str(v) for v in values if v)


class DashboardPeriod(str, Enum):
    ALL = "all"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_YEAR = "this_year"

    def contains(self, when: date, today: date) -> bool:
        if self is DashboardPeriod.ALL:
            return True
        if self is DashboardPeriod.THIS_YEAR:
            return when.year == today.year
        if self is DashboardPeriod.THIS_MONTH:
            return (when.year, when.month) == (today.year, today.month)
        if today.month == 1:
            return (when.year, when.month) == (today.year - 1, 12)
        return (when.year, when.month) == (today.year, today.month - 1)
