"""
Module: sales_kernel.selectors.statistics_selector
Responsibility: Supervisor dashboard aggregates -- sales totals by region,
    agent, month and service over a period.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Sales are the sum of ``sellingRate`` over original booking records.
      Installment records carry a copy of their booking's selling rate, so
      counting them would count a booking once per payment.
    - Months are labelled ``M/YYYY`` and ordered chronologically; the other
      series keep first-seen order.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable

from sales_kernel.domain.access import Capability
from sales_kernel.domain.filters import DashboardPeriod
from sales_kernel.domain.report import Report
from sales_kernel.domain.values import quantize_amount
from sales_kernel.logging_config import get_logger
from sales_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.statistics")


@dataclass(frozen=True)
class SeriesPoint:
    name: str
    value: Decimal


@dataclass(frozen=True)
class DashboardStatistics:
    sales_by_region: list[SeriesPoint]
    sales_by_agent: list[SeriesPoint]
    sales_by_month: list[SeriesPoint]
    sales_by_service: list[SeriesPoint]
    report_count: int

    @property
    def total_sales(self) -> Decimal:
        return sum((p.value for p in self.sales_by_region), Decimal(0))


def _month_label(report: Report) -> str:
    created = report.created_at
    return f"{created.month}/{created.year}" if created else ""


def _month_sort_key(label: str) -> tuple[int, int]:
    month, _, year = label.partition("/")
    return (int(year), int(month)) if month and year else (0, 0)


def _group(reports: list[Report], key: Callable[[Report], str]) -> list[SeriesPoint]:
    totals: dict[str, Decimal] = {}
    for report in reports:
        name = key(report) or ""
        totals[name] = totals.get(name, Decimal(0)) + report.selling_amount
    return [SeriesPoint(name, quantize_amount(value)) for name, value in totals.items()]


class StatisticsSelector(BaseSelector):

    def dashboard(
        self,
        period: DashboardPeriod = DashboardPeriod.ALL,
        region: str = "",
        agent: str = "",
        service: str = "",
    ) -> DashboardStatistics:
        """
        Raises:
            PermissionDeniedError: caller is not a supervisor.
        """
        self.reports.auth.require(Capability.VIEW_STATISTICS, "view statistics")
        today = self.clock.today()

        selected: list[Report] = []
        for report in self.reports.get_saved_reports(filter_by_user=False):
            if not report.is_original_booking:
                continue
            created = report.created_at
            if period is not DashboardPeriod.ALL and (
                created is None or not period.contains(created.date(), today)
            ):
                continue
            if region and report.region != region:
                continue
            if agent and report.agent_name != agent:
                continue
            if service and report.service != service:
                continue
            selected.append(report)

        by_month = sorted(_group(selected, _month_label), key=lambda p: _month_sort_key(p.name))
        stats = DashboardStatistics(
            sales_by_region=_group(selected, lambda r: r.region),
            sales_by_agent=_group(selected, lambda r: r.agent_name),
            sales_by_month=by_month,
            sales_by_service=_group(selected, lambda r: r.service),
            report_count=len(selected),
        )
        logger.debug(
            "dashboard_computed",
            extra={"period": period.value, "report_count": stats.report_count},
        )
        return stats
