"""Selectors for the sales kernel (read side)."""

from sales_kernel.selectors.booking_selector import BookingLookup, BookingSelector
from sales_kernel.selectors.report_selector import ReportSelector
from sales_kernel.selectors.statistics_selector import (
    DashboardStatistics,
    SeriesPoint,
    StatisticsSelector,
)

__all__ = [
    "BookingLookup",
    "BookingSelector",
    "DashboardStatistics",
    "ReportSelector",
    "SeriesPoint",
    "StatisticsSelector",
]
