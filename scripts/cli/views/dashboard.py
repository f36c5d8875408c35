"""CLI views: supervisor statistics dashboard."""

from sales_kernel.domain.filters import DashboardPeriod
from scripts.cli.util import ask, ask_choice, fmt_amount


def _print_series(title, points):
    print(f"  {title}")
    if not points:
        print("    (none)")
    for p in points:
        print(f"    {p.name or '-':<28} {fmt_amount(p.value):>14}")
    print()


def show_dashboard(services):
    """Sales totals by region, agent, month and service."""
    periods = [p.value for p in DashboardPeriod]
    raw = ask_choice("Period", periods, DashboardPeriod.ALL.value)
    try:
        period = DashboardPeriod(raw)
    except ValueError:
        print(f"  Unknown period {raw!r}, showing all.")
        period = DashboardPeriod.ALL
    stats = services.statistics.dashboard(
        period=period,
        region=ask("Region (blank for all)"),
        agent=ask("Agent (blank for all)"),
        service=ask("Service (blank for all)"),
    )
    print()
    print("=" * 72)
    print("  SALES DASHBOARD".center(72))
    print(f"  {period.value}".center(72))
    print("=" * 72)
    print(f"\n  Bookings: {stats.report_count}   Total sales: {fmt_amount(stats.total_sales)}\n")
    _print_series("By region", stats.sales_by_region)
    _print_series("By agent", stats.sales_by_agent)
    _print_series("By month", stats.sales_by_month)
    _print_series("By service", stats.sales_by_service)
