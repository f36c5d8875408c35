"""CLI views: new report form, saved reports, advanced filter."""

from sales_kernel.domain.filters import ReportFilter
from sales_kernel.domain.report import INSTALLMENT_NO, INSTALLMENT_YES
from sales_kernel.services import validate_report_submission
from scripts.cli.util import (
    ask,
    ask_amount,
    ask_choice,
    ask_date,
    confirm,
    fmt_amount,
    fmt_timestamp,
)

W = 96


def print_report_table(reports, title: str):
    """Print reports as one row each, newest first."""
    print()
    print("=" * W)
    print(f"  {title}".center(W))
    print("=" * W)
    if not reports:
        print("\n  No reports found.\n")
        return
    print(f"  {'#':>3}  {'Created':<16} {'Booking':<12} {'Customer':<20} {'Agent':<16} {'Type':<11} {'Selling':>12}")
    print(f"  {'-'*3}  {'-'*16} {'-'*12} {'-'*20} {'-'*16} {'-'*11} {'-'*12}")
    for i, r in enumerate(reports, 1):
        customer = r.customer_name if len(r.customer_name) <= 20 else r.customer_name[:17] + "..."
        kind = "Installment" if r.original_booking_id else (r.booking_type or "-")
        print(
            f"  {i:>3}  {fmt_timestamp(r.timestamp):<16} {r.booking_id:<12.12} {customer:<20} "
            f"{r.agent_name:<16.16} {kind:<11.11} {fmt_amount(r.selling_rate, r.currency):>12}"
        )
    print()
    print(f"  Total: {len(reports)} reports")
    print()


def print_report_detail(report):
    print()
    print(f"  Report {report.id}")
    print(f"  {'-'*40}")
    for label, value in (
        ("Booking ID", report.booking_id),
        ("Booking type", report.booking_type),
        ("Date", report.date),
        ("Agent", report.agent_name),
        ("Region", report.region),
        ("Customer", report.customer_name),
        ("Nationality", report.customer_nationality),
        ("Mobile", report.customer_mobile),
        ("Service", report.service),
        ("Provider", report.provider),
        ("Destination", report.destination),
        ("Check-in", report.check_in),
        ("Pax", report.pax_number),
        ("Net rate", fmt_amount(report.net_rate, report.currency)),
        ("Selling rate", fmt_amount(report.selling_rate, report.currency)),
        ("Payment method", report.payment_method),
        ("Installment", report.installment),
        ("Paid", fmt_amount(report.installment_paid, report.currency) if report.is_installment else "-"),
        ("Due date", report.due_date),
        ("Remarks", report.remarks),
    ):
        print(f"  {label + ':':<16} {value if value not in (None, '') else '-'}")
    print()


def show_new_report(services):
    """Collect a new booking report and save it."""
    options = services.config.reports
    user = services.auth.get_current_user()
    print("\n  NEW REPORT\n")
    region = user.region if not user.is_supervisor else ask_choice("Region", options.regions)
    installment = INSTALLMENT_YES if confirm("Paid in installments?") else INSTALLMENT_NO
    data = {
        "region": region,
        "bookingType": ask("Booking type", "New Booking"),
        "date": ask("Booking date (YYYY-MM-DD)", services.reports.clock.today().isoformat()),
        "customerName": ask("Customer name"),
        "customerNationality": ask("Nationality"),
        "customerMobile": ask("Mobile"),
        "source": ask("Source", "Walk-in"),
        "bookingId": ask("Booking ID"),
        "service": ask_choice("Service", options.services),
        "provider": ask("Provider"),
        "destination": ask("Destination"),
        "checkIn": ask("Check-in (YYYY-MM-DD)"),
        "paxNumber": ask("Pax", "1"),
        "currency": ask("Currency", "USD"),
        "netRate": ask("Net rate"),
        "sellingRate": ask("Selling rate"),
        "paymentMethod": ask_choice("Payment method", options.payment_methods),
        "installment": installment,
        "remarks": ask("Remarks"),
    }
    if installment == INSTALLMENT_YES:
        data["installmentPaid"] = ask("Amount paid now")
        data["dueDate"] = ask("Next due date (YYYY-MM-DD)")

    validate_report_submission(data)
    saved = services.reports.save_report(data)
    print(f"\n  Saved report {saved.id} for booking {saved.booking_id}.\n")


def show_saved_reports(services):
    """List visible reports; open or delete one."""
    region = ""
    if services.auth.is_supervisor():
        region = ask_choice("Region (blank for all)", services.config.reports.regions)
    reports = services.report_queries.saved_reports(region=region)
    print_report_table(reports, "SAVED REPORTS")
    if not reports:
        return
    raw = ask("Open # (blank to go back)")
    if not raw.isdigit() or not 1 <= int(raw) <= len(reports):
        return
    report = reports[int(raw) - 1]
    print_report_detail(report)
    if confirm("Delete this report?"):
        services.reports.delete_report(report.id)
        print("  Report deleted.\n")


def prompt_filter(services, with_amounts: bool = True) -> ReportFilter:
    """Ask for filter criteria; every prompt may be left blank."""
    options = services.report_queries.filter_options()
    print("\n  Filter criteria (blank = any)\n")
    criteria = {
        "start_date": ask_date("From"),
        "end_date": ask_date("To"),
        "region": ask_choice("Region", options["region"]),
        "agent_name": ask_choice("Agent", options["agent_name"]),
        "service": ask_choice("Service", options["service"]),
    }
    if with_amounts:
        criteria.update(
            booking_type=ask_choice("Booking type", options["booking_type"]),
            provider=ask_choice("Provider", options["provider"]),
            destination=ask_choice("Destination", options["destination"]),
            customer_name=ask("Customer name contains"),
            min_amount=ask_amount("Min selling rate"),
            max_amount=ask_amount("Max selling rate"),
            payment_method=ask_choice("Payment method", options["payment_method"]),
            installment=ask_choice("Installment", [INSTALLMENT_YES, INSTALLMENT_NO]),
        )
    return ReportFilter(**criteria)


def show_advanced_filter(services):
    """Supervisor search across every report."""
    criteria = prompt_filter(services)
    print_report_table(services.report_queries.advanced_filter(criteria), "FILTERED REPORTS")
