"""CLI views: installment lookup and payment."""

from sales_kernel.domain.report import PaymentData
from sales_kernel.services import validate_installment_payment
from scripts.cli.util import ask, ask_choice, confirm, fmt_amount, fmt_timestamp


def print_booking(lookup):
    booking = lookup.booking
    cur = booking.currency
    print()
    print("=" * 72)
    print(f"  BOOKING {booking.booking_id}".center(72))
    print("=" * 72)
    print(f"  Customer:      {booking.customer_name}")
    print(f"  Service:       {booking.service}  {booking.destination}")
    print(f"  Selling rate:  {fmt_amount(booking.selling_rate, cur)}")
    print(f"  Total paid:    {fmt_amount(lookup.payments.total_paid, cur)}")
    print(f"  Remaining:     {fmt_amount(lookup.payments.remaining, cur)}")
    print()
    print(f"  {'Created':<16} {'Agent':<18} {'Method':<16} {'Paid':>14}")
    print(f"  {'-'*16} {'-'*18} {'-'*16} {'-'*14}")
    for r in lookup.history:
        paid = fmt_amount(r.installment_paid, cur) if r.is_installment else "-"
        print(f"  {fmt_timestamp(r.timestamp):<16} {r.agent_name:<18.18} {r.payment_method:<16.16} {paid:>14}")
    print()


def show_installment_lookup(services):
    """Look up a booking by id and optionally record a payment against it."""
    lookup = services.bookings.lookup_booking(ask("Booking ID"))
    print_booking(lookup)
    if not lookup.can_pay:
        print("  Booking is fully paid.\n")
        return
    if not confirm("Record a payment?"):
        return

    user = services.auth.get_current_user()
    payment = PaymentData(
        installment_paid=ask("Amount"),
        payment_method=ask_choice("Payment method", services.config.reports.payment_methods),
        agent_name=ask("Agent name", user.name if user else ""),
        payment_link=ask("Payment link"),
        due_date=ask("Next due date (YYYY-MM-DD)"),
        remarks=ask("Remarks"),
    )
    validate_installment_payment(payment)
    saved = services.installments.process_installment_payment(lookup.booking.booking_id, payment)
    remaining = services.bookings.calculate_booking_payments(saved.booking_id).remaining
    print(f"\n  Payment recorded ({saved.id}). Remaining: {fmt_amount(remaining, saved.currency)}\n")
