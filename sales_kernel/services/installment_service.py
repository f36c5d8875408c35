"""
InstallmentService -- the Installment Writer.

Responsibility:
    Builds and appends the report that records one partial payment against
    an existing booking.

Architecture position:
    Kernel > Services.  Resolves the booking through BookingSelector and
    persists through ReportStore.

Invariants enforced:
    - The new record copies every booking-descriptive field, including
      ``sellingRate``, verbatim from the resolved booking record.  The
      reconciliation rule reads the total owed from the newest record, so
      this copy-through is what keeps it correct.
    - ``originalBookingId`` is the resolved record's store id.
    - Nothing is written when the booking cannot be resolved.

Failure modes:
    - BookingNotFoundError: unknown booking id.
    - NotAuthenticatedError / StaleWriteError from ReportStore.save_report.

Non-goals:
    - Amount validation.  Callers run ``validate_installment_payment`` first;
      ``process_installment_payment`` does not re-check.
"""

from __future__ import annotations

from dataclasses import replace

from sales_kernel.domain.report import (
    BOOKING_DESCRIPTIVE_FIELDS,
    INSTALLMENT_BOOKING_TYPE,
    INSTALLMENT_YES,
    RETURNING_CUSTOMER,
    PaymentData,
    Report,
)
from sales_kernel.domain.values import parse_strict_amount
from sales_kernel.exceptions import (
    BookingNotFoundError,
    InvalidPaymentAmountError,
    MissingFieldError,
)
from sales_kernel.logging_config import LogContext, get_logger
from sales_kernel.selectors.booking_selector import BookingSelector
from sales_kernel.services.base import BaseService
from sales_kernel.services.report_store import ReportStore

logger = get_logger("services.installment")


def validate_installment_payment(payment: PaymentData) -> None:
    """
    Caller-side checks before ``process_installment_payment``.

    Raises:
        InvalidPaymentAmountError: amount blank, malformed or <= 0.
        MissingFieldError: payment method blank.
    """
    raw = "" if payment.installment_paid is None else str(payment.installment_paid)
    try:
        amount = parse_strict_amount(raw)
    except ValueError as exc:
        raise InvalidPaymentAmountError(raw) from exc
    if amount <= 0:
        raise InvalidPaymentAmountError(raw)
    if not (payment.payment_method or "").strip():
        raise MissingFieldError("paymentMethod")


def installment_remarks(booking_id: str, remarks: str) -> str:
    return f"Installment payment for booking ID: {booking_id}. {remarks or ''}".rstrip()


class InstallmentService(BaseService):
    """Appends installment records to a booking's ledger."""

    def __init__(self, reports: ReportStore, bookings: BookingSelector | None = None):
        super().__init__(reports.store, reports.clock)
        self.reports = reports
        self.bookings = bookings or BookingSelector(reports)

    def build_installment(self, original: Report, payment: PaymentData) -> Report:
        """The unsaved installment record for ``payment`` against ``original``."""
        copied = {name: getattr(original, name) for name in BOOKING_DESCRIPTIVE_FIELDS}
        return replace(
            Report(**copied),
            booking_type=INSTALLMENT_BOOKING_TYPE,
            date=self.clock.today().isoformat(),
            agent_name=payment.agent_name or original.agent_name,
            source=RETURNING_CUSTOMER,
            installment=INSTALLMENT_YES,
            installment_paid=payment.installment_paid,
            payment_method=payment.payment_method,
            payment_link=payment.payment_link or "",
            due_date=payment.due_date or "",
            remarks=installment_remarks(original.booking_id, payment.remarks),
            bank_file_name=payment.bank_file_name or None,
            voucher_file_name=payment.voucher_file_name or None,
            invoice_file_name=payment.invoice_file_name or None,
            original_booking_id=original.id,
        )

    def process_installment_payment(self, booking_id: str, payment: PaymentData) -> Report:
        """
        Record a partial payment against ``booking_id``.

        Returns:
            The stored installment Report.

        Raises:
            BookingNotFoundError: no record carries ``booking_id``.
        """
        with LogContext.bind(booking_id=booking_id):
            original = self.bookings.find_booking_by_id(booking_id)
            if original is None:
                logger.warning("installment_booking_not_found")
                raise BookingNotFoundError(booking_id)

            saved = self.reports.save_report(self.build_installment(original, payment))
            logger.info(
                "installment_recorded",
                extra={
                    "installment_report_id": saved.id,
                    "original_report_id": original.id,
                    "amount": str(payment.installment_paid),
                },
            )
            return saved
