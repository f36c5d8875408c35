"""
Module: sales_kernel.selectors.booking_selector
Responsibility: Booking Resolver and Payment Reconciler.  Given a business
    ``bookingId`` it finds the representative record, the full ledger, and
    the paid/remaining totals.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Lookups read the unfiltered store (``filter_by_user=False``): a
      booking's full history is visible whoever recorded each installment.
    - History is sorted by timestamp descending; the sort is stable, so
      records with equal timestamps keep store order (newest first).
    - History and reconciliation never raise for an absent or unreadable
      ledger.  They log the failure and return [] / 0.00.

Failure modes:
    - ``lookup_booking`` raises MissingFieldError for a blank id and
      BookingNotFoundError for an unknown one; the other methods do not raise
      for missing data.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from sales_kernel.domain.reconciliation import PaymentSummary, reconcile, selling_rate_mismatch
from sales_kernel.domain.report import Report
from sales_kernel.exceptions import BookingNotFoundError, MissingFieldError, SalesKernelError
from sales_kernel.logging_config import LogContext, get_logger
from sales_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.booking")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class BookingLookup:
    """Everything the installment lookup screen shows for one booking."""

    booking: Report
    history: list[Report]
    payments: PaymentSummary

    @property
    def can_pay(self) -> bool:
        """True while a balance remains."""
        return self.payments.remaining > 0


class BookingSelector(BaseSelector):
    """Read-side queries over a booking's ledger."""

    def find_booking_by_id(self, booking_id: str) -> Report | None:
        """
        First record in store order whose bookingId matches, else None.

        Store order is newest first, so this is the representative record
        for display, not the ledger.
        """
        for report in self.reports.get_saved_reports(filter_by_user=False):
            if report.booking_id == booking_id:
                return report
        return None

    def get_installment_history(self, booking_id: str) -> list[Report]:
        """All records sharing ``booking_id``, newest timestamp first."""
        try:
            ledger = [
                r for r in self.reports.get_saved_reports(filter_by_user=False)
                if r.booking_id == booking_id
            ]
        except SalesKernelError:
            logger.error(
                "installment_history_failed",
                extra={"booking_id": booking_id},
                exc_info=True,
            )
            return []
        ledger.sort(key=lambda r: r.created_at or _OLDEST, reverse=True)
        return ledger

    def calculate_booking_payments(self, booking_id: str) -> PaymentSummary:
        """
        Total paid and remaining balance for ``booking_id``.

        See ``domain.reconciliation`` for the rule.  Any failure degrades to
        0.00 / 0.00.
        """
        with LogContext.bind(booking_id=booking_id):
            try:
                ledger = self.get_installment_history(booking_id)
                mismatch = selling_rate_mismatch(ledger)
                if mismatch:
                    logger.warning(
                        "selling_rate_mismatch",
                        extra={"selling_rates": mismatch, "ledger_size": len(ledger)},
                    )
                summary = reconcile(ledger)
            except (ArithmeticError, ValueError, TypeError):
                logger.error("booking_payment_calculation_failed", exc_info=True)
                return PaymentSummary.zero()

            logger.debug(
                "booking_payments_calculated",
                extra={
                    "ledger_size": len(ledger),
                    "total_paid": summary.total_paid,
                    "remaining": summary.remaining,
                },
            )
            return summary

    def lookup_booking(self, booking_id: str) -> BookingLookup:
        """
        Representative record, ledger and totals for one booking.

        Raises:
            MissingFieldError: blank booking id.
            BookingNotFoundError: no record carries the id.
        """
        booking_id = (booking_id or "").strip()
        if not booking_id:
            raise MissingFieldError("bookingId")
        booking = self.find_booking_by_id(booking_id)
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return BookingLookup(
            booking=booking,
            history=self.get_installment_history(booking_id),
            payments=self.calculate_booking_payments(booking_id),
        )
