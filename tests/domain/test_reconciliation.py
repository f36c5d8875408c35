"""Tests for the payment reconciliation rule (sales_kernel/domain/reconciliation.py)."""

from decimal import Decimal

from sales_kernel.domain.reconciliation import (
    PaymentSummary,
    reconcile,
    selling_rate_mismatch,
)
from sales_kernel.domain.report import Report


def _sale(rate="1000", installment="No", paid=None):
    return Report(selling_rate=rate, installment=installment, installment_paid=paid)


def _payment(paid, rate="1000"):
    return Report(selling_rate=rate, installment="Yes", installment_paid=paid, original_booking_id="r0")


class TestReconcile:

    def test_empty_ledger_is_zero(self):
        assert reconcile([]) == PaymentSummary.zero()

    def test_paid_in_full_sale(self):
        summary = reconcile([_sale("1000")])
        assert summary.total_paid == Decimal("1000.00")
        assert summary.remaining == Decimal("0.00")
        assert summary.is_settled

    def test_installment_sale_with_deposit(self):
        summary = reconcile([_sale("1000", installment="Yes", paid="300")])
        assert summary.total_paid == Decimal("300.00")
        assert summary.remaining == Decimal("700.00")
        assert not summary.is_settled

    def test_sums_every_installment_record(self):
        ledger = [
            _payment("200"),
            _payment("150"),
            _sale("1000", installment="Yes", paid="300"),
        ]
        summary = reconcile(ledger)
        assert summary.total_paid == Decimal("650.00")
        assert summary.remaining == Decimal("350.00")

    def test_paid_in_full_sale_then_installment(self):
        """Only installment records count once the newest record is an installment."""
        summary = reconcile([_payment("300"), _sale("1000.00")])
        assert summary.as_dict() == {"totalPaid": "300.00", "remaining": "700.00"}

    def test_two_installments(self):
        summary = reconcile([_payment("400"), _payment("300"), _sale("1000")])
        assert summary.as_dict() == {"totalPaid": "700.00", "remaining": "300.00"}

    def test_overpayment_clamps_remaining(self):
        summary = reconcile([_payment("800"), _sale("1000", installment="Yes", paid="500")])
        assert summary.total_paid == Decimal("1300.00")
        assert summary.remaining == Decimal("0.00")

    def test_newest_record_decides_mode(self):
        """A non-installment newest record means paid in full, whatever came before."""
        ledger = [_sale("900"), _payment("100", rate="900")]
        summary = reconcile(ledger)
        assert summary.total_paid == Decimal("900.00")
        assert summary.remaining == Decimal("0.00")

    def test_newest_selling_rate_is_total_owed(self):
        ledger = [_payment("100", rate="1200"), _sale("1000", installment="Yes", paid="100")]
        assert reconcile(ledger).remaining == Decimal("1000.00")

    def test_unparsable_amounts_count_as_zero(self):
        ledger = [_payment("lots"), _sale("1000", installment="Yes", paid="250")]
        summary = reconcile(ledger)
        assert summary.total_paid == Decimal("250.00")

    def test_as_dict_two_place_strings(self):
        summary = reconcile([_sale("1000", installment="Yes", paid="300")])
        assert summary.as_dict() == {"totalPaid": "300.00", "remaining": "700.00"}


class TestSellingRateMismatch:

    def test_consistent_ledger(self):
        assert selling_rate_mismatch([_payment("1", rate="1000.00"), _sale("1000")]) == []

    def test_mismatched_ledger(self):
        assert selling_rate_mismatch([_payment("1", rate="1200"), _sale("1000")]) == ["1000.00", "1200.00"]
