"""
Reconciliation -- how much of a booking has been paid.

Responsibility:
    Pure computation over a booking's ledger (every report sharing one
    ``bookingId``).  No store access; the selector fetches the ledger and
    hands it in.

Algorithm:
    1. Empty ledger -> paid 0.00, remaining 0.00.
    2. The newest record (ledger[0], timestamp descending) is the "main"
       record and its ``sellingRate`` is the total owed.
    3. Main record flagged ``installment == "Yes"`` -> total paid is the sum
       of ``installmentPaid`` over every ledger record flagged "Yes".
    4. Otherwise the booking was paid in full at sale time -> total paid is
       the selling rate.
    5. remaining = max(selling rate - total paid, 0).

Invariants enforced:
    - ``sellingRate`` is copy-invariant across a ledger: installment records
      carry the original's value unchanged.  Step 2 relies on it.  A ledger
      that breaks it is reported by ``selling_rate_mismatch`` so the caller
      can log it; the arithmetic is unchanged.
    - ``installmentPaid`` is a per-record delta, so summation never
      double-counts.
    - remaining is never negative.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from sales_kernel.domain.report import Report
from sales_kernel.domain.values import ZERO, format_amount, quantize_amount


@dataclass(frozen=True)
class PaymentSummary:
    """Totals for one booking, both quantized to two places."""

    total_paid: Decimal
    remaining: Decimal

    @classmethod
    def zero(cls) -> "PaymentSummary":
        return cls(total_paid=ZERO, remaining=ZERO)

    @property
    def is_settled(self) -> bool:
        return self.remaining <= 0

    def as_dict(self) -> dict[str, str]:
        return {
            "totalPaid": format_amount(self.total_paid),
            "remaining": format_amount(self.remaining),
        }


def reconcile(ledger: Sequence[Report]) -> PaymentSummary:
    """
    Compute paid/remaining for a ledger ordered newest first.

    Args:
        ledger: Every report sharing one bookingId, timestamp descending.
    """
    if not ledger:
        return PaymentSummary.zero()

    main = ledger[0]
    selling_rate = main.selling_amount

    if main.is_installment:
        total_paid = sum(
            (r.paid_amount for r in ledger if r.is_installment),
            Decimal(0),
        )
    else:
        total_paid = selling_rate

    remaining = max(selling_rate - total_paid, Decimal(0))
    return PaymentSummary(
        total_paid=quantize_amount(total_paid),
        remaining=quantize_amount(remaining),
    )


def selling_rate_mismatch(ledger: Sequence[Report]) -> list[str]:
    """Distinct selling rates in the ledger when it has more than one, else []."""
    rates = sorted({format_amount(r.selling_amount) for r in ledger})
    return rates if len(rates) > 1 else []
