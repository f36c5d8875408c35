"""
Sales Kernel - travel agency sales reports and installment ledger

A report store with role-based access and:
- Booking lookup across a shared booking ledger
- Installment payment reconciliation
- Append-only installment records
- Filtering, statistics and export over the report set
"""

__version__ = "0.1.0"
