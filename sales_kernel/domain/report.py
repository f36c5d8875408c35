"""
Report -- the persisted sales/installment record.

Responsibility:
    Immutable value object for one stored report, plus the mapping between
    the Python attribute names and the flat camelCase layout reports are
    persisted in.

Invariants enforced:
    - Reports are frozen; "editing" a payment means appending a new record.
    - ``from_record`` / ``to_record`` round-trip: keys this module does not
      know are kept in ``extra`` and written back unchanged.

Failure modes:
    - ``CorruptRecordError`` from ``from_record`` when handed a non-mapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, Mapping

from sales_kernel.domain.values import parse_amount
from sales_kernel.exceptions import CorruptRecordError

INSTALLMENT_YES = "Yes"
INSTALLMENT_NO = "No"
INSTALLMENT_BOOKING_TYPE = "Installment"
RETURNING_CUSTOMER = "Returning Customer"

# attribute name -> persisted key
_FIELD_KEYS: dict[str, str] = {
    "id": "id",
    "booking_id": "bookingId",
    "user_id": "userId",
    "agent_name": "agentName",
    "timestamp": "timestamp",
    "region": "region",
    "booking_type": "bookingType",
    "date": "date",
    "customer_name": "customerName",
    "customer_nationality": "customerNationality",
    "customer_mobile": "customerMobile",
    "source": "source",
    "service": "service",
    "provider": "provider",
    "destination": "destination",
    "check_in": "checkIn",
    "pax_number": "paxNumber",
    "currency": "currency",
    "net_rate": "netRate",
    "selling_rate": "sellingRate",
    "installment": "installment",
    "installment_paid": "installmentPaid",
    "payment_method": "paymentMethod",
    "payment_link": "paymentLink",
    "due_date": "dueDate",
    "remarks": "remarks",
    "bank_file_name": "bankFileName",
    "voucher_file_name": "voucherFileName",
    "invoice_file_name": "invoiceFileName",
    "original_booking_id": "originalBookingId",
}
_KEY_FIELDS: dict[str, str] = {key: name for name, key in _FIELD_KEYS.items()}

# Fields owned by the original booking and copied onto each installment.
BOOKING_DESCRIPTIVE_FIELDS: tuple[str, ...] = (
    "region",
    "customer_name",
    "customer_nationality",
    "customer_mobile",
    "booking_id",
    "service",
    "provider",
    "destination",
    "check_in",
    "pax_number",
    "currency",
    "net_rate",
    "selling_rate",
)


def persisted_key(attribute: str) -> str:
    """Persisted camelCase key for a Report attribute name."""
    return _FIELD_KEYS[attribute]


def attribute_for_key(key: str) -> str | None:
    """Report attribute name for a persisted key, or None if unknown."""
    return _KEY_FIELDS.get(key)


@dataclass(frozen=True)
class Report:
    """
    One stored report: an original booking sale or an installment payment.

    Amount fields hold the entered text; use ``selling_amount`` /
    ``paid_amount`` for arithmetic.
    """

    id: str = ""
    booking_id: str = ""
    user_id: str | None = None
    agent_name: str = ""
    timestamp: str = ""
    region: str = ""
    booking_type: str = ""
    date: str = ""
    customer_name: str = ""
    customer_nationality: str = ""
    customer_mobile: str = ""
    source: str = ""
    service: str = ""
    provider: str = ""
    destination: str = ""
    check_in: str = ""
    pax_number: Any = None
    currency: str = ""
    net_rate: Any = None
    selling_rate: Any = None
    installment: str = ""
    installment_paid: Any = None
    payment_method: str = ""
    payment_link: str = ""
    due_date: str = ""
    remarks: str = ""
    bank_file_name: str | None = None
    voucher_file_name: str | None = None
    invoice_file_name: str | None = None
    original_booking_id: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_installment(self) -> bool:
        return self.installment == INSTALLMENT_YES

    @property
    def is_original_booking(self) -> bool:
        """True for a sale record, False for a payment appended to a booking."""
        return not self.original_booking_id

    @property
    def selling_amount(self):
        return parse_amount(self.selling_rate)

    @property
    def paid_amount(self):
        return parse_amount(self.installment_paid)

    @property
    def created_at(self) -> datetime | None:
        """Parsed ``timestamp``; None when absent or malformed."""
        return parse_timestamp(self.timestamp)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Report":
        """Build a Report from its persisted layout."""
        if not isinstance(record, Mapping):
            raise CorruptRecordError("report", f"expected object, got {type(record).__name__}")
        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in record.items():
            name = _KEY_FIELDS.get(key)
            if name is None:
                extra[key] = value
            elif value is not None or name in _NULLABLE:
                known[name] = value
        return cls(**known, extra=extra)

    def to_record(self) -> dict[str, Any]:
        """Persisted layout: flat dict with camelCase keys."""
        record: dict[str, Any] = dict(self.extra)
        for f in fields(self):
            if f.name == "extra":
                continue
            record[_FIELD_KEYS[f.name]] = getattr(self, f.name)
        return record


_NULLABLE = frozenset(
    f.name for f in fields(Report) if f.name != "extra" and f.default is None
)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp (``Z`` suffix accepted) as aware UTC."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and ``Z`` suffix."""
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class PaymentData:
    """Fields supplied by the caller for one installment payment."""

    installment_paid: Any
    payment_method: str = ""
    agent_name: str = ""
    payment_link: str = ""
    due_date: str = ""
    remarks: str = ""
    bank_file_name: str | None = None
    voucher_file_name: str | None = None
    invoice_file_name: str | None = None
