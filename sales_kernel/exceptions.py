"""
Typed Exception Hierarchy for the Sales Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers (the CLI, tests, any future front end) branch on the failure kind,
never on message text:

    try:
        writer.process_installment_payment(booking_id, payment)
    except BookingNotFoundError as e:
        show(f"Booking {e.booking_id} not found")
    except ValidationError as e:
        show(e.code, str(e))

Every exception carries a ``code`` class attribute (machine-readable) and
its context as attributes (not only inside the message).

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    SalesKernelError (base)
    |
    +-- NotFoundError
    |   +-- ReportNotFoundError
    |   +-- BookingNotFoundError
    |   +-- UserNotFoundError
    |
    +-- PermissionDeniedError
    |   +-- NotAuthenticatedError
    |
    +-- ValidationError
    |   +-- MissingFieldError
    |   +-- InvalidPaymentAmountError
    |   +-- DuplicateUsernameError
    |   +-- EmptySelectionError
    |
    +-- StoreError
    |   +-- CorruptRecordError
    |
    +-- ConcurrencyError
        +-- StaleWriteError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                    | When Raised
-------------|-------------------------|------------------------------------------
NotFound     | REPORT_NOT_FOUND        | Delete of an unknown report id
             | BOOKING_NOT_FOUND       | Lookup/payment against unknown bookingId
             | USER_NOT_FOUND          | Update/delete of an unknown user id
-------------|-------------------------|------------------------------------------
Permission   | PERMISSION_DENIED       | Role/ownership check failed
             | NOT_AUTHENTICATED       | No user logged in
-------------|-------------------------|------------------------------------------
Validation   | MISSING_FIELD           | Required field blank
             | INVALID_PAYMENT_AMOUNT  | Amount unparsable or <= 0
             | DUPLICATE_USERNAME      | Username already taken
             | EMPTY_SELECTION         | Export with nothing selected
-------------|-------------------------|------------------------------------------
Store        | CORRUPT_RECORD          | Stored value is not the expected shape
-------------|-------------------------|------------------------------------------
Concurrency  | STALE_WRITE             | Key changed since it was read

Reconciliation and history lookups never raise NotFound for an absent
ledger; they degrade to zero/empty results.
"""


class SalesKernelError(Exception):
    """
    Base exception for all sales kernel errors.

    All subclasses must have a ``code`` class attribute.
    """

    code: str = "SALES_KERNEL_ERROR"


# Not-found exceptions


class NotFoundError(SalesKernelError):
    """Base exception for absent entities."""

    code: str = "NOT_FOUND"


class ReportNotFoundError(NotFoundError):
    """Report with given store id does not exist."""

    code: str = "REPORT_NOT_FOUND"

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"Report not found: {report_id}")


class BookingNotFoundError(NotFoundError):
    """No report carries the given booking id."""

    code: str = "BOOKING_NOT_FOUND"

    def __init__(self, booking_id: str):
        self.booking_id = booking_id
        super().__init__(f"Booking not found: {booking_id}")


class UserNotFoundError(NotFoundError):
    """User with given id does not exist."""

    code: str = "USER_NOT_FOUND"

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


# Permission exceptions


class PermissionDeniedError(SalesKernelError):
    """The acting user lacks the capability for this operation."""

    code: str = "PERMISSION_DENIED"

    def __init__(self, action: str, user_id: str | None = None):
        self.action = action
        self.user_id = user_id
        super().__init__(f"Permission denied: {action}")


class NotAuthenticatedError(PermissionDeniedError):
    """No user is logged in."""

    code: str = "NOT_AUTHENTICATED"

    def __init__(self, action: str):
        super().__init__(action)
        self.args = (f"You must be logged in to {action}",)


# Validation exceptions


class ValidationError(SalesKernelError):
    """Base exception for caller-supplied data that fails validation."""

    code: str = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """A required field is blank."""

    code: str = "MISSING_FIELD"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Required field missing: {field}")


class InvalidPaymentAmountError(ValidationError):
    """Payment amount does not parse or is not strictly positive."""

    code: str = "INVALID_PAYMENT_AMOUNT"

    def __init__(self, amount: str, field: str = "installmentPaid"):
        self.amount = amount
        self.field = field
        super().__init__(f"Payment amount must be greater than zero: {amount!r}")


class DuplicateUsernameError(ValidationError):
    """Username is already taken."""

    code: str = "DUPLICATE_USERNAME"

    def __init__(self, username: str):
        self.username = username
        super().__init__(f"Username already exists: {username}")


class EmptySelectionError(ValidationError):
    """Nothing selected for export."""

    code: str = "EMPTY_SELECTION"

    def __init__(self):
        super().__init__("Please select at least one report to export")


# Store exceptions


class StoreError(SalesKernelError):
    """Base exception for key/value store failures."""

    code: str = "STORE_ERROR"


class CorruptRecordError(StoreError):
    """A stored value could not be decoded into the expected shape."""

    code: str = "CORRUPT_RECORD"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Corrupt value under {key!r}: {reason}")


# Concurrency exceptions


class ConcurrencyError(SalesKernelError):
    """Base exception for concurrent-modification failures."""

    code: str = "CONCURRENCY_ERROR"


class StaleWriteError(ConcurrencyError):
    """
    Key was modified by another writer since it was read.

    Raised by compare-and-set writes; the store is left unchanged.
    """

    code: str = "STALE_WRITE"

    def __init__(self, key: str, expected_version: int, actual_version: int):
        self.key = key
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Stale write to {key!r}: expected version {expected_version}, "
            f"found {actual_version}"
        )
