"""
ReportStore -- the persisted list of sales and installment reports.

Responsibility:
    Owns the report list under one store key: insert (newest first),
    access-filtered read, unfiltered read, per-user read, delete.

Architecture position:
    Kernel > Services.  The Booking Resolver reads through
    ``get_saved_reports(filter_by_user=False)``; the Installment Writer
    appends through ``save_report``.

Invariants enforced:
    - New reports are prepended, so store order is newest first.
    - ``save_report`` assigns ``id``, ``timestamp`` and ``userId`` and keeps a
      caller-supplied ``agentName`` (else the current user's name).
    - Records are never mutated after insert.
    - Every write is compare-and-set against the version read, so a write
      from another process between read and write raises StaleWriteError.
    - A failed delete leaves the store unchanged.

Failure modes:
    - NotAuthenticatedError: save/delete with nobody logged in.
    - ReportNotFoundError: delete of an unknown id.
    - PermissionDeniedError: delete by a non-owner agent.
    - CorruptRecordError: stored value is not a list of objects.
"""

from __future__ import annotations

import secrets
import string
from typing import Any, Mapping

from sales_kernel.domain.access import Capability, can, visible_reports
from sales_kernel.domain.report import Report, format_timestamp
from sales_kernel.domain.store import KeyValueStore, Versioned
from sales_kernel.domain.values import parse_strict_amount
from sales_kernel.exceptions import (
    CorruptRecordError,
    InvalidPaymentAmountError,
    MissingFieldError,
    PermissionDeniedError,
    ReportNotFoundError,
)
from sales_kernel.logging_config import LogContext, get_logger
from sales_kernel.services.auth_service import AuthService
from sales_kernel.services.base import BaseService

logger = get_logger("services.report_store")

DEFAULT_REPORTS_KEY = "sales_reports"
_ID_ALPHABET = string.digits + string.ascii_lowercase

REQUIRED_REPORT_FIELDS = ("bookingId", "customerName", "service", "sellingRate")


def validate_report_submission(data: Mapping[str, Any]) -> None:
    """
    Presentation-side checks for a new booking report.

    Raises:
        MissingFieldError: a required field is blank.
        InvalidPaymentAmountError: sellingRate is not a positive amount.
    """
    for key in REQUIRED_REPORT_FIELDS:
        if not str(data.get(key) or "").strip():
            raise MissingFieldError(key)
    try:
        rate = parse_strict_amount(data["sellingRate"])
    except ValueError as exc:
        raise InvalidPaymentAmountError(str(data["sellingRate"]), "sellingRate") from exc
    if rate <= 0:
        raise InvalidPaymentAmountError(str(data["sellingRate"]), "sellingRate")


class ReportStore(BaseService):
    """Report persistence with role-based reads and ownership-gated deletes."""

    def __init__(
        self,
        store: KeyValueStore,
        auth: AuthService,
        key: str = DEFAULT_REPORTS_KEY,
        id_prefix: str = "report_",
    ):
        super().__init__(store, auth.clock)
        self.auth = auth
        self.key = key
        self.id_prefix = id_prefix

    def _load(self) -> Versioned:
        current = self.store.get(self.key)
        if current.value is None:
            return Versioned([], current.version)
        records = current.value
        if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
            raise CorruptRecordError(self.key, "expected a list of report objects")
        return current

    def _generate_id(self) -> str:
        suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(7))
        return f"{self.id_prefix}{self.clock.epoch_millis()}_{suffix}"

    def get_saved_reports(self, filter_by_user: bool = True) -> list[Report]:
        """
        Reports in store order (newest first).

        Args:
            filter_by_user: Apply the access filter for the current user.
                Nobody logged in then yields an empty list.
        """
        reports = [Report.from_record(r) for r in self._load().value]
        if not filter_by_user:
            return reports
        return visible_reports(self.auth.get_current_user(), reports)

    def get_user_reports(self, user_id: str) -> list[Report]:
        """Reports created by ``user_id``, unfiltered by access."""
        return [r for r in self.get_saved_reports(filter_by_user=False) if r.user_id == user_id]

    def get_report(self, report_id: str) -> Report:
        """
        Raises:
            ReportNotFoundError: no report with that id.
        """
        for report in self.get_saved_reports(filter_by_user=False):
            if report.id == report_id:
                return report
        raise ReportNotFoundError(report_id)

    def save_report(self, data: Mapping[str, Any] | Report) -> Report:
        """
        Insert a new report at the front of the list.

        Args:
            data: Persisted-layout mapping or a Report. Any ``id``,
                ``timestamp`` or ``userId`` it carries is replaced.

        Returns:
            The stored Report.

        Raises:
            NotAuthenticatedError: nobody is logged in.
            StaleWriteError: the list changed since it was read.
        """
        user = self.auth.require_user("save a report")
        record = data.to_record() if isinstance(data, Report) else dict(data)

        record["id"] = self._generate_id()
        record["timestamp"] = format_timestamp(self.clock.now())
        record["agentName"] = record.get("agentName") or user.name
        record["userId"] = user.id

        current = self._load()
        records = [record, *current.value]
        self.store.write(self.key, records, expected_version=current.version)

        with LogContext.bind(report_id=record["id"], booking_id=record.get("bookingId")):
            logger.info(
                "report_saved",
                extra={
                    "user_id": user.id,
                    "booking_type": record.get("bookingType"),
                    "installment": record.get("installment"),
                },
            )
        return Report.from_record(record)

    def delete_report(self, report_id: str) -> bool:
        """
        Remove a report.

        Raises:
            ReportNotFoundError: no report with that id.
            NotAuthenticatedError: nobody is logged in.
            PermissionDeniedError: caller is neither owner nor supervisor.
            StaleWriteError: the list changed since it was read.
        """
        current = self._load()
        target = next((r for r in current.value if r.get("id") == report_id), None)
        if target is None:
            raise ReportNotFoundError(report_id)

        user = self.auth.require_user("delete a report")
        if not can(user, Capability.DELETE_REPORT, Report.from_record(target)):
            logger.warning(
                "report_delete_denied",
                extra={"user_id": user.id, "report_id": report_id},
            )
            raise PermissionDeniedError("delete this report", user.id)

        remaining = [r for r in current.value if r.get("id") != report_id]
        self.store.write(self.key, remaining, expected_version=current.version)
        logger.info("report_deleted", extra={"user_id": user.id, "report_id": report_id})
        return True
