"""Tests for report persistence (sales_kernel/services/report_store.py)."""

import re
from decimal import Decimal

import pytest

from sales_kernel.domain.report import Report
from sales_kernel.exceptions import (
    CorruptRecordError,
    InvalidPaymentAmountError,
    MissingFieldError,
    NotAuthenticatedError,
    PermissionDeniedError,
    ReportNotFoundError,
    StaleWriteError,
)
from sales_kernel.services import validate_report_submission

ID_PATTERN = re.compile(r"^report_\d+_[0-9a-z]{7}$")


class TestSaveReport:

    def test_assigns_identity_fields(self, report_store, as_agent, booking_data, clock):
        saved = report_store.save_report(booking_data(id="forged", userId="forged"))
        assert ID_PATTERN.match(saved.id)
        assert saved.id != "forged"
        assert saved.user_id == "agent1-uuid"
        assert saved.timestamp == "2024-03-10T09:00:00.000Z"
        assert saved.agent_name == "Remon"

    def test_keeps_supplied_agent_name(self, report_store, as_agent, booking_data):
        saved = report_store.save_report(booking_data(agentName="Walk-in Desk"))
        assert saved.agent_name == "Walk-in Desk"

    def test_newest_first(self, report_store, as_agent, booking_data, clock):
        report_store.save_report(booking_data(bookingId="A"))
        clock.tick()
        report_store.save_report(booking_data(bookingId="B"))
        assert [r.booking_id for r in report_store.get_saved_reports()] == ["B", "A"]

    def test_accepts_report_instance(self, report_store, as_agent):
        saved = report_store.save_report(Report(booking_id="BK-7", selling_rate="10"))
        assert report_store.get_report(saved.id).booking_id == "BK-7"

    def test_requires_login(self, report_store, store, booking_data):
        with pytest.raises(NotAuthenticatedError):
            report_store.save_report(booking_data())
        assert store.get(report_store.key).value is None

    def test_concurrent_writer_detected(self, report_store, store, as_agent, booking_data, monkeypatch):
        """A write landing between our read and our write is not overwritten."""
        original_load = report_store._load

        def load_then_interfere():
            current = original_load()
            store.write(report_store.key, [{"id": "other", "bookingId": "X"}])
            return current

        monkeypatch.setattr(report_store, "_load", load_then_interfere)
        with pytest.raises(StaleWriteError):
            report_store.save_report(booking_data())
        assert store.read(report_store.key) == [{"id": "other", "bookingId": "X"}]

    def test_logs_with_report_context(self, report_store, as_agent, booking_data, captured_logs):
        saved = report_store.save_report(booking_data())
        record = next(r for r in captured_logs() if r["message"] == "report_saved")
        assert record["report_id"] == saved.id
        assert record["booking_id"] == "BK-100"


class TestReadReports:

    def test_agent_sees_own_name_or_region(self, report_store, seed_report, as_agent):
        seed_report(id="mine", agentName="Remon", region="UAE")
        seed_report(id="region", agentName="Someone", region="Egypt")
        seed_report(id="hidden", agentName="Someone", region="UAE")
        assert {r.id for r in report_store.get_saved_reports()} == {"mine", "region"}

    def test_supervisor_sees_all(self, report_store, seed_report, as_supervisor):
        seed_report(id="a", region="UAE", agentName="X")
        seed_report(id="b", region="Egypt")
        assert len(report_store.get_saved_reports()) == 2

    def test_logged_out_sees_nothing_filtered(self, report_store, seed_report):
        seed_report(id="a")
        assert report_store.get_saved_reports() == []
        assert len(report_store.get_saved_reports(filter_by_user=False)) == 1

    def test_user_reports(self, report_store, seed_report):
        seed_report(id="a", userId="agent1-uuid")
        seed_report(id="b", userId="agent2-uuid")
        assert [r.id for r in report_store.get_user_reports("agent2-uuid")] == ["b"]

    def test_get_report_not_found(self, report_store):
        with pytest.raises(ReportNotFoundError):
            report_store.get_report("nope")

    def test_corrupt_list(self, report_store, store):
        store.write(report_store.key, {"oops": True})
        with pytest.raises(CorruptRecordError):
            report_store.get_saved_reports()


class TestDeleteReport:

    def test_owner_deletes(self, report_store, as_agent, booking_data):
        saved = report_store.save_report(booking_data())
        assert report_store.delete_report(saved.id)
        assert report_store.get_saved_reports(filter_by_user=False) == []

    def test_supervisor_deletes_any(self, report_store, seed_report, as_supervisor):
        seed_report(id="a", userId="agent2-uuid")
        assert report_store.delete_report("a")

    def test_other_agent_denied_and_store_unchanged(
        self, report_store, store, seed_report, login, captured_logs
    ):
        seed_report(id="a", userId="agent2-uuid", region="Egypt")
        login("agent1")
        before = store.get(report_store.key)
        with pytest.raises(PermissionDeniedError):
            report_store.delete_report("a")
        assert store.get(report_store.key) == before
        assert any(r["message"] == "report_delete_denied" for r in captured_logs())

    def test_unknown_id(self, report_store, as_supervisor):
        with pytest.raises(ReportNotFoundError):
            report_store.delete_report("ghost")

    def test_logged_out(self, report_store, seed_report):
        seed_report(id="a")
        with pytest.raises(NotAuthenticatedError):
            report_store.delete_report("a")


class TestValidateSubmission:

    def test_valid(self, booking_data):
        validate_report_submission(booking_data())

    @pytest.mark.parametrize("key", ["bookingId", "customerName", "service", "sellingRate"])
    def test_required(self, booking_data, key):
        with pytest.raises(MissingFieldError) as exc_info:
            validate_report_submission(booking_data(**{key: ""}))
        assert exc_info.value.field == key

    @pytest.mark.parametrize("rate", ["0", "-5", "12abc", "1e30", "1" + "0" * 29])
    def test_selling_rate_must_be_positive_number(self, booking_data, rate):
        with pytest.raises(InvalidPaymentAmountError) as exc_info:
            validate_report_submission(booking_data(sellingRate=rate))
        assert exc_info.value.field == "sellingRate"

    def test_largest_accepted_rate_reconciles_and_totals(
        self, report_store, bookings, statistics, as_supervisor, booking_data
    ):
        data = booking_data(sellingRate="999999999999999.99", installment="Yes", installmentPaid="0.99")
        validate_report_submission(data)
        report_store.save_report(data)

        lookup = bookings.lookup_booking("BK-100")
        assert lookup.can_pay
        assert lookup.payments.remaining == Decimal("999999999999999.00")
        assert statistics.dashboard().total_sales == Decimal("999999999999999.99")
