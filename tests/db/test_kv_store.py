"""Tests for the SQLAlchemy-backed store (sales_kernel/db/kv_store.py)."""

import pytest
from sqlalchemy import update

from sales_kernel.db.engine import session_scope
from sales_kernel.domain.store import Versioned
from sales_kernel.exceptions import CorruptRecordError, StaleWriteError
from sales_kernel.models import KvEntry
from sales_kernel.services import AuthService, ReportStore


class TestSqlKeyValueStore:

    def test_absent_key(self, sqlite_store):
        assert sqlite_store.get("missing") == Versioned(None, 0)

    def test_insert_then_update(self, sqlite_store):
        assert sqlite_store.write("k", {"a": 1}) == 1
        assert sqlite_store.write("k", {"a": 2}, expected_version=1) == 2
        assert sqlite_store.get("k") == Versioned({"a": 2}, 2)

    def test_insert_with_nonzero_expected_version_is_stale(self, sqlite_store):
        with pytest.raises(StaleWriteError):
            sqlite_store.write("k", [], expected_version=3)
        assert sqlite_store.get("k").value is None

    def test_stale_update_rejected(self, sqlite_store):
        sqlite_store.write("k", ["v1"])
        sqlite_store.write("k", ["v2"], expected_version=1)
        with pytest.raises(StaleWriteError) as exc_info:
            sqlite_store.write("k", ["lost"], expected_version=1)
        assert exc_info.value.actual_version == 2
        assert sqlite_store.read("k") == ["v2"]

    def test_delete(self, sqlite_store):
        sqlite_store.write("k", 1)
        with pytest.raises(StaleWriteError):
            sqlite_store.delete("k", expected_version=9)
        assert sqlite_store.delete("k", expected_version=1)
        assert not sqlite_store.delete("k")

    def test_corrupt_row(self, sqlite_store):
        sqlite_store.write("k", 1)
        with session_scope() as session:
            session.execute(update(KvEntry).where(KvEntry.key == "k").values(value="{oops"))
        with pytest.raises(CorruptRecordError):
            sqlite_store.get("k")

    def test_write_logged(self, sqlite_store, captured_logs):
        sqlite_store.write("k", 1)
        logs = captured_logs()
        assert any(r["message"] == "kv_written" and r["key"] == "k" for r in logs)


class TestServicesOnSqlStore:
    """The report services run unchanged on the durable store."""

    SEED = [{
        "id": "agent1-uuid", "username": "agent1", "password": "agent123",
        "name": "Remon", "role": "agent", "region": "Egypt",
    }]

    def test_save_reload_and_delete(self, sqlite_store, clock, booking_data):
        auth = AuthService(sqlite_store, seed_users=self.SEED, clock=clock)
        reports = ReportStore(sqlite_store, auth)
        auth.login("agent1", "agent123")

        saved = reports.save_report(booking_data())
        clock.tick()
        reports.save_report(booking_data(bookingId="BK-200"))

        reloaded = ReportStore(sqlite_store, auth).get_saved_reports()
        assert [r.booking_id for r in reloaded] == ["BK-200", "BK-100"]
        assert reports.delete_report(saved.id)
        assert [r.booking_id for r in reports.get_saved_reports()] == ["BK-200"]

    def test_users_seeded_once(self, sqlite_store, clock):
        AuthService(sqlite_store, seed_users=self.SEED, clock=clock).load_users()
        again = AuthService(sqlite_store, seed_users=[], clock=clock).load_users()
        assert [u["username"] for u in again.value] == ["agent1"]
        assert again.version == 1
