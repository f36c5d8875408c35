"""
Pytest fixtures for the sales kernel test suite.

Provides:
- Structured logging capture
- A deterministic clock and an in-memory store for every test
- Wired services (auth, reports, installments, selectors, export)
- Login helpers for the seeded agent and supervisor accounts
- A SQLite in-memory engine for the durable store tests
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from sales_kernel.db.engine import (
    create_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from sales_kernel.db.kv_store import SqlKeyValueStore
from sales_kernel.domain.clock import DeterministicClock
from sales_kernel.domain.store import MemoryStore
from sales_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from sales_kernel.selectors import BookingSelector, ReportSelector, StatisticsSelector
from sales_kernel.services import (
    AuthService,
    ExportService,
    InstallmentService,
    ReportStore,
    UserService,
)

SEED_USERS = [
    {
        "id": "admin-uuid",
        "username": "Remon",
        "password": "admin123",
        "name": "Admin User",
        "role": "supervisor",
        "region": "All",
    },
    {
        "id": "agent1-uuid",
        "username": "agent1",
        "password": "agent123",
        "name": "Remon",
        "role": "agent",
        "region": "Egypt",
    },
    {
        "id": "agent2-uuid",
        "username": "agent2",
        "password": "agent123",
        "name": "Sarah Johnson",
        "role": "agent",
        "region": "UAE",
    },
]

T0 = datetime(2024, 3, 10, 9, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture sales_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, report_store):
            report_store.save_report(...)
            logs = captured_logs()
            assert any(r["message"] == "report_saved" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("sales_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Core fixtures
# =============================================================================


@pytest.fixture
def clock():
    return DeterministicClock(T0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def auth(store, clock):
    return AuthService(store, MemoryStore(), seed_users=SEED_USERS, clock=clock)


@pytest.fixture
def report_store(store, auth):
    return ReportStore(store, auth)


@pytest.fixture
def bookings(report_store):
    return BookingSelector(report_store)


@pytest.fixture
def installments(report_store, bookings):
    return InstallmentService(report_store, bookings)


@pytest.fixture
def report_queries(report_store):
    return ReportSelector(report_store)


@pytest.fixture
def statistics(report_store):
    return StatisticsSelector(report_store)


@pytest.fixture
def exports(report_store):
    return ExportService(report_store)


@pytest.fixture
def users(auth):
    return UserService(auth)


# =============================================================================
# Login helpers
# =============================================================================


@pytest.fixture
def as_supervisor(auth):
    """Log in the seeded supervisor; returns the User."""
    return auth.login("Remon", "admin123")


@pytest.fixture
def as_agent(auth):
    """Log in the Egypt agent; returns the User."""
    return auth.login("agent1", "agent123")


@pytest.fixture
def login(auth):
    """Switch the current user by username (all seeds share per-role passwords)."""

    def _login(username: str):
        auth.logout()
        password = next(u["password"] for u in SEED_USERS if u["username"] == username)
        return auth.login(username, password)

    return _login


# =============================================================================
# Report data
# =============================================================================


@pytest.fixture
def booking_data():
    """Factory for a new-booking submission in the persisted layout."""

    def _make(**overrides):
        data = {
            "region": "Egypt",
            "bookingType": "New Booking",
            "date": "2024-03-10",
            "customerName": "Layla Hassan",
            "customerNationality": "Egyptian",
            "customerMobile": "+20 100 000 0000",
            "source": "Walk-in",
            "bookingId": "BK-100",
            "service": "Hotel",
            "provider": "Hilton",
            "destination": "Cairo",
            "checkIn": "2024-04-01",
            "paxNumber": "2",
            "currency": "USD",
            "netRate": "800",
            "sellingRate": "1000",
            "installment": "No",
            "paymentMethod": "Cash",
            "remarks": "",
        }
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def seed_report(store, clock):
    """
    Write a report record straight into the store (no auth, no id generation).

    Records are prepended like ReportStore does, so the last seeded record
    is first in store order.
    """

    def _seed(**fields):
        current = store.get("sales_reports")
        records = list(current.value or [])
        record = {
            "id": fields.pop("id", f"report_{len(records) + 1}"),
            "timestamp": fields.pop("timestamp", "2024-03-10T09:00:00.000Z"),
            "agentName": "Remon",
            "region": "Egypt",
            "userId": "agent1-uuid",
            "installment": "No",
            **fields,
        }
        store.write("sales_reports", [record, *records], expected_version=current.version)
        return record

    return _seed


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def sqlite_store(clock):
    """SqlKeyValueStore over a fresh in-memory SQLite database."""
    init_engine_from_url("sqlite:///:memory:")
    create_tables()
    yield SqlKeyValueStore(get_session_factory(), clock)
    reset_engine()
