"""CLI setup: build the store and wire services from the active config."""

from dataclasses import dataclass

from sales_config import AppConfig
from sales_kernel.db.engine import create_tables, get_session_factory, init_engine_from_url
from sales_kernel.db.kv_store import SqlKeyValueStore
from sales_kernel.domain.clock import Clock, SystemClock
from sales_kernel.domain.store import KeyValueStore, MemoryStore
from sales_kernel.selectors import BookingSelector, ReportSelector, StatisticsSelector
from sales_kernel.services import (
    AuthService,
    ExportService,
    InstallmentService,
    ReportStore,
    UserService,
)


@dataclass
class Services:
    """Every service and selector the CLI views use."""

    config: AppConfig
    auth: AuthService
    users: UserService
    reports: ReportStore
    bookings: BookingSelector
    installments: InstallmentService
    report_queries: ReportSelector
    statistics: StatisticsSelector
    exports: ExportService


def open_store(config: AppConfig, clock: Clock) -> KeyValueStore:
    """Durable store from ``config.database`` (tables created if missing)."""
    init_engine_from_url(config.database.url, echo=config.database.echo)
    create_tables()
    return SqlKeyValueStore(get_session_factory(), clock)


def build_services(
    config: AppConfig,
    clock: Clock | None = None,
    store: KeyValueStore | None = None,
    session_store: KeyValueStore | None = None,
) -> Services:
    """Wire services. Without ``store`` the configured database is opened."""
    clock = clock or SystemClock()
    store = store if store is not None else open_store(config, clock)
    keys = config.storage_keys

    auth = AuthService(
        store,
        session_store if session_store is not None else MemoryStore(),
        seed_users=[u.to_record() for u in config.seed_users],
        users_key=keys.users,
        session_key=keys.session,
        clock=clock,
    )
    reports = ReportStore(store, auth, key=keys.reports, id_prefix=config.reports.id_prefix)
    bookings = BookingSelector(reports)
    return Services(
        config=config,
        auth=auth,
        users=UserService(auth),
        reports=reports,
        bookings=bookings,
        installments=InstallmentService(reports, bookings),
        report_queries=ReportSelector(reports),
        statistics=StatisticsSelector(reports),
        exports=ExportService(reports, file_prefix=config.export.file_prefix),
    )
