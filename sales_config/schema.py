"""
Configuration schema.

Frozen dataclasses the YAML configuration is parsed into.  Runtime code
receives an ``AppConfig`` from ``sales_config.get_active_config()`` and never
reads YAML itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StorageKeys:
    """Store keys for the persisted documents."""

    reports: str = "sales_reports"
    users: str = "sales_report_all_users"
    session: str = "sales_report_user"


@dataclass(frozen=True)
class DatabaseConfig:
    url: str = "sqlite:///sales_reports.db"
    echo: bool = False


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeedUser:
    """User written to an empty user store on first use."""

    id: str
    username: str
    password: str
    name: str
    role: str
    region: str

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "password": self.password,
            "name": self.name,
            "role": self.role,
            "region": self.region,
        }


# ---------------------------------------------------------------------------
# Reports and export
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReportOptions:
    id_prefix: str = "report_"
    regions: tuple[str, ...] = ()
    payment_methods: tuple[str, ...] = ()
    services: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExportOptions:
    file_prefix: str = "sales-reports-export"
    output_dir: str = "exports"


# ---------------------------------------------------------------------------
# Root
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppConfig:
    """The whole application configuration."""

    config_id: str
    version: int
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage_keys: StorageKeys = field(default_factory=StorageKeys)
    seed_users: tuple[SeedUser, ...] = ()
    reports: ReportOptions = field(default_factory=ReportOptions)
    export: ExportOptions = field(default_factory=ExportOptions)
    log_level: str = "INFO"
    checksum: str = ""
