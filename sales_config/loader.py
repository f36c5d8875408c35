"""
Configuration Loader (``sales_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the frozen dataclasses
of ``sales_config.schema``.  Runtime code goes through
``sales_config.get_active_config()`` instead of calling this directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Unknown role or bad value types  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from sales_config.schema import (
    AppConfig,
    DatabaseConfig,
    ExportOptions,
    ReportOptions,
    SeedUser,
    StorageKeys,
)

_VALID_ROLES = frozenset({"agent", "supervisor"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_storage_keys(data: dict[str, Any]) -> StorageKeys:
    defaults = StorageKeys()
    return StorageKeys(
        reports=data.get("reports", defaults.reports),
        users=data.get("users", defaults.users),
        session=data.get("session", defaults.session),
    )


def parse_database(data: dict[str, Any]) -> DatabaseConfig:
    return DatabaseConfig(
        url=data.get("url", DatabaseConfig.url),
        echo=bool(data.get("echo", False)),
    )


def parse_seed_user(data: dict[str, Any]) -> SeedUser:
    """
    Parse a ``SeedUser`` from a dict.

    Raises:
        KeyError: a required key is missing.
        ValueError: the role is not agent or supervisor.
    """
    role = data["role"]
    if role not in _VALID_ROLES:
        raise ValueError(f"Unknown role {role!r} for seed user {data.get('username')!r}")
    return SeedUser(
        id=str(data["id"]),
        username=data["username"],
        password=str(data["password"]),
        name=data["name"],
        role=role,
        region=data.get("region", "All" if role == "supervisor" else ""),
    )


def parse_report_options(data: dict[str, Any]) -> ReportOptions:
    return ReportOptions(
        id_prefix=data.get("id_prefix", ReportOptions.id_prefix),
        regions=tuple(data.get("regions", ())),
        payment_methods=tuple(data.get("payment_methods", ())),
        services=tuple(data.get("services", ())),
    )


def parse_export_options(data: dict[str, Any]) -> ExportOptions:
    return ExportOptions(
        file_prefix=data.get("file_prefix", ExportOptions.file_prefix),
        output_dir=data.get("output_dir", ExportOptions.output_dir),
    )


def parse_config(data: dict[str, Any]) -> AppConfig:
    """
    Parse an ``AppConfig`` from the top-level YAML dict.

    Raises:
        KeyError: ``config_id`` or ``version`` missing.
    """
    return AppConfig(
        config_id=data["config_id"],
        version=int(data["version"]),
        database=parse_database(data.get("database") or {}),
        storage_keys=parse_storage_keys(data.get("storage_keys") or {}),
        seed_users=tuple(parse_seed_user(u) for u in data.get("seed_users") or ()),
        reports=parse_report_options(data.get("reports") or {}),
        export=parse_export_options(data.get("export") or {}),
        log_level=str(data.get("log_level", "INFO")).upper(),
        checksum=compute_checksum(data),
    )


def load_config(path: Path) -> AppConfig:
    return parse_config(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON serialization (config identity)."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
