"""
sales_config -- single public entrypoint for application configuration.

Responsibility:
    ``get_active_config()`` is the only way runtime code obtains
    configuration.  It resolves the YAML file (explicit path, then the
    ``SALES_REPORT_CONFIG`` environment variable, then the bundled
    ``defaults.yaml``), parses it, and emits a ``SALES_CONFIG_TRACE`` log
    entry identifying the config by id, version and checksum.

Failure modes:
    - ``FileNotFoundError`` -- the resolved path does not exist.
    - ``KeyError`` / ``ValueError`` -- the file does not parse into AppConfig.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sales_config.loader import load_config
from sales_config.schema import AppConfig

_logger = logging.getLogger("sales_kernel.config")

CONFIG_ENV_VAR = "SALES_REPORT_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> AppConfig:
    """The ONLY public configuration entrypoint.

    Args:
        path: Explicit YAML path. Overrides the environment variable.

    Returns:
        AppConfig parsed from the resolved file.
    """
    resolved = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    config = load_config(resolved)

    _logger.info(
        "SALES_CONFIG_TRACE",
        extra={
            "trace_type": "SALES_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(resolved),
            "seed_user_count": len(config.seed_users),
        },
    )
    return config


__all__ = ["AppConfig", "CONFIG_ENV_VAR", "DEFAULT_CONFIG_PATH", "get_active_config"]
