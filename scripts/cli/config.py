"""CLI configuration: project root, log path, active app config."""

from pathlib import Path

from sales_config import get_active_config

# Project root (parent of scripts/)
ROOT = Path(__file__).resolve().parent.parent.parent

LOG_DIR = ROOT / "logs"
LOG_PATH = LOG_DIR / "interactive.log"


def load_config(path: str | None = None):
    """Active AppConfig (explicit path, else SALES_REPORT_CONFIG, else bundled defaults)."""
    return get_active_config(path)
