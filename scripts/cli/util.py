"""CLI utilities: prompting, formatting, logging mute/restore."""

import logging
from datetime import date
from decimal import Decimal

from sales_kernel.domain.report import parse_timestamp
from sales_kernel.domain.values import format_amount, parse_amount


def ask(label: str, default: str = "") -> str:
    """Prompt for one value; empty input returns ``default``."""
    suffix = f" [{default}]" if default else ""
    value = input(f"  {label}{suffix}: ").strip()
    return value or default


def ask_choice(label: str, options: list[str] | tuple[str, ...], default: str = "") -> str:
    """Prompt with a numbered list; accepts the number or free text."""
    if options:
        print(f"  {label}:")
        for i, option in enumerate(options, 1):
            print(f"    {i}. {option}")
    raw = ask(label if not options else "Choice", default)
    if raw.isdigit() and 1 <= int(raw) <= len(options):
        return options[int(raw) - 1]
    return raw


def ask_date(label: str) -> date | None:
    """Prompt for YYYY-MM-DD; blank or malformed input is None."""
    raw = ask(f"{label} (YYYY-MM-DD)")
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError:
        print(f"  Ignoring invalid date: {raw}")
        return None


def ask_amount(label: str) -> Decimal | None:
    raw = ask(label)
    return parse_amount(raw) if raw else None


def confirm(label: str) -> bool:
    return ask(f"{label} [y/N]").lower() in ("y", "yes")


def fmt_amount(v, currency: str = "") -> str:
    """Format amount for display (e.g. USD 1,234.50)."""
    text = f"{Decimal(format_amount(parse_amount(v))):,.2f}"
    return f"{currency} {text}".strip()


def fmt_timestamp(iso: str) -> str:
    parsed = parse_timestamp(iso)
    return parsed.strftime("%Y-%m-%d %H:%M") if parsed else "-"


def enable_quiet_logging():
    """Mute console handlers so CLI output stays clean. Returns list to pass to restore_logging."""
    sk_logger = logging.getLogger("sales_kernel")
    muted = []
    for h in sk_logger.handlers:
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler):
            muted.append((h, h.level))
            h.setLevel(logging.CRITICAL + 1)
    return muted


def restore_logging(muted):
    """Restore muted handlers after a quiet-logging section."""
    for h, orig_level in muted:
        h.setLevel(orig_level)
