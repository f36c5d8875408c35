"""
Structured logging for the sales kernel.

Every record under the ``sales_kernel`` logger becomes one JSON line.  The
line carries the message, any ``extra`` fields, and whichever of the
operation fields (acting user, booking, report) are set in the current
context.  Kernel exceptions contribute their ``code`` and attributes.
"""

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterator

_ROOT = "sales_kernel"

_FIELDS: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"sales_log_{name}", default=None)
    for name in ("correlation_id", "actor_id", "booking_id", "report_id")
}


class LogContext:
    """Operation fields stamped onto every log line in the current context."""

    @staticmethod
    def set(**fields: str | None) -> None:
        """Set the given fields; None values are skipped."""
        for name, value in fields.items():
            if value is not None:
                _FIELDS[name].set(value)

    @staticmethod
    def get_all() -> dict[str, str]:
        return {name: var.get() for name, var in _FIELDS.items() if var.get() is not None}

    @staticmethod
    def clear(*names: str) -> None:
        """Unset the named fields, or every field when none are named."""
        for name in names or tuple(_FIELDS):
            _FIELDS[name].set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: str | None) -> Iterator[None]:
        """Set fields for the duration of a block, then restore the old values."""
        tokens = [(_FIELDS[name], _FIELDS[name].set(value)) for name, value in fields.items() if value is not None]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "taskName"}


class _JSONEncoder(json.JSONEncoder):
    def default(self, obj: Any) -> Any:
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            exc = record.exc_info[1]
            payload["exc_type"] = type(exc).__name__
            payload["exc_message"] = str(exc)
            if hasattr(exc, "code"):
                payload["exc_code"] = exc.code
            payload.update(
                (f"exc_{k}", v) for k, v in vars(exc).items() if not k.startswith("_") and k != "code"
            )
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, cls=_JSONEncoder)


def get_logger(name: str) -> logging.Logger:
    """Logger named ``sales_kernel.<name>``."""
    return logging.getLogger(f"{_ROOT}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Attach a JSON handler to the ``sales_kernel`` logger.  Later calls are no-ops."""
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    root = logging.getLogger(_ROOT)
    root.setLevel(level)
    root.propagate = False
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())
    root.addHandler(handler)


def reset_logging() -> None:
    """Undo configure_logging (tests only)."""
    global _configured
    with _lock:
        _configured = False
    root = logging.getLogger(_ROOT)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    root.propagate = True
