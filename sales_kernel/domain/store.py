"""
Store -- injected key/value persistence.

Responsibility:
    The interface every service uses for persisted state: JSON documents
    under string keys, each key carrying a version counter.  Services never
    reach into ambient global storage; they receive a KeyValueStore.

    ``MemoryStore`` lives here (no I/O, used for session-scoped state and in
    tests).  The durable SQLAlchemy implementation is
    ``sales_kernel.db.kv_store.SqlKeyValueStore``.

Invariants enforced:
    - Values are serialized to JSON text on write and decoded on read, so a
      caller never shares mutable state with the store.
    - Versions start at 0 for an absent key and increase by one per write.
    - A write or delete with ``expected_version`` succeeds only if the key's
      current version equals it (compare-and-set); otherwise
      ``StaleWriteError`` and nothing changes.

Failure modes:
    - ``CorruptRecordError`` when stored text is not valid JSON.
    - ``StaleWriteError`` on a version mismatch.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from sales_kernel.exceptions import CorruptRecordError, StaleWriteError


@dataclass(frozen=True)
class Versioned:
    """A decoded value and the version it was read at."""

    value: Any
    version: int


def encode_value(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), default=str)


def decode_value(key: str, text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorruptRecordError(key, f"invalid JSON: {exc.msg}") from exc


class KeyValueStore(ABC):
    """
    Abstract key/value store.

    Subclasses implement the three primitives; ``read`` is derived.
    """

    @abstractmethod
    def get(self, key: str) -> Versioned:
        """Value and version for ``key``; ``Versioned(None, 0)`` if absent."""
        ...

    @abstractmethod
    def write(self, key: str, value: Any, expected_version: int | None = None) -> int:
        """
        Store ``value`` under ``key`` and return the new version.

        Raises:
            StaleWriteError: expected_version given and not current.
        """
        ...

    @abstractmethod
    def delete(self, key: str, expected_version: int | None = None) -> bool:
        """
        Remove ``key``. Returns False if it was absent.

        Raises:
            StaleWriteError: expected_version given and not current.
        """
        ...

    def read(self, key: str, default: Any = None) -> Any:
        value = self.get(key).value
        return default if value is None else value


class MemoryStore(KeyValueStore):
    """Process-local store. Contents die with the instance."""

    def __init__(self):
        self._data: dict[str, tuple[str, int]] = {}

    def get(self, key: str) -> Versioned:
        entry = self._data.get(key)
        if entry is None:
            return Versioned(None, 0)
        text, version = entry
        return Versioned(decode_value(key, text), version)

    def write(self, key: str, value: Any, expected_version: int | None = None) -> int:
        current = self._version(key)
        if expected_version is not None and expected_version != current:
            raise StaleWriteError(key, expected_version, current)
        new_version = current + 1
        self._data[key] = (encode_value(value), new_version)
        return new_version

    def delete(self, key: str, expected_version: int | None = None) -> bool:
        current = self._version(key)
        if expected_version is not None and expected_version != current:
            raise StaleWriteError(key, expected_version, current)
        return self._data.pop(key, None) is not None

    def put_raw(self, key: str, text: str) -> None:
        """Store undecoded text. For tests that need a corrupt value."""
        self._data[key] = (text, self._version(key) + 1)

    def _version(self, key: str) -> int:
        entry = self._data.get(key)
        return entry[1] if entry else 0
