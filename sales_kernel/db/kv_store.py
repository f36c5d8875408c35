"""
Module: sales_kernel.db.kv_store
Responsibility: Durable KeyValueStore backed by the ``kv_store`` table.
Architecture position: Kernel > DB.  Implements domain/store.KeyValueStore.

Invariants enforced:
    - Each call runs in its own transaction (commit on success, rollback on
      error); the store is the transaction owner here because the callers
      are single-shot UI actions, not multi-step pipelines.
    - Compare-and-set is done in SQL (``UPDATE ... WHERE version = :expected``)
      so two processes sharing the database file cannot both win.

Failure modes:
    - StaleWriteError on version mismatch, including a lost insert race.
    - CorruptRecordError when a row's value is not valid JSON.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from sales_kernel.domain.clock import Clock, SystemClock
from sales_kernel.domain.store import KeyValueStore, Versioned, decode_value, encode_value
from sales_kernel.exceptions import StaleWriteError
from sales_kernel.logging_config import get_logger
from sales_kernel.models.kv_entry import KvEntry

logger = get_logger("db.kv_store")


class SqlKeyValueStore(KeyValueStore):
    """KeyValueStore persisted through SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker[Session], clock: Clock | None = None):
        self._session_factory = session_factory
        self._clock = clock or SystemClock()

    def get(self, key: str) -> Versioned:
        with self._session_factory() as session:
            entry = session.get(KvEntry, key)
            if entry is None:
                return Versioned(None, 0)
            return Versioned(decode_value(key, entry.value), entry.version)

    def write(self, key: str, value: Any, expected_version: int | None = None) -> int:
        text = encode_value(value)
        now = self._clock.now()
        with self._session_factory() as session:
            try:
                current = session.execute(
                    select(KvEntry.version).where(KvEntry.key == key)
                ).scalar_one_or_none()

                if current is None:
                    if expected_version not in (None, 0):
                        raise StaleWriteError(key, expected_version, 0)
                    session.add(KvEntry(key=key, value=text, version=1, updated_at=now))
                    session.commit()
                    new_version = 1
                else:
                    guard = current if expected_version is None else expected_version
                    result = session.execute(
                        update(KvEntry)
                        .where(KvEntry.key == key, KvEntry.version == guard)
                        .values(value=text, version=guard + 1, updated_at=now)
                    )
                    if result.rowcount != 1:
                        session.rollback()
                        actual = self.get(key).version
                        raise StaleWriteError(key, guard, actual)
                    session.commit()
                    new_version = guard + 1
            except IntegrityError as exc:
                session.rollback()
                raise StaleWriteError(key, expected_version or 0, self.get(key).version) from exc

        logger.debug("kv_written", extra={"key": key, "version": new_version})
        return new_version

    def delete(self, key: str, expected_version: int | None = None) -> bool:
        with self._session_factory() as session:
            stmt = delete(KvEntry).where(KvEntry.key == key)
            if expected_version is not None:
                current = session.execute(
                    select(KvEntry.version).where(KvEntry.key == key)
                ).scalar_one_or_none() or 0
                if current != expected_version:
                    raise StaleWriteError(key, expected_version, current)
                stmt = stmt.where(KvEntry.version == expected_version)
            result = session.execute(stmt)
            session.commit()
        deleted = result.rowcount > 0
        logger.debug("kv_deleted", extra={"key": key, "deleted": deleted})
        return deleted
