"""Database layer - engine, base class and the durable key/value store."""

from sales_kernel.db.base import Base
from sales_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)
from sales_kernel.db.kv_store import SqlKeyValueStore

__all__ = [
    "Base",
    "SqlKeyValueStore",
    "create_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "session_scope",
]
