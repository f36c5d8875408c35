"""
Module: sales_kernel.models.kv_entry
Responsibility: ORM persistence for the durable key/value store.  One row per
    store key; the value is the JSON text of the whole document (e.g. the full
    report list under ``sales_reports``).
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - version increases by exactly one per successful write; writers compare it
      before updating (see db/kv_store.py).

Failure modes:
    - IntegrityError if two inserts race on the same new key.
"""

from datetime import datetime

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from sales_kernel.db.base import Base


class KvEntry(Base):
    """A stored JSON document and its version."""

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[int] = mapped_column(nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(nullable=False)

    def __repr__(self) -> str:
        return f"<KvEntry {self.key} v{self.version}>"
