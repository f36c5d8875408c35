"""ORM models for the sales kernel."""

from sales_kernel.models.kv_entry import KvEntry

__all__ = ["KvEntry"]
