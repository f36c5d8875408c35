"""
BaseService -- abstract base for all kernel services.

Responsibility:
    Common constructor for the write-side services: every service receives
    its KeyValueStore and Clock by injection and never touches ambient
    storage or ``datetime.now()``.

Invariants enforced:
    - Services persist only through ``self.store``.
    - Read-modify-write cycles pass the version they read back as
      ``expected_version`` so a concurrent writer surfaces as
      StaleWriteError instead of being silently overwritten.

Non-goals:
    - Query-only methods belong in ``sales_kernel/selectors/``.
"""

from abc import ABC

from sales_kernel.domain.clock import Clock, SystemClock
from sales_kernel.domain.store import KeyValueStore


class BaseService(ABC):
    """Abstract base class for kernel services."""

    def __init__(self, store: KeyValueStore, clock: Clock | None = None):
        """
        Args:
            store: Persisted state for this service.
            clock: Time source. Defaults to SystemClock.
        """
        self.store = store
        self.clock = clock or SystemClock()
