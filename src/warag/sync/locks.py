"""Per-tenant mutual exclusion for sync runs."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from warag.errors import SyncInProgressError
from warag.sync.models import Source


class TenantLocks:
    """Registry of locks keyed by (phone_number, source).

    Two syncs of the same partition would race on adding and deleting the
    same hashes, so the second one is rejected instead of queued.

    Locks are kept for the life of the process, one per partition ever
    synced, so the registry is bounded by tenants times sources. Dropping
    an idle lock could hand a waiter and a newcomer different locks for the
    same partition.
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[str, Source], threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, phone_number: str, source: Source) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault((phone_number, source), threading.Lock())

    def is_locked(self, phone_number: str, source: Source) -> bool:
        return self._lock_for(phone_number, source).locked()

    @contextmanager
    def hold(self, phone_number: str, source: Source) -> Iterator[None]:
        """Hold the partition lock for the duration of the block.

        Raises:
            SyncInProgressError: If another sync holds the lock
        """
        lock = self._lock_for(phone_number, source)
        if not lock.acquire(blocking=False):
            raise SyncInProgressError(
                f"A {source.value} sync is already running for {phone_number}"
            )
        try:
            yield
        finally:
            lock.release()
