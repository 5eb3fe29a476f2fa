"""Per-key mutual exclusion for check-then-act sequences.

Operations touching the same location, lot or order must be serialized;
operations on different keys proceed concurrently.  Locks are re-entrant
so an application handler holding an order lock can call into the ledger,
and several keys are always acquired in one global order to rule out
deadlocks.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Hashable, Iterator


class KeyedLocks:

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[Hashable, threading.RLock] = {}

    @contextmanager
    def hold(self, *keys: Hashable) -> Iterator[None]:
        acquired: list[threading.RLock] = []
        try:
            for key in sorted(set(keys), key=repr):
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def _lock_for(self, key: Hashable) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            return lock


# Shared by every ledger and handler in the process unless one is injected.
DEFAULT_LOCKS = KeyedLocks()


def location_key(location_id: str) -> tuple:
    return ("location", location_id)


def lot_key(lot_id: int) -> tuple:
    return ("lot", lot_id)


def lot_number_key(product_id: str, lot_no: str) -> tuple:
    return ("lot-no", product_id, lot_no)


def order_key(order_id: int) -> tuple:
    return ("order", order_id)
