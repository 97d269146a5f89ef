"""
Process-local keyed locking for ShiftGuard.

KeyedLock hands out one mutex per key (an employee id) so that threads in the
same process never interleave two read-check-write sequences for the same key,
while work on different keys proceeds in parallel.

Entries are reference counted and dropped once no thread holds or waits on
them, so the registry does not grow with the number of employees ever seen.

Cross-process serialization is the database's job (SELECT FOR UPDATE in the
scheduling store); this lock covers backends where row locks are a no-op.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Hashable, Iterator, Optional

logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class KeyedLock:
    """A registry of mutexes keyed by arbitrary hashable values."""

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: dict[Hashable, _Entry] = {}

    @contextmanager
    def hold(self, key: Optional[Hashable]) -> Iterator[None]:
        """
        Hold the mutex for `key` for the duration of the block.

        A key of None (an unassigned shift) needs no exclusion and yields
        immediately.
        """
        if key is None:
            yield
            return

        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _Entry()
            entry.users += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def __len__(self) -> int:
        """Return the number of keys currently held or waited on."""
        with self._guard:
            return len(self._entries)


# Shared by every ShiftService in the process
employee_locks = KeyedLock()
