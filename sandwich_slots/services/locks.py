"""
In-process keyed locks.

Row locks (SELECT ... FOR UPDATE) serialize writers on PostgreSQL. SQLite
ignores FOR UPDATE, so the services also hold one of these locks for the
duration of the transaction. Together they give every engine the same
single-writer behaviour inside one application process.

Usage:
    with order_locks.hold(order_id):
        ...

A key's lock exists only while some thread holds it or waits for it, so the
registry never grows with the number of orders or days ever touched.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator, List


class KeyedLocks:
    """A ``threading.Lock`` per key, dropped once nobody holds or awaits it."""

    def __init__(self):
        # key -> [lock, number of threads holding or waiting]
        self._entries: Dict[Hashable, List] = {}
        self._guard = threading.Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = [threading.Lock(), 0]
                self._entries[key] = entry
            entry[1] += 1

        lock = entry[0]
        try:
            with lock:
                yield
        finally:
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entries[key]


# Admission serializes on the working day: capacity and daily numbers
working_day_locks = KeyedLocks()

# Status changes, customer edits and the sweep serialize on the order
order_locks = KeyedLocks()
