"""
In-process locks keyed by (employee, day).

Entries live only while someone holds or waits on them, so the registry
stays as small as the set of days currently being written.
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterator, Tuple

_Key = Tuple[int, date]


class _KeyedLock:
    __slots__ = ("lock", "holders")

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.holders = 0


_registry_lock = threading.Lock()
_locks: Dict[_Key, _KeyedLock] = {}


def _checkout(key: _Key) -> _KeyedLock:
    with _registry_lock:
        entry = _locks.get(key)
        if entry is None:
            entry = _KeyedLock()
            _locks[key] = entry
        entry.holders += 1
        return entry


def _release(key: _Key, entry: _KeyedLock) -> None:
    with _registry_lock:
        entry.holders -= 1
        if entry.holders == 0:
            del _locks[key]


@contextmanager
def employee_day_lock(employee_id: int, work_date: date) -> Iterator[None]:
    """
    Serialize writers of one employee's ledger row for one day.

    Re-entrant, so a service already holding the lock can call another that
    takes it too. Hold it across the commit, not just the read-modify-write.
    """
    key = (int(employee_id), work_date)
    entry = _checkout(key)
    try:
        with entry.lock:
            yield
    finally:
        _release(key, entry)
