"""Per-key mutual exclusion for check-then-act operations.

The date-conflict check and the board-occupied check are each followed by a
write. Two callers racing on the same date (or board) could both pass the
check before either writes, so every such operation holds the lock for its
conflict key across check and write.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Generator


class KeyedLock:
    """Lazily created ``threading.Lock`` per string key.

    Usage::

        locks = KeyedLock()
        with locks.hold("date:2026-03-14"):
            ...  # check, then write

    ``hold`` takes several keys at once (e.g. old and new date of a
    rescheduled session). Keys are acquired in sorted order so that two
    callers needing overlapping keys cannot deadlock.
    """

    def __init__(self) -> None:
        self._registry_lock = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, key: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    @contextmanager
    def hold(self, *keys: str) -> Generator[None, None, None]:
        ordered = sorted(set(keys))
        acquired: list[threading.Lock] = []
        try:
            for key in ordered:
                lock = self._lock_for(key)
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def __len__(self) -> int:
        return len(self._locks)


def date_key(day) -> str:
    return f"date:{day.isoformat()}"


def board_key(board_id: str) -> str:
    return f"board:{board_id}"


def pair_key(evaluator_id: str, presenter_id: str) -> str:
    return f"evaluation:{evaluator_id}:{presenter_id}"


def participant_key(participant_id: str) -> str:
    return f"participant:{participant_id}"


def evaluation_key(evaluation_id: str) -> str:
    return f"evaluation-id:{evaluation_id}"
