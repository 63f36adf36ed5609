"""Locally issued identifiers."""

import time
from typing import Callable

TEMPORARY_PREFIX = "tmp"


class TemporaryIdFactory:
    """Issue unique, increasing, timestamp-derived identifiers.

    IDs look like ``tmp-1729425600123-0000``. The millisecond part never goes
    backwards, and the sequence suffix keeps IDs unique within a millisecond,
    so IDs issued by one factory sort in creation order.
    """

    def __init__(self, clock: Callable[[], int] = time.time_ns):
        self._clock = clock
        self._last_ms = 0
        self._sequence = 0

    def __call__(self, prefix: str = TEMPORARY_PREFIX) -> str:
        now_ms = self._clock() // 1_000_000
        if now_ms > self._last_ms:
            self._last_ms = now_ms
            self._sequence = 0
        else:
            self._sequence += 1
        return f"{prefix}-{self._last_ms:013d}-{self._sequence:04d}"


def is_temporary(entity_id: str) -> bool:
    """Check whether ``entity_id`` is a placeholder awaiting a store ID."""
    return entity_id.startswith(f"{TEMPORARY_PREFIX}-")
