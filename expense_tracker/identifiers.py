"""
Entry identifiers.

Ids are millisecond timestamps, bumped by one whenever two entries would
otherwise share a tick, so they stay unique and strictly increasing for
the life of the process.
"""

import time
from typing import Callable, Iterable


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


class MonotonicIdFactory:
    """Hands out strictly increasing integer ids derived from the clock."""

    def __init__(self, clock: Callable[[], int] = _now_millis):
        """
        Args:
            clock: Returns the current time in milliseconds.
        """
        self._clock = clock
        self._last = 0

    @property
    def last_issued(self) -> int:
        return self._last

    def observe(self, ids: Iterable[int]) -> None:
        """Make sure future ids are larger than any already in use."""
        self._last = max([self._last, *ids])

    def __call__(self) -> int:
        candidate = self._clock()
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate
