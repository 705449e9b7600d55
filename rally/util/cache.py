"""Time-boxed in-process memoization.

Entries expire by age only; writes elsewhere never invalidate them.
"""

import time
from typing import Callable, Generic, Hashable, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """Small dict-backed cache whose entries expire after ``ttl_seconds``.

    Args:
        ttl_seconds: Lifetime of each entry
        max_entries: Oldest entries are evicted once this size is exceeded
        clock: Monotonic clock, injectable for tests
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[Hashable, tuple[float, V]] = {}

    def get(self, key: Hashable) -> tuple[bool, V | None]:
        """Look up a key.

        Returns:
            ``(hit, value)``; expired entries count as misses and are dropped
        """
        entry = self._entries.get(key)
        if entry is None:
            return False, None

        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return False, None
        return True, value

    def set(self, key: Hashable, value: V) -> V:
        """Store a value and return it."""
        self._entries.pop(key, None)
        self._entries[key] = (self._clock(), value)

        # dicts keep insertion order, so the first key is the oldest
        while len(self._entries) > self.max_entries:
            del self._entries[next(iter(self._entries))]
        return value

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
