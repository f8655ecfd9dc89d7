"""In-memory key/value cache with optional expiry."""

import time
from typing import Any, Callable, Hashable, Optional


def is_fresh(captured_at: float, now: float, ttl: Optional[float]) -> bool:
    """An entry is fresh while less than ``ttl`` seconds old (forever if ttl is None)."""
    return ttl is None or now - captured_at < ttl


class ExpiringCache:
    """
    Mapping from key to (value, insertion time).

    Reads of expired entries evict them and report a miss. The clock is
    injectable so expiry can be tested without sleeping.
    """

    def __init__(self, ttl: Optional[float] = None, clock: Callable[[], float] = time.time):
        """
        Initialize cache.

        Args:
            ttl: Lifetime of an entry in seconds; None keeps entries for the
                lifetime of the cache object
            clock: Function returning the current time in seconds
        """
        self.ttl = ttl
        self.clock = clock
        self._entries: dict[Hashable, tuple[Any, float]] = {}

    def get(self, key: Hashable) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, inserted_at = entry
        if not is_fresh(inserted_at, self.clock(), self.ttl):
            self.evict(key)
            return None
        return value

    def put(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (value, self.clock())

    def evict(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)
