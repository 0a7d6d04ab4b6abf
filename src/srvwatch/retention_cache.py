from __future__ import annotations

import threading
import time
from typing import Callable, Generic, Optional, Tuple, TypeVar

from cachetools import TTLCache

""" Per-name cache of last good results, expiring a fixed time after each write. """

V = TypeVar("V")


class RetentionCache(Generic[V]):
    """
    Thread-safe retention cache keyed by name.

    Inputs:
        retention_seconds: Positive lifetime of an entry, measured from its write.
        max_entries: Upper bound on retained names (least recently used evicted).
        now: Optional monotonic clock returning seconds; defaults to time.monotonic.
    Outputs:
        RetentionCache instance

    Notes:
        Backed by cachetools.TTLCache; every operation is synchronized with an
        RLock because TTLCache itself is not thread-safe. An entry is usable
        while its age is strictly below retention_seconds. Reads never extend
        an entry's lifetime.

    Example use:
        >>> cache = RetentionCache(60)
        >>> cache.put("_http._tcp.example.com", ["a"])
        >>> cache.get("_http._tcp.example.com")
        ['a']
    """

    def __init__(
        self,
        retention_seconds: float,
        *,
        max_entries: int = 4096,
        now: Optional[Callable[[], float]] = None,
    ) -> None:
        if retention_seconds <= 0:
            raise ValueError(
                f"retention duration must be positive, got {retention_seconds}"
            )
        self.retention_seconds = float(retention_seconds)
        self._now: Callable[[], float] = now or time.monotonic
        self._store: TTLCache = TTLCache(
            maxsize=max(1, int(max_entries)),
            ttl=self.retention_seconds,
            timer=self._now,
        )
        self._lock = threading.RLock()

    def get(self, key: str) -> V | None:
        """
        Returns the retained value for key, or None if absent or expired.

        Inputs:
            key: Name the value was stored under.
        Outputs:
            The value, or None.
        """
        value, _ = self.get_with_age(key)
        return value

    def get_with_age(self, key: str) -> Tuple[V | None, Optional[float]]:
        """Brief: Return the retained value and its age in seconds.

        Inputs:
            key: Name the value was stored under.

        Outputs:
            (value_or_None, age_seconds_or_None)
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None, None
            written_at, value = entry
            return value, max(0.0, self._now() - written_at)

    def put(self, key: str, value: V) -> None:
        """
        Stores value under key, replacing any prior entry and restarting its lifetime.

        Inputs:
            key: Name to store under.
            value: Value to retain.
        Outputs:
            None
        """
        with self._lock:
            self._store[key] = (self._now(), value)

    def purge_expired(self) -> int:
        """Remove all expired entries.

        Inputs:
            None
        Outputs:
            Number of entries removed.
        """
        with self._lock:
            return len(self._store.expire())

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
