"""
In-memory TTL cache.

Entries expire lazily: a read past ``expires_at`` behaves exactly like a
miss. There is no size bound and no background sweep.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class CacheEntry:
    """A cached value and its absolute expiry (clock seconds)."""

    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLCache:
    """Thread-safe key/value store with per-entry time-to-live.

    Args:
        default_ttl: TTL in seconds used when ``set`` is called without one
        clock: Callable returning the current time in seconds
    """

    def __init__(
        self,
        default_ttl: float = 60.0,
        clock: Callable[[], float] | None = None,
    ):
        self.default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the live value for ``key`` or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        # Counts expired entries that have not been read yet
        with self._lock:
            return len(self._entries)
