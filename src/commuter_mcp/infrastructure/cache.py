from __future__ import annotations

import time
from typing import Any


class TTLCache:
    """In-process TTL cache with an optional entry bound.

    Not thread-safe; meant for a single asyncio event loop. When max_entries
    is reached the oldest inserted entry is evicted first.
    """

    def __init__(self, default_ttl: int = 90, max_entries: int | None = None) -> None:
        """max_entries=None means unbounded; otherwise it must be at least 1."""
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._store: dict[str, tuple[Any, float]] = {}
        # Value tuple: (data, expires_at_monotonic); dict order is insertion order

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> Any | None:
        """Return cached value or None if missing or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None
        data, expires_at = entry
        if time.monotonic() > expires_at:
            del self._store[key]
            return None
        return data

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store value with given TTL (seconds). Uses default_ttl when ttl is None."""
        effective_ttl = ttl if ttl is not None else self._default_ttl
        self._store.pop(key, None)
        if self._max_entries is not None and len(self._store) >= self._max_entries:
            self._evict_expired()
            while len(self._store) >= self._max_entries:
                del self._store[next(iter(self._store))]
        self._store[key] = (value, time.monotonic() + effective_ttl)

    def invalidate(self, key: str) -> None:
        """Remove a specific key immediately."""
        self._store.pop(key, None)

    def clear(self) -> None:
        """Remove all cached entries."""
        self._store.clear()

    def _evict_expired(self) -> None:
        """Remove all expired entries from the store."""
        now = time.monotonic()
        expired_keys = [k for k, (_, exp) in self._store.items() if now > exp]
        for k in expired_keys:
            del self._store[k]
