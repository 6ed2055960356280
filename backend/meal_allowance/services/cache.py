"""Expiring key-value cache used by the data loader."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable


@runtime_checkable
class Cache(Protocol):
    """Interface of the cache injected into the data loader."""

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""
        ...

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store a value for ``ttl_seconds``."""
        ...

    def invalidate_by_prefix(self, prefix: str) -> int:
        """Drop every key starting with ``prefix``; return how many were dropped."""
        ...

    def clear(self) -> None:
        """Drop everything."""
        ...


class TTLCache:
    """In-process cache with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        self._entries[key] = (self._clock() + ttl_seconds, value)

    def invalidate_by_prefix(self, prefix: str) -> int:
        stale = [key for key in self._entries if key.startswith(prefix)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
