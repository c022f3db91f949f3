"""Protocol for key-value cache backends (async)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from .models import CacheEntry, DeleteResult, MultiGetResult, MultiSetResult, SweepReport


class Cache(Protocol):
    """
    Protocol for key-value cache backends.

    All implementations must support:
    - Miss semantics for absent, expired and corrupt entries (never an error)
    - Per-key failure reporting on batch operations
    - Read-only enforcement on mutating operations
    """

    async def lookup(self, key: str) -> CacheEntry | None:
        """
        Fetch the live entry for key.

        Returns:
            Entry, or None on miss
        """
        ...

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value for key, or `default` on miss."""
        ...

    async def mget(self, keys: Iterable[str]) -> MultiGetResult:
        """Read several keys; misses and failures are reported separately."""
        ...

    async def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> CacheEntry:
        """
        Store value under key.

        Args:
            key: Cache key
            value: JSON-serializable payload
            ttl_seconds: Seconds until expiry (None = store default, 0 = never)
        """
        ...

    async def mset(
        self, items: Mapping[str, Any], ttl_seconds: float | None = None
    ) -> MultiSetResult:
        """Store several values with a shared TTL."""
        ...

    async def delete(self, keys: str | Iterable[str]) -> DeleteResult:
        """Delete one or more keys."""
        ...

    async def get_all(self) -> dict[str, Any]:
        """Return every live entry as a key -> value mapping."""
        ...

    async def sweep(self) -> SweepReport:
        """Remove expired and corrupt entries from storage."""
        ...

    async def flush(self) -> None:
        """Remove every entry."""
        ...
