"""Filesystem-backed key-value cache.

One entry per file, located by a path mapper, carrying an optional expiry.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
import time
from typing import TYPE_CHECKING, Any

from treecache.core.caching.batch import delete_many, get_many, set_many
from treecache.core.caching.models import (
    CacheEntry,
    CacheStats,
    DeleteResult,
    MultiGetResult,
    MultiSetResult,
    SweepReport,
)
from treecache.core.caching.paths import PathMapper, mapper_for, sharded_path
from treecache.core.caching.scanner import TreeScanner
from treecache.core.caching.store import DEFAULT_CACHE_TYPE, EntryStore, Logger
from treecache.core.io import AbsolutePath, FileSystem, RealFileSystem, absolute_path
from treecache.core.utils.logging import get_logger

if TYPE_CHECKING:
    from treecache.core.config.models import CacheConfig


class FSCache:
    """
    Async filesystem-backed key-value cache.

    No state is kept in memory besides configuration and diagnostic
    counters; concurrent writers to the same key race with last write wins.

    Example:
        >>> cache = FSCache(RealFileSystem(), absolute_path("/tmp/cache"))
        >>> await cache.set("user:42", {"name": "Ada"}, ttl_seconds=60)
        >>> await cache.get("user:42")
        {'name': 'Ada'}
    """

    def __init__(
        self,
        fs: FileSystem,
        root: AbsolutePath,
        *,
        mapper: PathMapper = sharded_path,
        default_ttl_seconds: float = 0,
        read_only: bool = False,
        verbose: bool = False,
        cache_type: str = DEFAULT_CACHE_TYPE,
        logger: Logger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize filesystem cache.

        Args:
            fs: Async filesystem implementation
            root: Absolute path to cache root directory
            mapper: Key -> relative path function
            default_ttl_seconds: TTL applied when set() gets none (0 = never expires)
            read_only: Reject set/mset/delete/sweep/flush
            verbose: Log operation traces at INFO instead of DEBUG
            cache_type: Label attached to diagnostics
            logger: Logger for diagnostics (default: module logger tagged with cache_type)
            clock: Returns current time in epoch seconds
        """
        self.cache_type = cache_type
        self._store = EntryStore(
            fs,
            root,
            mapper=mapper,
            default_ttl_seconds=default_ttl_seconds,
            read_only=read_only,
            verbose=verbose,
            logger=logger or get_logger(
                "treecache.core.caching", prefix=cache_type, cache_type=cache_type
            ),
            clock=clock,
        )
        self._scanner = TreeScanner(self._store)

    @classmethod
    def from_config(
        cls,
        config: CacheConfig,
        fs: FileSystem | None = None,
        logger: Logger | None = None,
    ) -> FSCache:
        """Build a cache from validated configuration."""
        return cls(
            fs or RealFileSystem(),
            absolute_path(config.root),
            mapper=mapper_for(config.layout, config.shard_width, config.max_depth),
            default_ttl_seconds=config.default_ttl_seconds,
            read_only=config.read_only,
            verbose=config.verbose,
            cache_type=config.type,
            logger=logger,
        )

    @property
    def fs(self) -> FileSystem:
        return self._store.fs

    @property
    def root(self) -> AbsolutePath:
        return self._store.root

    @property
    def read_only(self) -> bool:
        return self._store.read_only

    @property
    def stats(self) -> CacheStats:
        """Diagnostic counters (hits, misses, expired, corrupt, writes, deletes)."""
        return self._store.stats

    def path_for(self, key: str) -> AbsolutePath:
        """Absolute path of the entry file for key (sync, no I/O)."""
        return self._store.path_for(key)

    async def initialize(self) -> None:
        """
        Ensure the cache root exists.

        Optional: set() creates directories as needed. Safe to call
        multiple times; a no-op for read-only caches.
        """
        if not self.read_only:
            await self.fs.mkdirs(self.root)

    # Reads

    async def lookup(self, key: str) -> CacheEntry | None:
        """
        Fetch the live entry for key.

        Absent, expired and corrupt entries are all misses. Expired and
        corrupt files are deleted as a side effect.

        Returns:
            Entry, or None on miss

        Raises:
            InvalidKeyError: If key cannot be mapped to a path
            OSError: On read failures other than absence
        """
        return await self._store.lookup(key)

    async def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value for key, or `default` on miss."""
        entry = await self._store.lookup(key)
        return default if entry is None else entry.value

    async def exists(self, key: str) -> bool:
        """True if get() would hit."""
        return await self._store.lookup(key) is not None

    async def mget(self, keys: Iterable[str]) -> MultiGetResult:
        """Read several keys concurrently."""
        return await get_many(self._store, keys)

    async def get_all(self) -> dict[str, Any]:
        """
        Scan the whole tree and return every live entry.

        Corrupt, misplaced and expired files are skipped.

        Raises:
            OSError: If a directory fails to list
        """
        return await self._scanner.collect()

    # Writes

    async def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> CacheEntry:
        """
        Store value under key, replacing any prior entry.

        Args:
            key: Cache key
            value: JSON-serializable payload
            ttl_seconds: Seconds until expiry (None = store default, 0 = never)

        Returns:
            The entry as written

        Raises:
            ReadOnlyCacheError: If the cache is read-only
            InvalidKeyError: If key cannot be mapped to a path
            EncodeError: If value is not serializable
            OSError: On write failure (not retried)
        """
        return await self._store.store(key, value, ttl_seconds)

    async def mset(
        self, items: Mapping[str, Any], ttl_seconds: float | None = None
    ) -> MultiSetResult:
        """Store several values concurrently with a shared TTL."""
        return await set_many(self._store, items, ttl_seconds)

    async def delete(self, keys: str | Iterable[str]) -> DeleteResult:
        """
        Delete one or more keys.

        Deleting an absent key is not an error.

        Returns:
            DeleteResult; `count` is the number of files removed
        """
        if isinstance(keys, str):
            keys = [keys]
        return await delete_many(self._store, keys)

    async def sweep(self) -> SweepReport:
        """Remove every expired or corrupt entry file under the root."""
        return await self._scanner.sweep()

    async def flush(self) -> None:
        """
        Remove every entry.

        Raises:
            ReadOnlyCacheError: If the cache is read-only
            NotImplementedError: Always (flush is not supported)
        """
        self._store.check_writable("flush")
        self._store.logger.error("flush() called but is not implemented")
        raise NotImplementedError("flush() is not implemented for the file-system cache")


class FSCacheSync:
    """
    Synchronous wrapper around FSCache.

    Uses asyncio.run() to execute each async operation in blocking mode.
    Not usable from inside a running event loop.
    """

    def __init__(self, cache: FSCache) -> None:
        self._async_cache = cache

    @property
    def cache(self) -> FSCache:
        return self._async_cache

    def get(self, key: str, default: Any = None) -> Any:
        """Return cached value or default (blocking)."""
        return asyncio.run(self._async_cache.get(key, default))

    def lookup(self, key: str) -> CacheEntry | None:
        """Fetch live entry (blocking)."""
        return asyncio.run(self._async_cache.lookup(key))

    def mget(self, keys: Iterable[str]) -> MultiGetResult:
        """Read several keys (blocking)."""
        return asyncio.run(self._async_cache.mget(keys))

    def get_all(self) -> dict[str, Any]:
        """Scan the whole tree (blocking)."""
        return asyncio.run(self._async_cache.get_all())

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> CacheEntry:
        """Store value (blocking)."""
        return asyncio.run(self._async_cache.set(key, value, ttl_seconds))

    def mset(self, items: Mapping[str, Any], ttl_seconds: float | None = None) -> MultiSetResult:
        """Store several values (blocking)."""
        return asyncio.run(self._async_cache.mset(items, ttl_seconds))

    def delete(self, keys: str | Iterable[str]) -> DeleteResult:
        """Delete keys (blocking)."""
        return asyncio.run(self._async_cache.delete(keys))

    def sweep(self) -> SweepReport:
        """Remove expired and corrupt entries (blocking)."""
        return asyncio.run(self._async_cache.sweep())

    def flush(self) -> None:
        """Always raises NotImplementedError (blocking)."""
        asyncio.run(self._async_cache.flush())
