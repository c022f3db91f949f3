"""Single-key entry operations on top of a FileSystem.

Reads verify that an entry file decodes, names the requested key, and sits
where the path mapper puts that key. Anything else is corruption: the file
is removed best-effort and the read reports a miss. Expired entries are
removed on read (lazy eviction).
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from pathlib import Path
import time
from typing import Any

from treecache.core.caching.codec import decode_entry, encode_entry
from treecache.core.caching.errors import (
    CorruptionError,
    DecodeError,
    InvalidKeyError,
    KeyMismatchError,
    ReadOnlyCacheError,
)
from treecache.core.caching.models import NEVER_EXPIRES, CacheEntry, CacheStats
from treecache.core.caching.paths import PathMapper, sharded_path
from treecache.core.io import AbsolutePath, FileSystem

Logger = logging.Logger | logging.LoggerAdapter

DEFAULT_CACHE_TYPE = "file-system"


class EntryStore:
    """
    Read, write and delete single cache entries.

    Holds no per-key state; the directory tree is the only index.
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
        logger: Logger | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize entry store.

        Args:
            fs: Async filesystem implementation
            root: Absolute path to cache root directory
            mapper: Key -> relative path function
            default_ttl_seconds: TTL used when set() gets none (0 = never expires)
            read_only: Reject mutating operations
            verbose: Log operation traces at INFO instead of DEBUG
            logger: Logger for diagnostics
            clock: Returns current time in epoch seconds
        """
        if default_ttl_seconds < 0:
            raise ValueError(f"default_ttl_seconds must be >= 0, got {default_ttl_seconds}")
        self.fs = fs
        self.root = root
        self.mapper = mapper
        self.default_ttl_seconds = default_ttl_seconds
        self.read_only = read_only
        self.verbose = verbose
        self.logger: Logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self.stats = CacheStats()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def trace(self, message: str, *args: Any) -> None:
        """Log an operation trace (INFO when verbose, else DEBUG)."""
        self.logger.log(logging.INFO if self.verbose else logging.DEBUG, message, *args)

    def now_ms(self) -> int:
        return int(self.clock() * 1000)

    def path_for(self, key: str) -> AbsolutePath:
        """Resolve the absolute entry path for key (sync, no I/O)."""
        return self.fs.join(self.root, *self.mapper(key).parts)

    def check_writable(self, operation: str) -> None:
        if self.read_only:
            raise ReadOnlyCacheError(f"{operation}() rejected: cache is read-only")

    async def remove_quietly(self, path: AbsolutePath, reason: str) -> bool:
        """
        Remove a file best-effort.

        Returns:
            True if the file was removed. Failures are logged, not raised.
        """
        try:
            await self.fs.remove(path)
        except FileNotFoundError:
            return False
        except OSError as e:
            self.logger.warning("Failed to remove %s entry %s: %s", reason, path, e)
            return False
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def read_entry(self, path: AbsolutePath, key: str | None = None) -> CacheEntry:
        """
        Read, decode and verify the entry file at path.

        Args:
            path: Entry file path
            key: Requested key; when given the entry must carry it

        Returns:
            Decoded entry (expiry is not checked here)

        Raises:
            FileNotFoundError: If no file exists at path
            CorruptionError: If the file is malformed or misplaced
            OSError: On other read failures
        """
        try:
            text = await self.fs.read_text(path)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Entry file is not valid UTF-8: {e}", key=key, path=str(path)) from e

        try:
            entry = decode_entry(text, path=str(path))
        except DecodeError as e:
            e.key = key
            raise

        if key is not None and entry.key != key:
            raise KeyMismatchError(
                f"Entry holds key {entry.key!r}, expected {key!r}", key=key, path=str(path)
            )
        try:
            expected_path = self.path_for(entry.key)
        except ValueError as e:
            raise KeyMismatchError(
                f"Entry key {entry.key!r} has no valid location: {e}", key=key, path=str(path)
            ) from e
        if Path(expected_path) != Path(path):
            raise KeyMismatchError(
                f"Entry for {entry.key!r} belongs at {expected_path}", key=key, path=str(path)
            )
        return entry

    async def lookup(self, key: str) -> CacheEntry | None:
        """
        Fetch the live entry for key.

        Returns:
            The entry, or None on miss (absent, expired or corrupt)

        Raises:
            InvalidKeyError: If key cannot be mapped to a path
            OSError: On read failures other than absence
        """
        self.trace("get() called: %s", key)
        path = self.path_for(key)

        try:
            entry = await self.read_entry(path, key)
        except FileNotFoundError:
            self.stats.misses += 1
            return None
        except CorruptionError as e:
            self.stats.corrupt += 1
            self.stats.misses += 1
            self.logger.warning("Corrupt cache entry for %r at %s: %s", key, path, e)
            await self.remove_quietly(path, "corrupt")
            return None

        if entry.is_expired(self.now_ms()):
            self.stats.expired += 1
            self.stats.misses += 1
            self.trace("Entry expired, evicting: %s", key)
            await self.remove_quietly(path, "expired")
            return None

        self.stats.hits += 1
        return entry

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def expires_at_for(self, ttl_seconds: float | None) -> int:
        """Compute the expiry timestamp (ms) for a TTL; None means the default."""
        if ttl_seconds is None:
            ttl_seconds = self.default_ttl_seconds
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        if ttl_seconds == 0:
            return NEVER_EXPIRES
        return self.now_ms() + int(ttl_seconds * 1000)

    async def store(self, key: str, value: Any, ttl_seconds: float | None = None) -> CacheEntry:
        """
        Write an entry, fully replacing any prior content.

        Args:
            key: Cache key
            value: JSON-serializable payload
            ttl_seconds: Seconds until expiry (None = store default, 0 = never)

        Returns:
            The entry as written

        Raises:
            ReadOnlyCacheError: If the store is read-only
            InvalidKeyError: If key cannot be mapped to a path
            EncodeError: If value is not serializable
            OSError: On directory creation or write failure
        """
        self.check_writable("set")
        self.trace("set() called: %s", key)
        path = self.path_for(key)

        entry = CacheEntry(key=key, expires_at=self.expires_at_for(ttl_seconds), value=value)
        text = encode_entry(entry)

        await self.fs.mkdirs(AbsolutePath(Path(path).parent))
        await self.fs.write_text(path, text)
        self.stats.writes += 1
        return entry

    async def remove(self, key: str) -> bool:
        """
        Delete the entry file for key.

        Returns:
            True if a file was removed, False if none existed

        Raises:
            ReadOnlyCacheError: If the store is read-only
            InvalidKeyError: If key cannot be mapped to a path
            OSError: On removal failure other than absence
        """
        self.check_writable("del")
        self.trace("del() called: %s", key)
        path = self.path_for(key)

        try:
            await self.fs.remove(path)
        except FileNotFoundError:
            return False
        self.stats.deletes += 1
        return True
