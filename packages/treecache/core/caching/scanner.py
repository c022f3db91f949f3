"""Recursive walk over the cache tree.

The directory layout is the index of record: a full scan rebuilds the key
space by visiting every leaf file under the root. Directories are listed
and their children walked concurrently; a path that refuses listing with
NotADirectoryError is a leaf and is loaded as an entry.

Leaf problems (corrupt, misplaced, expired, unreadable) skip that leaf
only. A directory that was listed by its parent but then fails to list is
a structural problem and aborts the walk.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from treecache.core.caching.batch import settle_all
from treecache.core.caching.errors import CorruptionError
from treecache.core.caching.models import CacheEntry, SweepReport
from treecache.core.caching.store import EntryStore
from treecache.core.io import AbsolutePath, is_temp_name

LeafVisitor = Callable[[AbsolutePath], Awaitable[None]]


class TreeScanner:
    """Walks the tree under an entry store's root."""

    def __init__(self, store: EntryStore) -> None:
        self.store = store

    async def walk(self, visit: LeafVisitor) -> None:
        """
        Call `visit` for every leaf file under the root.

        A missing root is an empty cache.

        Raises:
            OSError: If a directory fails to list
        """
        await self._walk(self.store.root, visit, is_root=True)

    async def _walk(self, path: AbsolutePath, visit: LeafVisitor, is_root: bool = False) -> None:
        fs = self.store.fs
        try:
            names = await fs.listdir(path)
        except NotADirectoryError:
            await visit(path)
            return
        except FileNotFoundError:
            # Root not created yet, or a child removed since its parent was listed
            if not is_root:
                self.store.trace("Path vanished during scan: %s", path)
            return

        children = [fs.join(path, name) for name in names if not is_temp_name(name)]
        outcomes = await settle_all(self._walk(child, visit) for child in children)
        for outcome in outcomes:
            if isinstance(outcome, Exception):
                raise outcome

    async def _load(self, path: AbsolutePath) -> CacheEntry | None:
        """Load a leaf entry, returning None for anything unusable."""
        store = self.store
        try:
            return await store.read_entry(path)
        except FileNotFoundError:
            return None
        except CorruptionError as e:
            store.stats.corrupt += 1
            store.logger.warning("Skipping corrupt entry %s: %s", path, e)
            return None
        except OSError as e:
            store.logger.warning("Skipping unreadable entry %s: %s", path, e)
            return None

    async def collect(self) -> dict[str, Any]:
        """
        Reconstruct the mapping of every live, valid entry.

        Returns:
            Mapping of key -> value

        Raises:
            OSError: If a directory fails to list
        """
        store = self.store
        store.trace("getAll() called")
        found: dict[str, Any] = {}
        now_ms = store.now_ms()

        async def visit(path: AbsolutePath) -> None:
            entry = await self._load(path)
            if entry is None or entry.is_expired(now_ms):
                return
            found[entry.key] = entry.value

        await self.walk(visit)
        return found

    async def sweep(self) -> SweepReport:
        """
        Delete every expired or corrupt entry file.

        Raises:
            ReadOnlyCacheError: If the store is read-only
            OSError: If a directory fails to list
        """
        store = self.store
        store.check_writable("sweep")
        store.trace("sweep() called")
        removed_expired: list[str] = []
        removed_corrupt: list[str] = []
        errors: dict[str, Exception] = {}
        now_ms = store.now_ms()

        async def discard(path: AbsolutePath, bucket: list[str]) -> None:
            try:
                await store.fs.remove(path)
            except FileNotFoundError:
                return
            except OSError as e:
                store.logger.error("sweep() failed to remove %s: %s", path, e)
                errors[str(path)] = e
                return
            bucket.append(str(path))

        async def visit(path: AbsolutePath) -> None:
            try:
                entry = await store.read_entry(path)
            except FileNotFoundError:
                return
            except CorruptionError as e:
                store.logger.warning("sweep() removing corrupt entry %s: %s", path, e)
                await discard(path, removed_corrupt)
                return
            except OSError as e:
                errors[str(path)] = e
                return
            if entry.is_expired(now_ms):
                await discard(path, removed_expired)

        await self.walk(visit)
        store.stats.expired += len(removed_expired)
        store.stats.corrupt += len(removed_corrupt)
        return SweepReport(
            removed_expired=sorted(removed_expired),
            removed_corrupt=sorted(removed_corrupt),
            errors=errors,
        )
