"""Multi-key operations.

Each batch fans out one single-key operation per key, runs them all
concurrently, and waits for every one to settle before building the
aggregate result. One key's failure never aborts the others; failures are
collected per key and returned to the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable, Mapping
from typing import Any, TypeVar

from treecache.core.caching.models import DeleteResult, MultiGetResult, MultiSetResult
from treecache.core.caching.store import EntryStore

T = TypeVar("T")


async def settle_all(aws: Iterable[Awaitable[T]]) -> list[T | Exception]:
    """
    Await all awaitables concurrently and return their outcomes in order.

    Ordinary exceptions are returned in place of results. Cancellation and
    other BaseExceptions are re-raised once everything has settled.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    for outcome in outcomes:
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
    return outcomes  # type: ignore[return-value]


def _unique(keys: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(keys))


async def get_many(store: EntryStore, keys: Iterable[str]) -> MultiGetResult:
    """
    Read several keys concurrently.

    Args:
        store: Entry store
        keys: Keys to read (duplicates are read once)

    Returns:
        MultiGetResult with hits in `values`, misses in `missing`, and
        failures in `errors`
    """
    keys = _unique(keys)
    store.trace("mget() called: %d keys", len(keys))
    outcomes = await settle_all(store.lookup(key) for key in keys)

    values: dict[str, Any] = {}
    missing: list[str] = []
    errors: dict[str, Exception] = {}
    for key, outcome in zip(keys, outcomes, strict=True):
        if isinstance(outcome, Exception):
            store.logger.error("mget() error on key %r: %s", key, outcome)
            errors[key] = outcome
        elif outcome is None:
            missing.append(key)
        else:
            values[key] = outcome.value

    return MultiGetResult(values=values, missing=missing, errors=errors)


async def set_many(
    store: EntryStore, items: Mapping[str, Any], ttl_seconds: float | None = None
) -> MultiSetResult:
    """
    Write several entries concurrently with a shared TTL.

    Raises:
        ReadOnlyCacheError: If the store is read-only (nothing is written)
    """
    store.check_writable("mset")
    keys = list(items)
    store.trace("mset() called: %d keys", len(keys))
    outcomes = await settle_all(store.store(key, items[key], ttl_seconds) for key in keys)

    stored: list[str] = []
    errors: dict[str, Exception] = {}
    for key, outcome in zip(keys, outcomes, strict=True):
        if isinstance(outcome, Exception):
            store.logger.error("mset() error on key %r: %s", key, outcome)
            errors[key] = outcome
        else:
            stored.append(key)

    return MultiSetResult(stored=stored, errors=errors)


async def delete_many(store: EntryStore, keys: Iterable[str]) -> DeleteResult:
    """
    Delete several keys concurrently.

    Raises:
        ReadOnlyCacheError: If the store is read-only (nothing is deleted)
    """
    store.check_writable("del")
    keys = _unique(keys)
    outcomes = await settle_all(store.remove(key) for key in keys)

    deleted: list[str] = []
    absent: list[str] = []
    errors: dict[str, Exception] = {}
    for key, outcome in zip(keys, outcomes, strict=True):
        if isinstance(outcome, Exception):
            store.logger.error("del() error on key %r: %s", key, outcome)
            errors[key] = outcome
        elif outcome:
            deleted.append(key)
        else:
            absent.append(key)

    return DeleteResult(deleted=deleted, absent=absent, errors=errors)
