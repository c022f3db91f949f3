"""Exception hierarchy for the cache.

A miss is not an error and has no exception. Filesystem failures are
propagated as the builtin OSError subclasses, unchanged.
"""

from __future__ import annotations


class CacheError(Exception):
    """Base class for all cache errors."""


class InvalidKeyError(CacheError, ValueError):
    """Key cannot be mapped to a storage path."""


class EncodeError(CacheError, ValueError):
    """Value cannot be serialized into an entry file."""


class CorruptionError(CacheError):
    """Stored entry is unreadable or disagrees with its location.

    Attributes:
        key: Key the caller requested (None during tree scans)
        path: Path of the offending file
    """

    def __init__(self, message: str, *, key: str | None = None, path: str | None = None) -> None:
        super().__init__(message)
        self.key = key
        self.path = path


class DecodeError(CorruptionError):
    """Entry file is not well-formed serialized data."""


class KeyMismatchError(CorruptionError):
    """Entry key does not match the requested key or its own path."""


class ReadOnlyCacheError(CacheError, PermissionError):
    """Mutating operation attempted on a read-only cache."""
