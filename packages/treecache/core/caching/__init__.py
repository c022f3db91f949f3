"""Filesystem key-value cache.

Each entry is one JSON file located by a deterministic key -> path mapping:
- Sharded directory layout bounds per-directory fan-out
- Optional per-entry expiry with lazy eviction on read
- Corrupt or misplaced files are misses and are removed on read
- Batch operations run concurrently and report failures per key
- Full-tree scan rebuilds the key space from the directory layout
"""

from treecache.core.caching.backends.fs import FSCache, FSCacheSync
from treecache.core.caching.codec import decode_entry, encode_entry
from treecache.core.caching.errors import (
    CacheError,
    CorruptionError,
    DecodeError,
    EncodeError,
    InvalidKeyError,
    KeyMismatchError,
    ReadOnlyCacheError,
)
from treecache.core.caching.models import (
    NEVER_EXPIRES,
    CacheEntry,
    CacheStats,
    DeleteResult,
    MultiGetResult,
    MultiSetResult,
    SweepReport,
)
from treecache.core.caching.paths import (
    PathMapper,
    flat_path,
    make_sharded_mapper,
    mapper_for,
    padded_path,
    sharded_path,
    validate_key,
)
from treecache.core.caching.protocols import Cache

__all__ = [
    # Core
    "Cache",
    "CacheEntry",
    "CacheStats",
    "NEVER_EXPIRES",
    # Results
    "MultiGetResult",
    "MultiSetResult",
    "DeleteResult",
    "SweepReport",
    # Backends
    "FSCache",
    "FSCacheSync",
    # Codec
    "encode_entry",
    "decode_entry",
    # Path mapping
    "PathMapper",
    "sharded_path",
    "padded_path",
    "flat_path",
    "make_sharded_mapper",
    "mapper_for",
    "validate_key",
    # Errors
    "CacheError",
    "CorruptionError",
    "DecodeError",
    "EncodeError",
    "InvalidKeyError",
    "KeyMismatchError",
    "ReadOnlyCacheError",
]
