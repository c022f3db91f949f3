"""Key-to-path mapping strategies.

A path mapper is a pure function of the key that returns the entry's
location relative to the cache root. Sharding splits the key into short
chunks used as directory names, which bounds the number of entries in any
one directory to roughly the size of the key alphabet raised to the chunk
width.

Example:
    >>> sharded_path("abcdef")
    PurePosixPath('ab/cd/abcdef.json')
    >>> sharded_path("ab")
    PurePosixPath('ab.json')
    >>> padded_path("ab")
    PurePosixPath('ab/==/ab.json')
"""

from __future__ import annotations

from collections.abc import Callable

from treecache.core.caching.errors import InvalidKeyError
from treecache.core.io import RelativePath, relative_path

ENTRY_SUFFIX = ".json"

PathMapper = Callable[[str], RelativePath]

_FORBIDDEN_CHARS = ("/", "\\", "\x00")
_PAD_CHAR = "="

# Longest file or directory name (bytes) on common filesystems
MAX_NAME_BYTES = 255


def validate_key(key: str) -> str:
    """
    Check that a key can be stored as a file name.

    Raises:
        InvalidKeyError: If key is empty, not a string, contains a path
            separator or NUL, or its file name exceeds MAX_NAME_BYTES
    """
    if not isinstance(key, str) or not key:
        raise InvalidKeyError(f"Cache key must be a non-empty string, got {key!r}")
    for ch in _FORBIDDEN_CHARS:
        if ch in key:
            raise InvalidKeyError(f"Cache key contains forbidden character {ch!r}: {key!r}")
    name_bytes = len((key + ENTRY_SUFFIX).encode("utf-8", "surrogatepass"))
    if name_bytes > MAX_NAME_BYTES:
        raise InvalidKeyError(
            f"Cache key is too long: file name would be {name_bytes} bytes "
            f"(max {MAX_NAME_BYTES}): {key[:32]!r}..."
        )
    return key


def _build(segments: list[str], key: str) -> RelativePath:
    for segment in segments:
        if segment in (".", ".."):
            raise InvalidKeyError(f"Cache key maps to reserved path segment {segment!r}: {key!r}")
    return relative_path("/".join([*segments, key + ENTRY_SUFFIX]))


def make_sharded_mapper(width: int = 2, max_depth: int | None = None) -> PathMapper:
    """
    Build a mapper that shards on consecutive `width`-character chunks.

    Every chunk except the last becomes a directory. Short keys get fewer
    directory levels (a key no longer than `width` lives at the root).

    Args:
        width: Characters per shard directory
        max_depth: Optional cap on the number of shard directories

    Returns:
        Path mapper function
    """
    if width < 1:
        raise ValueError(f"Shard width must be >= 1, got {width}")
    if max_depth is not None and max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")

    def mapper(key: str) -> RelativePath:
        validate_key(key)
        chunks = [key[i : i + width] for i in range(0, len(key), width)]
        shards = chunks[:-1]
        if max_depth is not None:
            shards = shards[:max_depth]
        return _build(shards, key)

    return mapper


sharded_path: PathMapper = make_sharded_mapper()


def padded_path(key: str) -> RelativePath:
    """
    Two fixed shard levels from the first four characters.

    Keys shorter than four characters are padded with ``=`` so every entry
    sits exactly two directories below the root.
    """
    validate_key(key)
    padded = key.ljust(4, _PAD_CHAR)
    return _build([padded[0:2], padded[2:4]], key)


def flat_path(key: str) -> RelativePath:
    """Every entry directly under the root."""
    validate_key(key)
    return _build([], key)


def mapper_for(layout: str, shard_width: int = 2, max_depth: int | None = None) -> PathMapper:
    """Select a path mapper by layout name ("sharded", "padded" or "flat")."""
    if layout == "sharded":
        if shard_width == 2 and max_depth is None:
            return sharded_path
        return make_sharded_mapper(shard_width, max_depth)
    if layout == "padded":
        return padded_path
    if layout == "flat":
        return flat_path
    raise ValueError(f"Unknown cache layout: {layout!r}")
