"""Entry codec: CacheEntry <-> JSON text.

Decoding is the single place where malformed entry files are detected.
"""

from __future__ import annotations

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from treecache.core.caching.errors import DecodeError, EncodeError
from treecache.core.caching.models import CacheEntry


def encode_entry(entry: CacheEntry) -> str:
    """
    Serialize an entry to JSON text.

    Raises:
        EncodeError: If the value is not JSON-serializable
    """
    try:
        return entry.model_dump_json(by_alias=True)
    except PydanticSerializationError as e:
        raise EncodeError(f"Value for key {entry.key!r} is not serializable: {e}") from e


def decode_entry(text: str, *, path: str | None = None) -> CacheEntry:
    """
    Parse and validate JSON text into an entry.

    Args:
        text: File contents
        path: File path, attached to the error for diagnostics

    Raises:
        DecodeError: If text is not a well-formed entry
    """
    try:
        return CacheEntry.model_validate_json(text)
    except ValidationError as e:
        raise DecodeError(f"Malformed cache entry: {e.error_count()} error(s)", path=path) from e
