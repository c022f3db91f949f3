"""Models for the cache system.

Provides the on-disk entry model, batch result types, and diagnostic
counters.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# expires_at sentinel: entry never expires
NEVER_EXPIRES = 0


class CacheEntry(BaseModel):
    """
    One cached entry, stored as one file.

    Serialized as ``{"key": ..., "expiresAt": ..., "value": ...}``.
    """

    key: str = Field(min_length=1, strict=True, description="Logical cache key")
    expires_at: int = Field(
        alias="expiresAt",
        ge=0,
        strict=True,
        description="Expiry as epoch milliseconds (0 = never expires)",
    )
    value: Any = Field(description="Caller payload (JSON-serializable)")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    def is_expired(self, now_ms: int) -> bool:
        """Return True if the entry is past its expiry at `now_ms`."""
        return self.expires_at != NEVER_EXPIRES and self.expires_at <= now_ms


class _BatchResult(BaseModel):
    """Common shape for results that collect per-key failures."""

    errors: dict[str, Exception] = Field(
        default_factory=dict, description="Per-key failures (key -> exception)"
    )

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def ok(self) -> bool:
        """True when no key failed."""
        return not self.errors

    @property
    def failed_count(self) -> int:
        return len(self.errors)

    @property
    def failed_keys(self) -> list[str]:
        return sorted(self.errors)


class MultiGetResult(_BatchResult):
    """Result of a multi-key read.

    Keys that missed appear in `missing`, keys that failed in `errors`;
    neither appears in `values`.
    """

    values: dict[str, Any] = Field(default_factory=dict)
    missing: list[str] = Field(default_factory=list)


class MultiSetResult(_BatchResult):
    """Result of a multi-key write."""

    stored: list[str] = Field(default_factory=list)


class DeleteResult(_BatchResult):
    """Result of a (multi-)key delete.

    `count` is the number of files actually removed. Keys with no file are
    listed in `absent`; they are not failures.
    """

    deleted: list[str] = Field(default_factory=list)
    absent: list[str] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.deleted)


class SweepReport(_BatchResult):
    """Outcome of a sweep over the whole tree.

    `errors` is keyed by file path rather than cache key.
    """

    removed_expired: list[str] = Field(default_factory=list, description="Removed file paths")
    removed_corrupt: list[str] = Field(default_factory=list, description="Removed file paths")


class CacheStats(BaseModel):
    """Diagnostic counters for one store instance."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    corrupt: int = 0
    writes: int = 0
    deletes: int = 0
