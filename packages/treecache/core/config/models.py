"""Configuration models for treecache."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoggingConfig(BaseModel):
    """Logging output configuration."""

    level: str = Field(
        default="WARNING",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Format string for text logs",
    )
    structured: bool = Field(default=False, description="Emit JSON log records")
    filename: str | None = Field(default=None, description="Log file (default: stderr)")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v


class CacheConfig(BaseModel):
    """Cache store configuration."""

    root: Path = Field(default=Path("./cache"), description="Storage root directory")
    default_ttl_seconds: int = Field(
        default=0, ge=0, description="TTL applied when set() gets none (0 = never expires)"
    )
    read_only: bool = Field(default=False, description="Reject mutating operations")
    verbose: bool = Field(default=False, description="Log operation traces at INFO")
    type: str = Field(default="file-system", description="Label attached to diagnostics")

    layout: Literal["sharded", "padded", "flat"] = Field(
        default="sharded", description="Key -> path strategy"
    )
    shard_width: int = Field(default=2, ge=1, description="Characters per shard directory")
    max_depth: int | None = Field(
        default=None, ge=0, description="Cap on shard directory levels (sharded layout)"
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")

    @field_validator("root")
    @classmethod
    def _resolve_root(cls, v: Path) -> Path:
        return v.expanduser().resolve()
