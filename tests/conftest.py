"""Shared pytest fixtures for treecache tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from treecache.core.caching import FSCache
from treecache.core.io import AbsolutePath, FakeFileSystem, absolute_path

# ============================================================================
# Time
# ============================================================================


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Provide a clock frozen at a fixed instant."""
    return FakeClock()


# ============================================================================
# Filesystem / cache
# ============================================================================


@pytest.fixture
def fs() -> FakeFileSystem:
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def cache_root() -> AbsolutePath:
    """Cache root inside the fake filesystem."""
    return absolute_path("/.cache")


@pytest.fixture
def cache(fs: FakeFileSystem, cache_root: AbsolutePath, clock: FakeClock) -> FSCache:
    """Provide FSCache over the fake filesystem with a controllable clock."""
    return FSCache(fs, cache_root, clock=clock)


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Logging
# ============================================================================


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """Undo configure_logging() calls made by a test."""
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in before and type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
