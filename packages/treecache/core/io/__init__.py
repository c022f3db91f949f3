"""Filesystem abstraction layer for treecache.

Provides safe, testable, async filesystem operations.

Example:
    >>> from treecache.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "cache", "test.json")
    >>> await fs.mkdirs(fs.join(absolute_path("/tmp"), "cache"))
    >>> await fs.write_text(path, "{}")
    >>> content = await fs.read_text(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem, is_temp_name
from .models import AbsolutePath, RelativePath, absolute_path, relative_path
from .protocols import FileSystem

__all__ = [
    # Path types and constructors
    "AbsolutePath",
    "RelativePath",
    "absolute_path",
    "relative_path",
    # Protocols
    "FileSystem",
    # Implementations
    "RealFileSystem",
    "FakeFileSystem",
    # Utilities
    "is_temp_name",
]
