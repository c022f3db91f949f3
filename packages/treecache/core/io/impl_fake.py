"""In-memory filesystem for fast, isolated testing.

Simulates filesystem operations without disk I/O, including the OSError
subclasses the real filesystem raises. Async operations complete
immediately but maintain the async interface.
"""

import posixpath
from pathlib import Path

from .models import AbsolutePath


class FakeFileSystem:
    """
    In-memory async filesystem for testing.

    Files are stored as bytes so tests can plant undecodable content.
    Not thread-safe (use per-test instance).
    """

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}  # Root always exists
        self._failures: dict[tuple[str, str], OSError] = {}

    # ------------------------------------------------------------------
    # Test helpers (not part of FileSystem protocol)
    # ------------------------------------------------------------------

    def fail_on(self, operation: str, path: AbsolutePath | str, error: OSError) -> None:
        """Make `operation` ("read", "write", "mkdirs", "listdir", "remove") fail for path."""
        self._failures[(operation, self._norm(path))] = error

    def write_bytes(self, path: AbsolutePath | str, data: bytes) -> None:
        """Plant raw bytes at path, creating parent directories."""
        path_str = self._norm(path)
        self._ensure_parents(posixpath.dirname(path_str))
        self._files[path_str] = data

    async def exists(self, path: AbsolutePath | str) -> bool:
        """True if a file or directory exists at path."""
        path_str = self._norm(path)
        return path_str in self._files or path_str in self._dirs

    async def is_dir(self, path: AbsolutePath | str) -> bool:
        """True if a directory exists at path."""
        return self._norm(path) in self._dirs

    @property
    def files(self) -> list[str]:
        """Sorted list of all file paths."""
        return sorted(self._files)

    # ------------------------------------------------------------------

    @staticmethod
    def _norm(path: AbsolutePath | str) -> str:
        return posixpath.normpath(str(path))

    def _check(self, operation: str, path_str: str) -> None:
        error = self._failures.get((operation, path_str))
        if error is not None:
            raise error

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        base_str = self._norm(base)
        result = posixpath.normpath(posixpath.join(base_str, *parts))

        if result != base_str and not result.startswith(base_str.rstrip("/") + "/"):
            raise ValueError(f"Path traversal detected: {result} escapes {base}")

        return AbsolutePath(Path(result))

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """Read text (async, immediate)."""
        path_str = self._norm(path)
        self._check("read", path_str)
        if path_str in self._dirs:
            raise IsADirectoryError(f"Is a directory: {path}")
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str].decode(encoding)

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> int:
        """Write text (async, immediate)."""
        path_str = self._norm(path)
        self._check("write", path_str)
        if posixpath.dirname(path_str) not in self._dirs:
            raise FileNotFoundError(f"Parent directory not found: {path}")
        if path_str in self._dirs:
            raise IsADirectoryError(f"Is a directory: {path}")

        data = content.encode(encoding)
        self._files[path_str] = data
        return len(data)

    def _ensure_parents(self, path_str: str) -> None:
        """Create directory and all its ancestors (sync helper)."""
        while path_str not in self._dirs:
            if path_str in self._files:
                raise FileExistsError(f"File exists: {path_str}")
            self._dirs.add(path_str)
            path_str = posixpath.dirname(path_str)

    async def mkdirs(self, path: AbsolutePath) -> None:
        """Create directory (async, immediate)."""
        path_str = self._norm(path)
        self._check("mkdirs", path_str)
        self._ensure_parents(path_str)

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """List directory (async, immediate)."""
        path_str = self._norm(path)
        self._check("listdir", path_str)
        if path_str in self._files:
            raise NotADirectoryError(f"Not a directory: {path}")
        if path_str not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        children = {
            posixpath.basename(p)
            for p in (*self._files, *self._dirs)
            if p != path_str and posixpath.dirname(p) == path_str
        }
        return sorted(children)

    async def remove(self, path: AbsolutePath) -> None:
        """Remove file (async, immediate)."""
        path_str = self._norm(path)
        self._check("remove", path_str)
        if path_str in self._dirs:
            raise IsADirectoryError(f"Is a directory: {path}")
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        del self._files[path_str]
