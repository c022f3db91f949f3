"""Protocol for async filesystem operations used by the cache."""

from typing import Protocol

from .models import AbsolutePath


class FileSystem(Protocol):
    """
    Protocol for async filesystem operations.

    Implementations must replace file content atomically on write and
    report errors with the builtin OSError subclasses:

    - FileNotFoundError: path does not exist
    - NotADirectoryError: listdir() called on a regular file
    - IsADirectoryError: read_text() / remove() called on a directory
    """

    # Path operations (sync - no I/O)
    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """
        Safely join path components.

        Args:
            base: Base absolute path
            *parts: Path segments to join

        Returns:
            New absolute path

        Raises:
            ValueError: If result escapes base directory
        """
        ...

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """
        Read text file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            UnicodeDecodeError: If content is not valid for encoding
            OSError: On read failure
        """
        ...

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> int:
        """
        Atomically write text to file, replacing prior content.

        The parent directory must already exist.

        Returns:
            Number of bytes written

        Raises:
            OSError: On write failure
        """
        ...

    async def mkdirs(self, path: AbsolutePath) -> None:
        """
        Create directory and all parents.

        Idempotent; tolerates concurrent creation by another writer.

        Raises:
            OSError: On creation failure
        """
        ...

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """
        List directory contents (names only).

        Raises:
            FileNotFoundError: If path doesn't exist
            NotADirectoryError: If path is a regular file
            OSError: On read failure
        """
        ...

    async def remove(self, path: AbsolutePath) -> None:
        """
        Remove a file.

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: On removal failure
        """
        ...
