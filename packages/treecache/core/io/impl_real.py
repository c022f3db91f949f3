"""Real filesystem implementation using aiofiles for async I/O.

Provides atomic writes via temp file + os.replace().
"""

import asyncio
from contextlib import suppress
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath

# Prefix/suffix of in-flight temp files; tree scans skip these.
TEMP_PREFIX = ".tmp-"
TEMP_SUFFIX = ".part"


def is_temp_name(name: str) -> bool:
    """Return True if a directory entry is an in-flight temp file."""
    return name.startswith(TEMP_PREFIX) and name.endswith(TEMP_SUFFIX)


class RealFileSystem:
    """
    Real filesystem implementation using aiofiles for async I/O.

    Blocking calls without an aiofiles counterpart run in the default
    executor so the event loop is never blocked.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        base_resolved = Path(base).resolve()
        result = base_resolved.joinpath(*parts)

        # Security: Ensure result is still under base
        try:
            result.resolve().relative_to(base_resolved)
        except ValueError as e:
            raise ValueError(f"Path traversal detected: {result} escapes {base}") from e

        return AbsolutePath(result)

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """Read text file asynchronously."""
        async with aiofiles.open(path, encoding=encoding) as f:
            content: str = await f.read()
            return content

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> int:
        """Atomically write text file asynchronously."""
        path_obj = Path(path)
        loop = asyncio.get_running_loop()

        def create_temp_file() -> str:
            tmp = NamedTemporaryFile(
                mode="w",
                encoding=encoding,
                dir=path_obj.parent,
                prefix=TEMP_PREFIX,
                suffix=TEMP_SUFFIX,
                delete=False,
            )
            tmp_path = tmp.name
            tmp.close()
            return tmp_path

        tmp_path = await loop.run_in_executor(None, create_temp_file)

        try:
            async with aiofiles.open(tmp_path, mode="w", encoding=encoding) as f:
                await f.write(content)

            await loop.run_in_executor(None, os.replace, tmp_path, str(path))
        except BaseException:
            with suppress(OSError):
                await aiofiles.os.unlink(tmp_path)
            raise

        return len(content.encode(encoding))

    async def mkdirs(self, path: AbsolutePath) -> None:
        """Create directory and parents asynchronously."""
        await aiofiles.os.makedirs(path, exist_ok=True)

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """List directory contents asynchronously."""
        entries: list[str] = await aiofiles.os.listdir(path)
        return entries

    async def remove(self, path: AbsolutePath) -> None:
        """Remove file asynchronously."""
        await aiofiles.os.unlink(path)
