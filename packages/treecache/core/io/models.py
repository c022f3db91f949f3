"""Path types for the filesystem layer.

Cache roots are always absolute; path mappers produce relative fragments
that are joined beneath the root.
"""

from pathlib import Path, PurePosixPath
from typing import NewType

AbsolutePath = NewType("AbsolutePath", Path)
RelativePath = NewType("RelativePath", PurePosixPath)


def absolute_path(path: str | Path) -> AbsolutePath:
    """
    Resolve and construct an absolute path.

    Relative input is resolved against the current working directory.

    Args:
        path: String or Path object

    Returns:
        AbsolutePath instance

    Example:
        >>> p = absolute_path("/tmp/cache")
        >>> assert Path(p).is_absolute()
    """
    p = Path(path).expanduser().resolve()
    if not p.is_absolute():
        raise ValueError(f"Path must be absolute: {path}")
    return AbsolutePath(p)


def relative_path(path: str | PurePosixPath) -> RelativePath:
    """
    Validate and construct a relative path fragment.

    Args:
        path: String or PurePosixPath

    Returns:
        RelativePath instance

    Raises:
        ValueError: If path is absolute or empty

    Example:
        >>> relative_path("ab/cd/abcdef.json").parts
        ('ab', 'cd', 'abcdef.json')
    """
    p = PurePosixPath(path)
    if p.is_absolute():
        raise ValueError(f"Path must be relative: {path}")
    if not p.parts:
        raise ValueError("Path must not be empty")
    return RelativePath(p)
