"""Tests for FakeFileSystem (async).

Tests the in-memory fake filesystem implementation, including the OSError
subclasses the cache depends on.
"""

import pytest

from treecache.core.io import AbsolutePath, FakeFileSystem, absolute_path


@pytest.fixture
def test_root():
    """Provide test root path."""
    return absolute_path("/test")


class TestJoin:
    """Tests for path joining (sync operation)."""

    def test_join_multiple_parts(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test joining multiple path components."""
        result = fs.join(test_root, "a", "b", "c")
        assert str(result) == "/test/a/b/c"

    def test_join_rejects_traversal(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test joins escaping the base are rejected."""
        with pytest.raises(ValueError, match="Path traversal"):
            fs.join(test_root, "..", "etc")


class TestReadWrite:
    """Tests for read/write operations."""

    async def test_write_and_read_roundtrip(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test write → read roundtrip succeeds."""
        await fs.mkdirs(test_root)
        test_file = fs.join(test_root, "test.txt")
        content = "Hello, world!"

        written = await fs.write_text(test_file, content)

        assert written == len(content.encode("utf-8"))
        assert await fs.read_text(test_file) == content

    async def test_write_requires_parent(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test writing into a missing directory fails like the real filesystem."""
        with pytest.raises(FileNotFoundError):
            await fs.write_text(fs.join(test_root, "a", "test.txt"), "content")

    async def test_read_nonexistent_raises_error(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test reading nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            await fs.read_text(fs.join(test_root, "nonexistent.txt"))

    async def test_read_directory_raises_error(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test reading a directory raises IsADirectoryError."""
        await fs.mkdirs(test_root)
        with pytest.raises(IsADirectoryError):
            await fs.read_text(test_root)

    async def test_undecodable_bytes(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test planted invalid UTF-8 raises UnicodeDecodeError on read."""
        test_file = fs.join(test_root, "bad.txt")
        fs.write_bytes(test_file, b"\xff\xfe")

        with pytest.raises(UnicodeDecodeError):
            await fs.read_text(test_file)


class TestDirectories:
    """Tests for directory operations."""

    async def test_mkdirs_creates_parents(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test mkdirs creates parent directories."""
        nested = fs.join(test_root, "a", "b", "c")
        await fs.mkdirs(nested)

        assert await fs.is_dir(test_root)
        assert await fs.is_dir(fs.join(test_root, "a", "b"))
        assert await fs.is_dir(nested)

    async def test_mkdirs_is_idempotent(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test mkdirs doesn't raise on existing directory."""
        await fs.mkdirs(test_root)
        await fs.mkdirs(test_root)

    async def test_listdir_returns_children(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test listdir returns immediate children."""
        await fs.mkdirs(fs.join(test_root, "subdir", "deeper"))
        await fs.write_text(fs.join(test_root, "file1.txt"), "content1")
        await fs.write_text(fs.join(test_root, "file2.txt"), "content2")

        assert await fs.listdir(test_root) == ["file1.txt", "file2.txt", "subdir"]

    async def test_listdir_nonexistent_raises_error(
        self, fs: FakeFileSystem, test_root: AbsolutePath
    ):
        """Test listdir on nonexistent directory raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            await fs.listdir(test_root)

    async def test_listdir_on_file_raises_not_a_directory(
        self, fs: FakeFileSystem, test_root: AbsolutePath
    ):
        """Test listdir on a regular file raises NotADirectoryError."""
        test_file = fs.join(test_root, "file.txt")
        fs.write_bytes(test_file, b"x")

        with pytest.raises(NotADirectoryError):
            await fs.listdir(test_file)


class TestRemoval:
    """Tests for file removal."""

    async def test_remove_deletes_file(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test remove deletes files."""
        test_file = fs.join(test_root, "test.txt")
        fs.write_bytes(test_file, b"content")

        await fs.remove(test_file)
        assert not await fs.exists(test_file)

    async def test_remove_nonexistent_raises_error(
        self, fs: FakeFileSystem, test_root: AbsolutePath
    ):
        """Test remove on nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            await fs.remove(fs.join(test_root, "nonexistent.txt"))


class TestFailureInjection:
    """Tests for fail_on()."""

    async def test_injected_error_is_raised(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test an injected error replaces the normal outcome."""
        test_file = fs.join(test_root, "test.txt")
        fs.write_bytes(test_file, b"content")
        fs.fail_on("read", test_file, PermissionError("denied"))

        with pytest.raises(PermissionError):
            await fs.read_text(test_file)

        # Other operations are unaffected
        await fs.remove(test_file)


class TestInspectionHelpers:
    """Tests for exists()/is_dir()/files used by test assertions."""

    async def test_exists_and_is_dir(self, fs: FakeFileSystem, test_root: AbsolutePath):
        """Test files and directories are told apart."""
        test_file = fs.join(test_root, "sub", "file.txt")
        fs.write_bytes(test_file, b"x")

        assert await fs.exists(test_file)
        assert not await fs.is_dir(test_file)
        assert await fs.is_dir(fs.join(test_root, "sub"))
        assert not await fs.exists(fs.join(test_root, "other"))
        assert fs.files == ["/test/sub/file.txt"]
