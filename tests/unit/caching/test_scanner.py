"""Tests for full-tree scans (get_all) and sweeps."""

import pytest

from tests.conftest import FakeClock
from treecache.core.caching import FSCache, make_sharded_mapper, padded_path
from treecache.core.io import FakeFileSystem, absolute_path


class TestGetAll:
    """Tests for reconstructing the key space from the tree."""

    async def test_empty_when_root_missing(self, cache: FSCache):
        """Test scanning a cache that was never written is empty."""
        assert await cache.get_all() == {}

    async def test_empty_root_directory(self, cache: FSCache):
        """Test an initialized but empty root is empty."""
        await cache.initialize()

        assert await cache.get_all() == {}

    async def test_returns_every_entry_at_any_depth(self, cache: FSCache):
        """Test keys of varying length (and so depth) are all found."""
        items = {"a": 1, "ab": 2, "abc": 3, "abcdefghij": 4, "zz-top": {"x": [1]}}
        await cache.mset(items)

        assert await cache.get_all() == items

    async def test_independent_of_layout(self, fs: FakeFileSystem, clock: FakeClock):
        """Test the same keys are found under different mappers."""
        items = {"k": 1, "key": 2, "longer-key": 3}
        for mapper in (padded_path, make_sharded_mapper(width=1)):
            cache = FSCache(fs, absolute_path(f"/{id(mapper)}"), mapper=mapper, clock=clock)
            await cache.mset(items)

            assert await cache.get_all() == items

    async def test_skips_expired_entries(self, cache: FSCache, clock: FakeClock):
        """Test expired entries are omitted."""
        await cache.set("short", 1, ttl_seconds=1)
        await cache.set("forever", 2)
        clock.advance(2)

        assert await cache.get_all() == {"forever": 2}

    async def test_skips_corrupt_and_misplaced_leaves(self, cache: FSCache, fs: FakeFileSystem):
        """Test bad leaves are skipped without aborting the scan."""
        await cache.mset({"abcdef": 1, "uvwxyz": 2})
        fs.write_bytes("/.cache/ab/cd/abcdzz.json", b"garbage")
        fs.write_bytes("/.cache/uv/stray.json", b'{"key": "abcdef", "expiresAt": 0, "value": 9}')

        assert await cache.get_all() == {"abcdef": 1, "uvwxyz": 2}
        # Lenient: scans do not delete
        assert await fs.exists(absolute_path("/.cache/ab/cd/abcdzz.json"))

    async def test_skips_unreadable_leaf(self, cache: FSCache, fs: FakeFileSystem):
        """Test a leaf read error skips that leaf only."""
        await cache.mset({"abcdef": 1, "uvwxyz": 2})
        fs.fail_on("read", cache.path_for("abcdef"), PermissionError("denied"))

        assert await cache.get_all() == {"uvwxyz": 2}

    async def test_skips_temp_files(self, cache: FSCache, fs: FakeFileSystem):
        """Test in-flight temp files from atomic writes are ignored."""
        await cache.set("abcdef", 1)
        fs.write_bytes("/.cache/ab/cd/.tmp-x1y2.part", b'{"key": "abcdef"')

        assert await cache.get_all() == {"abcdef": 1}
        assert cache.stats.corrupt == 0

    async def test_directory_error_aborts_scan(self, cache: FSCache, fs: FakeFileSystem):
        """Test a directory that fails to list aborts the whole walk."""
        await cache.mset({"abcdef": 1, "uvwxyz": 2})
        fs.fail_on("listdir", "/.cache/uv", PermissionError("denied"))

        with pytest.raises(PermissionError):
            await cache.get_all()


class TestSweep:
    """Tests for removing expired and corrupt files."""

    async def test_removes_expired_and_corrupt(
        self, cache: FSCache, fs: FakeFileSystem, clock: FakeClock
    ):
        """Test sweep deletes bad files and keeps live ones."""
        await cache.set("live", 1)
        await cache.set("stale", 2, ttl_seconds=1)
        fs.write_bytes("/.cache/ab/abc.json", b"garbage")
        clock.advance(5)

        report = await cache.sweep()

        assert report.removed_expired == [str(cache.path_for("stale"))]
        assert report.removed_corrupt == ["/.cache/ab/abc.json"]
        assert report.ok
        assert fs.files == [str(cache.path_for("live"))]

    async def test_reports_removal_failures(
        self, cache: FSCache, fs: FakeFileSystem, clock: FakeClock
    ):
        """Test files that cannot be removed are reported by path."""
        await cache.set("stale", 2, ttl_seconds=1)
        path = cache.path_for("stale")
        fs.fail_on("remove", path, PermissionError("denied"))
        clock.advance(5)

        report = await cache.sweep()

        assert not report.ok
        assert list(report.errors) == [str(path)]
        assert report.removed_expired == []

    async def test_sweep_on_missing_root(self, cache: FSCache):
        """Test sweeping an empty cache is a no-op."""
        report = await cache.sweep()

        assert report.removed_expired == []
        assert report.removed_corrupt == []
