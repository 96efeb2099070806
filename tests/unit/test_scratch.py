"""
Unit tests for the ephemeral scratch area
"""
import pytest

from helm_update_manager.core.scratch import ScratchArea
from helm_update_manager.errors import FetchError, ScratchUnavailable


class TestScratchArea:
    """Tests for scoped acquisition and file placement"""

    def test_directory_removed_on_exit(self):
        """The scratch directory disappears when the block ends"""
        with ScratchArea.acquire() as area:
            root = area.root
            area.put([b"data"])
            assert root.is_dir()
        assert not root.exists()

    def test_directory_removed_on_error(self):
        """The scratch directory disappears even when the block raises"""
        with pytest.raises(RuntimeError):
            with ScratchArea.acquire() as area:
                root = area.root
                raise RuntimeError("boom")
        assert not root.exists()

    def test_put_writes_chunks(self, scratch):
        """All chunks end up in the file, in order"""
        path = scratch.put([b"hello ", b"world"])
        assert path.read_bytes() == b"hello world"
        assert path.parent == scratch.root

    def test_put_uses_fresh_names(self, scratch):
        """Every put gets its own long random name"""
        first = scratch.put([b"a"])
        second = scratch.put([b"a"])
        assert first != second
        assert len(first.name) == 32

    def test_mkdir(self, scratch):
        """mkdir creates a new empty directory inside the area"""
        path = scratch.mkdir()
        assert path.is_dir()
        assert list(path.iterdir()) == []

    def test_acquire_in_missing_parent(self, tmp_path):
        """An unusable parent directory is fatal"""
        with pytest.raises(ScratchUnavailable):
            with ScratchArea.acquire(tmp_path / "missing" / "dir"):
                pass

    def test_download_propagates_fetch_error(self, scratch, fetcher):
        """Fetch failures are not swallowed"""
        with pytest.raises(FetchError):
            scratch.download("https://nowhere.example.com/x", fetcher)
        assert fetcher.requested == ["https://nowhere.example.com/x"]

    def test_download(self, scratch, fetcher):
        """download stores the fetched body"""
        fetcher.add("https://example.com/a", b"0123456789")
        path = scratch.download("https://example.com/a", fetcher)
        assert path.read_bytes() == b"0123456789"
