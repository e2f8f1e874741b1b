"""Tests for the document fetcher."""

import httpx
import pytest

from printbridge.exceptions import DownloadError
from printbridge.fetcher import DOCUMENT_NAME, TEMP_PREFIX, DocumentFetcher, DownloadTask

PDF = b"%PDF-1.4 gang sheet"


def _fetcher(handler) -> DocumentFetcher:
    return DocumentFetcher(timeout=5.0, transport=httpx.MockTransport(handler))


class TestFetch:
    """Tests for DocumentFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_fetch_writes_body_to_temp_dir(self, temp_root):
        """Should save the body in a fresh prefixed directory."""
        fetcher = _fetcher(lambda request: httpx.Response(200, content=PDF))

        task = await fetcher.fetch("https://example.com/a.pdf")

        assert task.file_path.read_bytes() == PDF
        assert task.file_path.name == DOCUMENT_NAME
        assert task.directory.parent == temp_root
        assert task.directory.name.startswith(TEMP_PREFIX)
        task.cleanup()

    @pytest.mark.asyncio
    async def test_each_fetch_gets_its_own_directory(self, temp_root):
        fetcher = _fetcher(lambda request: httpx.Response(200, content=PDF))

        first = await fetcher.fetch("https://example.com/a.pdf")
        second = await fetcher.fetch("https://example.com/a.pdf")

        assert first.directory != second.directory
        first.cleanup()
        second.cleanup()

    @pytest.mark.asyncio
    async def test_follows_redirects(self, temp_root):
        def handler(request):
            if request.url.path == "/old.pdf":
                return httpx.Response(302, headers={"location": "https://example.com/new.pdf"})
            return httpx.Response(200, content=PDF)

        task = await _fetcher(handler).fetch("https://example.com/old.pdf")

        assert task.file_path.read_bytes() == PDF
        task.cleanup()

    @pytest.mark.asyncio
    async def test_http_error_status(self, temp_root):
        """Should raise DownloadError and leave nothing behind on non-2xx."""
        fetcher = _fetcher(lambda request: httpx.Response(404, content=b"missing"))

        with pytest.raises(DownloadError, match="HTTP 404"):
            await fetcher.fetch("https://example.com/a.pdf")

        assert list(temp_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_empty_body(self, temp_root):
        fetcher = _fetcher(lambda request: httpx.Response(200, content=b""))

        with pytest.raises(DownloadError, match="empty"):
            await fetcher.fetch("https://example.com/a.pdf")

        assert list(temp_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_network_error(self, temp_root):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DownloadError, match="Download failed"):
            await _fetcher(handler).fetch("https://example.com/a.pdf")

        assert list(temp_root.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unparsable_url(self, temp_root):
        fetcher = _fetcher(lambda request: httpx.Response(200, content=PDF))

        with pytest.raises(DownloadError, match="Download failed"):
            await fetcher.fetch("http://[::1/a.pdf")

        assert list(temp_root.iterdir()) == []


class TestDownloadTask:
    """Tests for DownloadTask.cleanup."""

    def test_cleanup_removes_directory(self, tmp_path):
        directory = tmp_path / "printer-ws-abc"
        directory.mkdir()
        (directory / DOCUMENT_NAME).write_bytes(PDF)
        task = DownloadTask(file_path=directory / DOCUMENT_NAME, directory=directory)

        task.cleanup()

        assert not directory.exists()

    def test_cleanup_tolerates_missing_directory(self, tmp_path):
        directory = tmp_path / "printer-ws-gone"
        task = DownloadTask(file_path=directory / DOCUMENT_NAME, directory=directory)

        task.cleanup()
        task.cleanup()

        assert not directory.exists()

    def test_cleanup_logs_locked_file(self, tmp_path, monkeypatch, caplog):
        directory = tmp_path / "printer-ws-locked"
        directory.mkdir()
        task = DownloadTask(file_path=directory / DOCUMENT_NAME, directory=directory)

        def locked(path, *args, **kwargs):
            raise PermissionError(13, "file in use", str(path))

        monkeypatch.setattr("printbridge.fetcher.shutil.rmtree", locked)

        task.cleanup()

        assert directory.exists()
        assert "Could not remove temporary directory" in caplog.text
