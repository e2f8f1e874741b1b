"""Download documents into scoped temporary directories."""

import asyncio
import logging
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

import httpx

from printbridge.exceptions import DownloadError

logger = logging.getLogger(__name__)

TEMP_PREFIX = "printer-ws-"
DOCUMENT_NAME = "document.pdf"


@dataclass(frozen=True)
class DownloadTask:
    """A downloaded document and the directory that holds it.

    The owner must call ``cleanup()`` once the document is no longer needed.

    Attributes:
        file_path: Downloaded document.
        directory: Uniquely named temporary directory containing the document.
    """

    file_path: Path
    directory: Path

    def cleanup(self) -> None:
        """Remove the temporary directory.

        A missing directory is fine. Other failures (a file still held open by
        the print handler) are logged and the directory is left behind.
        """
        try:
            shutil.rmtree(self.directory)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary directory {self.directory}: {e}")


class DocumentFetcher:
    """Fetch documents over HTTP(S) with httpx."""

    def __init__(
        self,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            timeout: Seconds allowed for each phase of the request (connect,
                read, write, pool), not for the download as a whole.
            transport: Optional httpx transport (used by tests).
        """
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, url: str) -> DownloadTask:
        """Download ``url`` into a fresh temporary directory.

        Args:
            url: Document URL.

        Returns:
            DownloadTask: Handle to the downloaded file.

        Raises:
            DownloadError: On network errors, non-2xx responses or an empty body.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self.transport
            ) as client:
                response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Download error for {url}: {e}")
            raise DownloadError(f"Download failed: {e}") from e

        if not response.is_success:
            raise DownloadError(f"Download failed: HTTP {response.status_code}")

        content = response.content
        if not content:
            raise DownloadError("Downloaded file is empty.")

        directory = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        task = DownloadTask(file_path=directory / DOCUMENT_NAME, directory=directory)
        try:
            await asyncio.to_thread(task.file_path.write_bytes, content)
        except OSError as e:
            task.cleanup()
            raise DownloadError(f"Could not save downloaded file: {e}") from e

        logger.info(f"Downloaded {len(content)} bytes from {url} to {task.file_path}")
        return task
