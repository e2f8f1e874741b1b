"""Print dispatch pipeline.

validate -> resolve printer -> ensure available -> fetch -> print -> cleanup
"""

import asyncio
import logging
import math
import re
from dataclasses import dataclass

from printbridge.discovery import DiscoveryGateway
from printbridge.exceptions import (
    BridgeError,
    DownloadError,
    NotFoundError,
    PrintError,
    ValidationError,
)
from printbridge.fetcher import DocumentFetcher
from printbridge.notifications import Notifier, send_notification
from printbridge.printing import PrinterBackend, PrinterError
from printbridge.registry import PrinterRegistry

logger = logging.getLogger(__name__)

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class PrintResult:
    """Outcome of one submission.

    Attributes:
        printer: Printer the job was sent to.
        error: DownloadError or PrintError when the pipeline failed.
    """

    printer: str
    error: BridgeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def normalize_copies(value) -> int | None:
    """Parse a copies value leniently.

    Integers, floats (truncated) and strings with a leading integer are
    accepted; anything non-positive or unparsable becomes None so the
    printer default applies.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        parsed = int(value)
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return None
        parsed = int(match.group(1))
    else:
        return None
    return parsed if parsed > 0 else None


class PrintDispatcher:
    """Runs a print request through the download-then-print pipeline."""

    def __init__(
        self,
        registry: PrinterRegistry,
        discovery: DiscoveryGateway,
        fetcher: DocumentFetcher,
        backend: PrinterBackend,
        notifier: Notifier | None = None,
    ):
        self.registry = registry
        self.discovery = discovery
        self.fetcher = fetcher
        self.backend = backend
        self.notifier = notifier

    def resolve_printer(self, printer_name: str | None = None) -> str:
        """Explicit printer name first, then the selected printer.

        Raises:
            ValidationError: If neither is set.
        """
        target = (printer_name or self.registry.selected_printer or "").strip()
        if not target:
            raise ValidationError("No printer selected.")
        return target

    async def ensure_available(self, printer_name: str) -> bool:
        """Check the cached list, refreshing once if the printer is missing."""
        if printer_name in self.registry:
            return True
        logger.info(f"Printer {printer_name} not in cached list, refreshing")
        await self.discovery.refresh()
        return printer_name in self.registry

    async def submit(
        self,
        url: str,
        printer_name: str | None = None,
        copies=None,
    ) -> PrintResult:
        """Download ``url`` and print it.

        Args:
            url: http(s) URL of the document.
            printer_name: Target printer (None = selected printer).
            copies: Requested copies; invalid values are ignored.

        Returns:
            PrintResult: Success, or the DownloadError/PrintError that stopped it.

        Raises:
            ValidationError: Bad URL or no printer to print to.
            NotFoundError: Printer unknown even after a refresh.
        """
        url = (url or "").strip()
        if not _HTTP_URL.match(url):
            raise ValidationError("Only http/https URLs are supported.")

        target = self.resolve_printer(printer_name)
        if not await self.ensure_available(target):
            raise NotFoundError("Selected printer is not available.")

        parsed_copies = normalize_copies(copies)

        try:
            task = await self.fetcher.fetch(url)
        except DownloadError as e:
            return self._failed(target, e)

        try:
            await asyncio.to_thread(
                self.backend.print_file, task.file_path, target, parsed_copies
            )
        except PrinterError as e:
            return self._failed(target, PrintError(str(e)))
        except Exception as e:
            logger.exception(f"Unexpected error printing to {target}")
            return self._failed(target, PrintError(str(e) or type(e).__name__))
        finally:
            task.cleanup()

        logger.info(f"Sent {url} to {target} (copies={parsed_copies or 'default'})")
        send_notification(
            self.notifier, f"Sent document to {self.registry.display_name_of(target)}"
        )
        return PrintResult(printer=target)

    def _failed(self, printer: str, error: BridgeError) -> PrintResult:
        logger.error(f"Print job failed: {error.message}")
        send_notification(self.notifier, f"Print failed: {error.message}")
        return PrintResult(printer=printer, error=error)
