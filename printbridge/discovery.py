"""Printer discovery: query the OS and refresh the registry."""

import asyncio
import logging

from printbridge.notifications import Notifier, send_notification
from printbridge.printing import PrinterBackend, PrinterError
from printbridge.registry import Printer, PrinterRegistry

logger = logging.getLogger(__name__)


class DiscoveryGateway:
    """Refreshes the registry from the OS printer list.

    Overlapping refreshes are allowed; the last one to finish wins.
    """

    def __init__(
        self,
        registry: PrinterRegistry,
        backend: PrinterBackend,
        notifier: Notifier | None = None,
    ):
        self.registry = registry
        self.backend = backend
        self.notifier = notifier

    async def refresh(self) -> list[Printer]:
        """Enumerate printers and replace the registry list.

        On failure the existing list is kept.

        Returns:
            list[Printer]: Registry snapshot after the refresh.
        """
        try:
            printers = await asyncio.to_thread(self.backend.get_printers)
        except PrinterError as e:
            logger.error(f"Failed to fetch printers: {e}")
        except Exception as e:
            logger.exception(f"Unexpected error while fetching printers: {e}")
        else:
            self.registry.replace(printers)
            logger.info(f"Discovered {len(printers)} printer(s)")
            send_notification(self.notifier, "Refreshed printers")
        return self.registry.list()
