"""Wiring of the core components into one owned object."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from printbridge.config import BridgeSettings, ServerSettings
from printbridge.discovery import DiscoveryGateway
from printbridge.dispatcher import PrintDispatcher
from printbridge.fetcher import DocumentFetcher
from printbridge.notifications import LogNotifier, Notifier
from printbridge.printing import PrinterBackend, get_printer
from printbridge.registry import PrinterRegistry

logger = logging.getLogger(__name__)


@dataclass
class ServerState:
    """Bind address and lifecycle status of the HTTP server.

    Attributes:
        host: Interface the server binds to.
        port: Port the server listens on.
        status: 'Starting', 'Listening', 'Stopped' or 'Error'.
    """

    host: str
    port: int
    status: str = "Starting"
    _listeners: list[Callable[[str], None]] = field(default_factory=list, repr=False)

    def add_listener(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def set_status(self, status: str) -> None:
        self.status = status
        logger.info(f"Server status: {status}")
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                logger.exception("Server status listener failed")

    def to_dict(self) -> dict:
        return {"host": self.host, "port": self.port, "status": self.status}


@dataclass
class BridgeContext:
    """Everything the HTTP handlers and the tray operate on.

    Attributes:
        registry: Printer registry.
        discovery: Discovery gateway.
        dispatcher: Print dispatcher.
        server: Server bind address and status.
        loop: Event loop serving requests, set at startup. Other threads
            must hand registry work to this loop.
    """

    registry: PrinterRegistry
    discovery: DiscoveryGateway
    dispatcher: PrintDispatcher
    server: ServerState
    loop: asyncio.AbstractEventLoop | None = None


def build_context(
    server_settings: ServerSettings,
    settings: BridgeSettings,
    backend: PrinterBackend | None = None,
    notifier: Notifier | None = None,
    fetcher: DocumentFetcher | None = None,
) -> BridgeContext:
    """Create the registry, gateway and dispatcher sharing one backend.

    Args:
        server_settings: Process settings.
        settings: Persisted user settings.
        backend: Printer backend (default: platform backend).
        notifier: Notification sink (default: log only).
        fetcher: Document fetcher (default: httpx with configured timeout).

    Returns:
        BridgeContext: Wired components.
    """
    backend = backend or get_printer(timeout=server_settings.print_timeout)
    notifier = notifier or LogNotifier()
    fetcher = fetcher or DocumentFetcher(timeout=server_settings.download_timeout)

    registry = PrinterRegistry(settings)
    discovery = DiscoveryGateway(registry, backend, notifier)
    dispatcher = PrintDispatcher(registry, discovery, fetcher, backend, notifier)
    port = settings.effective_port(server_settings.port)
    # The resolved port is what gets written back on the next save
    settings.server_port = port
    server = ServerState(host=server_settings.host, port=port)
    return BridgeContext(
        registry=registry,
        discovery=discovery,
        dispatcher=dispatcher,
        server=server,
    )
