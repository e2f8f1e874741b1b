"""System tray icon and menu using pystray."""

import asyncio
import logging
from collections.abc import Callable

from printbridge.config import APP_NAME
from printbridge.context import BridgeContext
from printbridge.registry import RegistryChange

logger = logging.getLogger(__name__)


def _create_icon_image(listening: bool = False):
    """Create a simple tray icon image.

    Args:
        listening: If True, use green color; otherwise gray.

    Returns:
        PIL.Image: 64x64 icon image.
    """
    from PIL import Image, ImageDraw

    size = 64
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)

    # Draw a filled circle as the icon
    color = (34, 197, 94, 255) if listening else (156, 163, 175, 255)
    margin = 4
    draw.ellipse([margin, margin, size - margin, size - margin], fill=color)

    # Draw a "P" in white in the center
    try:
        from PIL import ImageFont

        font = ImageFont.truetype("DejaVuSans-Bold.ttf", 32)
    except OSError:
        font = ImageFont.load_default()

    bbox = draw.textbbox((0, 0), "P", font=font)
    text_w = bbox[2] - bbox[0]
    text_h = bbox[3] - bbox[1]
    text_x = (size - text_w) // 2
    text_y = (size - text_h) // 2 - 2
    draw.text((text_x, text_y), "P", fill=(255, 255, 255, 255), font=font)

    return img


class TrayApp:
    """System tray application for the print bridge.

    Shows the selected printer and server status, lets the user pick a
    printer or refresh the list, and displays notifications. Menu callbacks
    run on the pystray thread and hand registry work to the server loop.
    """

    def __init__(self, on_quit: Callable[[], None] | None = None):
        """Initialize tray app.

        Args:
            on_quit: Callback to stop the server before the tray exits.
        """
        self.on_quit = on_quit
        self.context: BridgeContext | None = None
        self._icon = None

    def attach(self, context: BridgeContext) -> None:
        """Follow registry and server changes of ``context``."""
        self.context = context
        context.registry.add_listener(self._on_registry_change)
        context.server.add_listener(self._on_server_status)

    def notify(self, message: str) -> None:
        """Show a desktop notification (Notifier interface)."""
        if self._icon:
            self._icon.notify(message, APP_NAME)

    def _on_registry_change(self, change: RegistryChange) -> None:
        if change.kind == "selection" and not change.silent:
            label = self.context.registry.display_name_of(change.selected_printer)
            self.notify(f"Selected printer: {label}")
        self._refresh_menu()

    def _on_server_status(self, status: str) -> None:
        if self._icon:
            self._icon.icon = _create_icon_image(status == "Listening")
        self._refresh_menu()

    def _refresh_menu(self) -> None:
        if self._icon:
            self._icon.menu = self._build_menu()
            self._icon.update_menu()

    def _build_menu(self):
        """Build the system tray menu.

        Returns:
            pystray.Menu: The tray menu.
        """
        import pystray

        registry = self.context.registry
        server = self.context.server

        printers = registry.list()
        if printers:
            printer_items = [
                pystray.MenuItem(
                    printer.label,
                    self._make_select_action(printer.name),
                    checked=lambda _item, name=printer.name: registry.selected_printer == name,
                    radio=True,
                )
                for printer in printers
            ]
        else:
            printer_items = [pystray.MenuItem("No printers detected", None, enabled=False)]

        return pystray.Menu(
            pystray.MenuItem(
                f"Printer: {registry.display_name_of(registry.selected_printer)}",
                None,
                enabled=False,
            ),
            pystray.MenuItem("Choose Printer", pystray.Menu(*printer_items)),
            pystray.MenuItem("Refresh Printers", self._on_refresh),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem(f"Server: {server.status}", None, enabled=False),
            pystray.MenuItem(f"Port: {server.port}", None, enabled=False),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Quit", self._on_quit),
        )

    def run(self):
        """Run the system tray icon (blocks on main thread).

        Must be called from the main thread on macOS.
        """
        import pystray

        self._icon = pystray.Icon(
            "printbridge",
            _create_icon_image(self.context.server.status == "Listening"),
            APP_NAME,
            menu=self._build_menu(),
        )

        self._icon.run()

    def stop(self):
        """Stop the system tray icon."""
        if self._icon:
            self._icon.stop()

    def _make_select_action(self, name: str):
        def _select(icon=None, item=None):
            loop = self.context.loop
            if loop is None:
                logger.warning("Server not started yet, ignoring printer selection")
                return
            loop.call_soon_threadsafe(self.context.registry.select, name, True)

        return _select

    def _on_refresh(self, icon=None, item=None):
        """Handle 'Refresh Printers' menu click."""
        loop = self.context.loop
        if loop is None:
            logger.warning("Server not started yet, ignoring refresh")
            return
        asyncio.run_coroutine_threadsafe(self.context.discovery.refresh(), loop)

    def _on_quit(self, icon=None, item=None):
        """Handle 'Quit' menu click."""
        if self.on_quit:
            self.on_quit()
        self.stop()
