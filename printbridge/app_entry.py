"""GUI entry point for the print bridge desktop application.

Launches the system tray icon with the HTTP server running in a background
thread.
"""

import logging
import threading

import uvicorn

from printbridge import __version__
from printbridge.api import create_app
from printbridge.cli import setup_logging
from printbridge.config import BridgeSettings, get_settings
from printbridge.context import build_context
from printbridge.gui.tray import TrayApp

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the print bridge GUI application.

    Flow:
    1. Read environment settings and the persisted settings file
    2. Build the core components with the tray as notification sink
    3. Start the HTTP server in a background thread
    4. Run tray icon on main thread (required by macOS)
    """
    server_settings = get_settings()
    setup_logging(server_settings.log_level)
    logger.info(f"Printer bridge GUI v{__version__} starting")

    settings = BridgeSettings.load(server_settings.settings_file)

    server: uvicorn.Server | None = None

    def quit_app():
        if server is not None:
            server.should_exit = True

    tray = TrayApp(on_quit=quit_app)
    context = build_context(server_settings, settings, notifier=tray)
    tray.attach(context)

    app = create_app(context, server_settings.cors_origins)
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=context.server.host,
            port=context.server.port,
            log_config=None,
        )
    )

    def _serve():
        try:
            server.run()
        except (SystemExit, OSError) as e:
            # uvicorn exits with SystemExit when it cannot bind
            logger.error(f"Server stopped: {e!r}")
            context.server.set_status("Error")
            tray.notify("Unable to start local server. See logs.")

    server_thread = threading.Thread(target=_serve, daemon=True, name="printbridge-server")
    server_thread.start()

    # Run tray on main thread (blocks until quit)
    logger.info("Starting system tray")
    tray.run()

    server.should_exit = True
    server_thread.join(timeout=5)
    logger.info("Printer bridge GUI exiting")


if __name__ == "__main__":
    main()
