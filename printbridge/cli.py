"""Command-line interface for the print bridge."""

import logging
import sys

import click
import uvicorn

from printbridge import __version__
from printbridge.config import BridgeSettings, get_settings
from printbridge.printing import PrinterError, get_printer


def setup_logging(level: str) -> None:
    """Set up logging configuration.

    Args:
        level: Log level string.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


@click.group()
@click.version_option(version=__version__)
def main():
    """Printer bridge - local print server for the gang-sheet web app.

    The bridge listens on the local machine and prints documents the web
    app sends it by URL.
    """
    pass


@main.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def serve(verbose: bool):
    """Run the HTTP server without the tray icon.

    Press Ctrl+C to stop.
    """
    from printbridge.api import create_app
    from printbridge.context import build_context

    server_settings = get_settings()
    setup_logging("DEBUG" if verbose else server_settings.log_level)

    settings = BridgeSettings.load(server_settings.settings_file)
    context = build_context(server_settings, settings)
    app = create_app(context, server_settings.cors_origins)

    click.echo(
        f"Starting printer bridge on http://{context.server.host}:{context.server.port} "
        "(Ctrl+C to stop)"
    )
    uvicorn.run(app, host=context.server.host, port=context.server.port, log_config=None)


@main.command()
def gui():
    """Launch the bridge with the system tray icon."""
    from printbridge.app_entry import main as gui_main

    gui_main()


@main.command()
def status():
    """Show persisted settings and the address the server binds to."""
    server_settings = get_settings()
    settings = BridgeSettings.load(server_settings.settings_file)

    click.echo("\n=== Printer Bridge Status ===\n")
    click.echo(f"Settings file: {settings.path}")
    click.echo(f"Selected printer: {settings.selected_printer or '(none)'}")
    port = settings.effective_port(server_settings.port)
    click.echo(f"Listen address: {server_settings.host}:{port}")
    click.echo(f"Download timeout: {server_settings.download_timeout}s")


@main.command()
def printers():
    """List available printers."""
    printer = get_printer()

    click.echo("\n=== Available Printers ===\n")

    if not printer.is_available:
        click.echo("No printing system available. Is CUPS installed and running?")
        sys.exit(1)

    try:
        printers_list = printer.get_printers()
    except PrinterError as e:
        click.echo(f"Could not list printers: {e}")
        sys.exit(1)

    if not printers_list:
        click.echo("No printers found.")
        return

    for p in printers_list:
        marker = "* " if p.is_default else "  "
        label = f" ({p.display_name})" if p.display_name and p.display_name != p.name else ""
        click.echo(f"{marker}{p.name}{label} [{p.status}]")

    click.echo("\n(* = default printer)")


if __name__ == "__main__":
    main()
