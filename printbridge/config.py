"""Configuration management for the print bridge.

Two layers:
    ServerSettings: process settings from environment variables
        (``PRINTER_BRIDGE_*``), read once at startup.
    BridgeSettings: user settings persisted as JSON (selected printer and
        server port), rewritten on every selection change.
"""

import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from printbridge.exceptions import PersistenceError

logger = logging.getLogger(__name__)

APP_NAME = "DTF Gangsheet Printer Bridge"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3321

# Default settings location
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "printbridge"
DEFAULT_SETTINGS_FILE = DEFAULT_CONFIG_DIR / "printer-bridge-settings.json"


class ServerSettings(BaseSettings):
    """Process settings loaded from environment variables.

    Attributes:
        host: Interface the HTTP server binds to.
        port: Port used when the persisted settings do not provide one.
        settings_file: Location of the persisted settings JSON.
        download_timeout: Seconds allowed for fetching a document.
        print_timeout: Seconds allowed for a print command to return.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        cors_origins: Origins allowed to call the API from a browser.
    """

    model_config = SettingsConfigDict(
        env_prefix="PRINTER_BRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    settings_file: Path = DEFAULT_SETTINGS_FILE
    download_timeout: float = 60.0
    print_timeout: float = 30.0
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]


@lru_cache
def get_settings() -> ServerSettings:
    """Get cached process settings.

    Returns:
        ServerSettings: Settings read from the environment.
    """
    return ServerSettings()


def _valid_port(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value < 65536


@dataclass
class BridgeSettings:
    """User settings persisted between runs.

    Stored as ``{"selectedPrinter": str | null, "serverPort": int}``.

    Attributes:
        selected_printer: Name of the printer used when a job names none.
        server_port: Port the HTTP server listens on (None = use env/default;
            saved as the default port).
        path: File the settings are written to.
    """

    selected_printer: str | None = None
    server_port: int | None = None
    path: Path = field(default=DEFAULT_SETTINGS_FILE, repr=False)

    def to_dict(self) -> dict:
        return {
            "selectedPrinter": self.selected_printer,
            "serverPort": self.effective_port(),
        }

    def save(self) -> None:
        """Write settings to ``self.path``.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as e:
            raise PersistenceError(f"Failed to write settings to {self.path}: {e}") from e

    def effective_port(self, default: int = DEFAULT_PORT) -> int:
        """Persisted port if set, otherwise the environment/default port."""
        return self.server_port if _valid_port(self.server_port) else default

    @classmethod
    def load(cls, path: Path | None = None) -> "BridgeSettings":
        """Load settings from file, merged over defaults.

        Unreadable files and fields of the wrong type fall back to defaults.

        Args:
            path: Settings file (default: ~/.config/printbridge/...).

        Returns:
            BridgeSettings: Loaded settings.
        """
        path = path or DEFAULT_SETTINGS_FILE
        settings = cls(path=path)

        if not path.exists():
            return settings

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read settings: {e}")
            return settings

        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {path}: expected a JSON object")
            return settings

        selected = data.get("selectedPrinter")
        if isinstance(selected, str) and selected:
            settings.selected_printer = selected

        port = data.get("serverPort")
        if _valid_port(port):
            settings.server_port = port
        elif port is not None:
            logger.warning(f"Ignoring invalid serverPort in settings: {port!r}")

        return settings
