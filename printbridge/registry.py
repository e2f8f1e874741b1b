"""In-memory registry of known printers and the current selection."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Literal

from printbridge.config import BridgeSettings
from printbridge.exceptions import PersistenceError

logger = logging.getLogger(__name__)

NOT_SELECTED = "Not selected"


@dataclass(frozen=True)
class Printer:
    """Read-only snapshot of an OS printer.

    Attributes:
        name: Stable identifier used in all API calls.
        display_name: Human-readable label (falls back to ``name``).
        description: Informational text from the OS.
        status: Informational status ('ready', 'busy', 'offline', 'unknown').
        is_default: Whether the OS flags this printer as default.
    """

    name: str
    display_name: str = ""
    description: str = ""
    status: str = "unknown"
    is_default: bool = False

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "displayName": self.label,
            "description": self.description,
            "status": self.status,
            "isDefault": self.is_default,
        }


@dataclass(frozen=True)
class RegistryChange:
    """Change event delivered to registry listeners.

    Attributes:
        kind: 'selection' after a selection change, 'printers' after a refresh.
        selected_printer: Selection after the change.
        silent: True when the change should not produce a user notification.
    """

    kind: Literal["selection", "printers"]
    selected_printer: str | None
    silent: bool = False


Listener = Callable[[RegistryChange], None]


class PrinterRegistry:
    """Last-known printer list plus the selected printer name.

    Every mutation is a single synchronous step, so callers running on one
    event loop never observe a half-applied update.
    """

    def __init__(
        self,
        settings: BridgeSettings | None = None,
        printers: Iterable[Printer] = (),
    ):
        """Initialize the registry.

        Args:
            settings: Persisted settings; seeds the selection and receives
                selection writes. None disables persistence.
            printers: Initial printer list.
        """
        self.settings = settings
        self._printers: tuple[Printer, ...] = tuple(printers)
        self._selected: str | None = settings.selected_printer if settings else None
        self._listeners: list[Listener] = []

    @property
    def selected_printer(self) -> str | None:
        return self._selected

    def list(self) -> list[Printer]:
        """Current snapshot. Never triggers discovery."""
        return list(self._printers)

    def get(self, name: str) -> Printer | None:
        """Find a printer by exact name."""
        return next((p for p in self._printers if p.name == name), None)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self._printers)

    def display_name_of(self, name: str | None) -> str:
        """Human-readable label for a printer name.

        Matches on ``name`` or ``display_name`` (first match wins), echoes
        unknown names, and returns 'Not selected' for an empty name.
        """
        if not name:
            return NOT_SELECTED
        for printer in self._printers:
            if name in (printer.name, printer.display_name):
                return printer.label
        return name

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def select(self, name: str | None, persist: bool = True, silent: bool = False) -> bool:
        """Set the selected printer.

        Does not check that ``name`` is in the current list.

        Args:
            name: Printer name.
            persist: Write the selection to the settings file.
            silent: Mark the change event as not user-facing.

        Returns:
            bool: True if the selection changed.
        """
        if not name or name == self._selected:
            return False

        self._selected = name
        logger.info(f"Selected printer: {name}")
        if persist:
            self._persist()
        self._emit(RegistryChange("selection", name, silent))
        return True

    def replace(self, printers: Iterable[Printer]) -> None:
        """Replace the printer list wholesale.

        With nothing selected, the OS default (or the first printer) is
        selected silently and persisted.
        """
        self._printers = tuple(printers)
        if not self._selected and self._printers:
            preferred = next((p for p in self._printers if p.is_default), self._printers[0])
            self.select(preferred.name, persist=True, silent=True)
        self._emit(RegistryChange("printers", self._selected, silent=True))

    def _persist(self) -> None:
        if self.settings is None:
            return
        self.settings.selected_printer = self._selected
        try:
            self.settings.save()
        except PersistenceError as e:
            logger.error(str(e))

    def _emit(self, change: RegistryChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception(f"Registry listener failed on {change.kind} change")
