"""Abstract printer backend interface."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from printbridge.registry import Printer

DEFAULT_JOB_TITLE = "Gang Sheet"


class PrinterError(Exception):
    """Error during printer enumeration or printing."""

    pass


@runtime_checkable
class PrinterBackend(Protocol):
    """Protocol defining the printer backend interface.

    All platform-specific printer implementations must satisfy this protocol.
    """

    @property
    def is_available(self) -> bool:
        """Check if the printing system is available.

        Returns:
            bool: True if printing is available.
        """
        ...

    def get_printers(self) -> list[Printer]:
        """Enumerate installed printers.

        Returns:
            list[Printer]: Printers known to the OS.

        Raises:
            PrinterError: If the printer list cannot be read.
        """
        ...

    def get_default_printer(self) -> str | None:
        """Get the default printer name.

        Returns:
            str | None: Default printer name or None.
        """
        ...

    def print_file(
        self,
        file_path: Path,
        printer_name: str,
        copies: int | None = None,
        title: str = DEFAULT_JOB_TITLE,
    ) -> None:
        """Submit a document to a printer.

        Args:
            file_path: Document on disk.
            printer_name: Target printer.
            copies: Number of copies (None = printer default).
            title: Print job title.

        Raises:
            PrinterError: If the job cannot be submitted.
        """
        ...
