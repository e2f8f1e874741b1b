"""Windows printing backend using win32print and ShellExecute."""

import logging
import time
from pathlib import Path

from printbridge.printing.base import DEFAULT_JOB_TITLE, PrinterError
from printbridge.registry import Printer

logger = logging.getLogger(__name__)

# Try to import win32 modules
try:
    import pywintypes
    import win32api
    import win32print

    WIN32_AVAILABLE = True
except ImportError:
    WIN32_AVAILABLE = False
    logger.debug("pywin32 not available - Windows printing disabled")


class Win32Printer:
    """Windows printing backend using win32print API."""

    def __init__(self, spool_delay: float = 2.0):
        """Initialize Windows printer.

        Args:
            spool_delay: Seconds to wait after ShellExecute so the handler
                can read the file before the caller removes it.
        """
        self.spool_delay = spool_delay

    @property
    def is_available(self) -> bool:
        """Check if Windows printing is available.

        Returns:
            bool: True if win32print is importable.
        """
        return WIN32_AVAILABLE

    def get_printers(self) -> list[Printer]:
        """Get list of available printers.

        Returns:
            list[Printer]: Local and connected printers.

        Raises:
            PrinterError: If pywin32 is missing or enumeration fails.
        """
        if not WIN32_AVAILABLE:
            raise PrinterError("pywin32 is not installed")

        default = self.get_default_printer()
        try:
            # Reason: Flag 2 = PRINTER_ENUM_LOCAL, Flag 4 = PRINTER_ENUM_CONNECTIONS
            printers = win32print.EnumPrinters(
                win32print.PRINTER_ENUM_LOCAL | win32print.PRINTER_ENUM_CONNECTIONS
            )
        except pywintypes.error as e:
            raise PrinterError(f"Error enumerating printers: {e}") from e

        return [
            Printer(
                name=name,
                display_name=name,
                description=comment or "",
                status=self.get_printer_status(name),
                is_default=name == default,
            )
            for _flags, _description, name, comment in printers
        ]

    def get_default_printer(self) -> str | None:
        """Get the default printer name.

        Returns:
            str | None: Default printer name or None.
        """
        if not WIN32_AVAILABLE:
            return None

        try:
            return win32print.GetDefaultPrinter()
        except pywintypes.error as e:
            logger.error(f"Error getting default printer: {e}")
            return None

    def get_printer_status(self, printer_name: str) -> str:
        """Get status of a specific printer.

        Args:
            printer_name: Printer name.

        Returns:
            str: Status string ('ready', 'offline', 'busy', 'unknown').
        """
        try:
            handle = win32print.OpenPrinter(printer_name)
            try:
                info = win32print.GetPrinter(handle, 2)
                status = info["Status"]
                if status == 0:
                    return "ready"
                # Reason: Common win32print status bits
                elif status & 0x00000080:  # PRINTER_STATUS_OFFLINE
                    return "offline"
                elif status & 0x00000400:  # PRINTER_STATUS_PRINTING
                    return "busy"
                return "unknown"
            finally:
                win32print.ClosePrinter(handle)
        except pywintypes.error as e:
            logger.error(f"Error getting printer status: {e}")
            return "unknown"

    def print_file(
        self,
        file_path: Path,
        printer_name: str,
        copies: int | None = None,
        title: str = DEFAULT_JOB_TITLE,
    ) -> None:
        """Print a document using ShellExecute.

        Delegates to the system's default handler for the file type
        (e.g. SumatraPDF, Adobe Reader). Each copy is a separate job.

        Args:
            file_path: Document on disk.
            printer_name: Target printer.
            copies: Number of copies (None = one job).
            title: Print job title (informational on Windows).

        Raises:
            PrinterError: If printing fails.
        """
        if not WIN32_AVAILABLE:
            raise PrinterError("pywin32 is not installed")

        try:
            for _ in range(copies or 1):
                win32api.ShellExecute(
                    0,
                    "printto",
                    str(file_path),
                    f'"{printer_name}"',
                    ".",
                    0,  # SW_HIDE
                )
        except pywintypes.error as e:
            raise PrinterError(f"Windows print failed: {e.strerror}") from e

        logger.info(f"Print job '{title}' submitted to {printer_name} ({copies or 1} copies)")
        # Reason: ShellExecute returns before the handler has opened the file
        time.sleep(self.spool_delay)
