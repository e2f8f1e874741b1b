"""Cross-platform printing abstraction.

Provides a unified printer interface across Linux/macOS (CUPS) and Windows (win32print).
Use get_printer() factory to get the appropriate backend for the current platform.
"""

import logging
import platform

from printbridge.printing.base import PrinterBackend, PrinterError

logger = logging.getLogger(__name__)


def get_printer(timeout: float = 30.0) -> PrinterBackend:
    """Factory function that returns the appropriate printer backend.

    Args:
        timeout: Seconds allowed for print commands that shell out.

    Returns:
        PrinterBackend: Platform-specific printer instance.
    """
    system = platform.system()

    if system == "Windows":
        from printbridge.printing.win32_printer import Win32Printer

        return Win32Printer()
    else:
        # Linux and macOS both use CUPS
        from printbridge.printing.cups_printer import CupsPrinter

        return CupsPrinter(timeout=timeout)


__all__ = [
    "PrinterBackend",
    "PrinterError",
    "get_printer",
]
