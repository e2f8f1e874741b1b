"""CUPS printing backend for Linux and macOS."""

import logging
import subprocess
import threading
from pathlib import Path

from printbridge.printing.base import DEFAULT_JOB_TITLE, PrinterError
from printbridge.registry import Printer

logger = logging.getLogger(__name__)

# Try to import cups, but make it optional
try:
    import cups

    CUPS_AVAILABLE = True
except ImportError:
    CUPS_AVAILABLE = False
    logger.warning("pycups not available - using lp command fallback")

# CUPS printer-state values: 3=idle, 4=processing, 5=stopped
_CUPS_STATES = {3: "ready", 4: "busy", 5: "offline"}


class CupsPrinter:
    """Wrapper for CUPS printing operations."""

    def __init__(self, timeout: float = 30.0):
        """Initialize CUPS printer connection.

        Args:
            timeout: Seconds allowed for lp/lpstat commands.
        """
        self.timeout = timeout
        self._connection = None
        # pycups connections must not be used from several threads at once
        self._lock = threading.Lock()

        if CUPS_AVAILABLE:
            try:
                self._connection = cups.Connection()
            except RuntimeError as e:
                logger.error(f"Could not connect to CUPS: {e}")

    @property
    def is_available(self) -> bool:
        """Check if CUPS is available and connected.

        Returns:
            bool: True if CUPS is available.
        """
        return self._connection is not None or self._check_lp_available()

    def _check_lp_available(self) -> bool:
        """Check if lp command is available (fallback).

        Returns:
            bool: True if lp command exists.
        """
        try:
            result = subprocess.run(["which", "lp"], capture_output=True, text=True, timeout=5)
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def get_printers(self) -> list[Printer]:
        """Get list of available printers.

        Returns:
            list[Printer]: Printers known to CUPS.

        Raises:
            PrinterError: If CUPS cannot be queried.
        """
        default = self.get_default_printer()

        if self._connection:
            try:
                with self._lock:
                    printers = self._connection.getPrinters()
            except Exception as e:
                raise PrinterError(f"Error getting printers: {e}") from e
            return [
                Printer(
                    name=name,
                    display_name=info.get("printer-info") or name,
                    description=info.get("printer-make-and-model", ""),
                    status=_CUPS_STATES.get(info.get("printer-state"), "unknown"),
                    is_default=name == default,
                )
                for name, info in printers.items()
            ]

        # Fallback: use lpstat
        try:
            result = subprocess.run(
                ["lpstat", "-p"], capture_output=True, text=True, timeout=self.timeout
            )
        except subprocess.TimeoutExpired as err:
            raise PrinterError("lpstat timed out") from err
        except FileNotFoundError as err:
            raise PrinterError("lpstat command not found - is CUPS installed?") from err

        if result.returncode != 0:
            if "No destinations" in result.stderr:
                return []
            raise PrinterError(f"lpstat failed: {result.stderr.strip()}")

        printers = []
        for line in result.stdout.strip().split("\n"):
            if line.startswith("printer "):
                parts = line.split()
                if len(parts) >= 2:
                    printers.append(
                        Printer(
                            name=parts[1],
                            display_name=parts[1],
                            status=_lpstat_status(line),
                            is_default=parts[1] == default,
                        )
                    )
        return printers

    def get_default_printer(self) -> str | None:
        """Get the default printer name.

        Returns:
            str | None: Default printer name or None.
        """
        if self._connection:
            try:
                with self._lock:
                    return self._connection.getDefault()
            except Exception as e:
                logger.error(f"Error getting default printer: {e}")
                return None

        # Fallback: use lpstat -d
        try:
            result = subprocess.run(["lpstat", "-d"], capture_output=True, text=True, timeout=5)
            if "system default destination:" in result.stdout:
                return result.stdout.split(":")[-1].strip()
            return None
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return None

    def print_file(
        self,
        file_path: Path,
        printer_name: str,
        copies: int | None = None,
        title: str = DEFAULT_JOB_TITLE,
    ) -> None:
        """Print a document file.

        Args:
            file_path: Document on disk.
            printer_name: CUPS destination.
            copies: Number of copies (None = printer default).
            title: Print job title.

        Raises:
            PrinterError: If printing fails.
        """
        if self._connection:
            options = {"copies": str(copies)} if copies else {}
            try:
                with self._lock:
                    job_id = self._connection.printFile(
                        printer_name, str(file_path), title, options
                    )
            except Exception as e:
                raise PrinterError(f"CUPS rejected the job: {e}") from e
            logger.info(f"Print job {job_id} submitted to {printer_name}")
            return

        # Fallback to lp command
        cmd = ["lp", "-d", printer_name, "-t", title]
        if copies:
            cmd.extend(["-n", str(copies)])
        cmd.append(str(file_path))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as err:
            raise PrinterError("Print command timed out") from err
        except FileNotFoundError as err:
            raise PrinterError("lp command not found - is CUPS installed?") from err

        if result.returncode != 0:
            raise PrinterError(f"lp command failed: {result.stderr.strip()}")

        logger.info(f"Print job submitted via lp: {result.stdout.strip()}")


def _lpstat_status(line: str) -> str:
    if "disabled" in line:
        return "offline"
    if "now printing" in line:
        return "busy"
    if "is idle" in line:
        return "ready"
    return "unknown"
