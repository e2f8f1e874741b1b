"""Bridge API routes."""

import logging

from fastapi import APIRouter

from printbridge import __version__
from printbridge.api.dependencies import Context
from printbridge.api.schemas import (
    ErrorResponse,
    PrinterSchema,
    PrintersResponse,
    PrintRequest,
    PrintResponse,
    SelectPrinterRequest,
    SelectPrinterResponse,
    ServerInfo,
    StatusResponse,
)
from printbridge.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _printers(context) -> list[PrinterSchema]:
    return [PrinterSchema.from_printer(p) for p in context.registry.list()]


@router.get("/status", response_model=StatusResponse)
async def get_status(context: Context):
    """Report server state, the selected printer and the cached printer list.

    Returns:
        StatusResponse: Current bridge status.
    """
    return StatusResponse(
        version=__version__,
        server=ServerInfo(**context.server.to_dict()),
        selectedPrinter=context.registry.selected_printer,
        printers=_printers(context),
    )


@router.post("/printers/select", response_model=SelectPrinterResponse, responses=_ERRORS)
async def select_printer(payload: SelectPrinterRequest, context: Context):
    """Select the printer used when a print request names none.

    Args:
        payload: Printer name.
        context: Bridge context.

    Returns:
        SelectPrinterResponse: The selected printer.

    Raises:
        ValidationError: If name is missing.
        NotFoundError: If the printer is unknown after a refresh.
    """
    name = (payload.name or "").strip()
    if not name:
        raise ValidationError('Printer "name" is required.')

    if name not in context.registry:
        await context.discovery.refresh()
    if name not in context.registry:
        raise NotFoundError("Printer not found.")

    context.registry.select(name, persist=True)
    return SelectPrinterResponse(selectedPrinter=name)


@router.post("/printers/refresh", response_model=PrintersResponse)
async def refresh_printers(context: Context):
    """Re-enumerate OS printers.

    Returns:
        PrintersResponse: Printer list after the refresh.
    """
    await context.discovery.refresh()
    return PrintersResponse(printers=_printers(context))


@router.post("/print", response_model=PrintResponse, responses=_ERRORS)
async def print_document(payload: PrintRequest, context: Context):
    """Download a document by URL and send it to a printer.

    Args:
        payload: URL, optional printer name and copies.
        context: Bridge context.

    Returns:
        PrintResponse: Printer the job went to.

    Raises:
        ValidationError: Missing/invalid URL or no printer selected.
        NotFoundError: Printer unavailable.
        DownloadError: Document could not be fetched.
        PrintError: The spooler rejected the job.
    """
    if not payload.url or not payload.url.strip():
        raise ValidationError('Field "url" is required.')

    result = await context.dispatcher.submit(
        payload.url,
        printer_name=payload.printer_name,
        copies=payload.copies,
    )
    if not result.ok:
        raise result.error
    return PrintResponse(printer=result.printer)
