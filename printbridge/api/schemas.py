"""Request and response schemas for the bridge API.

Field names follow the JSON contract of the web application (camelCase).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from printbridge.registry import Printer


class PrinterSchema(BaseModel):
    """Printer as reported to the web application."""

    name: str
    displayName: str
    description: str = ""
    status: str = "unknown"
    isDefault: bool = False

    @classmethod
    def from_printer(cls, printer: Printer) -> "PrinterSchema":
        return cls(**printer.to_dict())


class ServerInfo(BaseModel):
    """Bind address and status of the bridge server."""

    host: str
    port: int
    status: str


class StatusResponse(BaseModel):
    """Schema for GET /status."""

    ok: bool = True
    version: str
    server: ServerInfo
    selectedPrinter: str | None
    printers: list[PrinterSchema]


class SelectPrinterRequest(BaseModel):
    """Schema for POST /printers/select."""

    name: str | None = None


class SelectPrinterResponse(BaseModel):
    ok: bool = True
    selectedPrinter: str


class PrintersResponse(BaseModel):
    ok: bool = True
    printers: list[PrinterSchema]


class PrintRequest(BaseModel):
    """Schema for POST /print.

    ``copies`` is taken as-is and parsed leniently by the dispatcher.
    """

    model_config = ConfigDict(populate_by_name=True)

    url: str | None = None
    printer_name: str | None = Field(None, alias="printerName")
    copies: Any = None


class PrintResponse(BaseModel):
    ok: bool = True
    printer: str


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    ok: bool = False
    error: str
