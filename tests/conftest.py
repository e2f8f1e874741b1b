"""Pytest configuration and fixtures."""

import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from printbridge.api import create_app
from printbridge.config import BridgeSettings, ServerSettings
from printbridge.context import BridgeContext, build_context
from printbridge.fetcher import DocumentFetcher
from printbridge.registry import Printer

PDF_BYTES = b"%PDF-1.4\n% fake gang sheet\n%%EOF\n"


@pytest.fixture
def office_printer() -> Printer:
    return Printer(
        name="Office-Printer",
        display_name="Office Printer",
        description="HP LaserJet",
        status="ready",
    )


@pytest.fixture
def label_printer() -> Printer:
    return Printer(
        name="Label-Printer",
        display_name="DTF Label Printer",
        description="Epson SureColor",
        status="ready",
        is_default=True,
    )


@pytest.fixture
def backend(office_printer: Printer, label_printer: Printer) -> MagicMock:
    """Stub OS print capability reporting two printers."""
    mock = MagicMock()
    mock.is_available = True
    mock.get_printers.return_value = [office_printer, label_printer]
    mock.get_default_printer.return_value = label_printer.name
    return mock


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock()


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "config" / "printer-bridge-settings.json"


@pytest.fixture
def settings(settings_path: Path) -> BridgeSettings:
    return BridgeSettings(path=settings_path)


@pytest.fixture
def temp_root(tmp_path: Path, monkeypatch) -> Path:
    """Redirect tempfile to a directory the test can inspect."""
    root = tmp_path / "tmp"
    root.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(root))
    return root


@pytest.fixture
def document_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def document_response() -> httpx.Response:
    """Response served for every download; override in tests."""
    return httpx.Response(200, content=PDF_BYTES, headers={"content-type": "application/pdf"})


@pytest.fixture
def fetcher(document_requests, document_response) -> DocumentFetcher:
    """DocumentFetcher backed by an in-memory transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        document_requests.append(request)
        return httpx.Response(
            document_response.status_code,
            content=document_response.content,
            headers=document_response.headers,
        )

    return DocumentFetcher(timeout=5.0, transport=httpx.MockTransport(handler))


@pytest.fixture
def context(settings, backend, notifier, fetcher, temp_root) -> BridgeContext:
    server_settings = ServerSettings(host="127.0.0.1", port=3321)
    return build_context(
        server_settings,
        settings,
        backend=backend,
        notifier=notifier,
        fetcher=fetcher,
    )


@pytest.fixture
def client(context: BridgeContext, backend: MagicMock) -> Generator[TestClient, None, None]:
    """Test client with the startup refresh already done."""
    app = create_app(context)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        backend.get_printers.reset_mock()
        yield test_client
