"""Tests for the discovery gateway."""

import pytest

from printbridge.discovery import DiscoveryGateway
from printbridge.printing import PrinterError
from printbridge.registry import Printer, PrinterRegistry


@pytest.fixture
def registry(settings) -> PrinterRegistry:
    return PrinterRegistry(settings)


@pytest.fixture
def gateway(registry, backend, notifier) -> DiscoveryGateway:
    return DiscoveryGateway(registry, backend, notifier)


class TestRefresh:
    """Tests for DiscoveryGateway.refresh."""

    @pytest.mark.asyncio
    async def test_refresh_replaces_registry(self, gateway, registry, office_printer, label_printer):
        """Should store the OS list and return it."""
        result = await gateway.refresh()

        assert result == [office_printer, label_printer]
        assert registry.list() == [office_printer, label_printer]

    @pytest.mark.asyncio
    async def test_refresh_auto_selects_default(self, gateway, registry):
        await gateway.refresh()
        assert registry.selected_printer == "Label-Printer"

    @pytest.mark.asyncio
    async def test_refresh_notifies(self, gateway, notifier):
        await gateway.refresh()
        notifier.notify.assert_called_once_with("Refreshed printers")

    @pytest.mark.asyncio
    async def test_failure_keeps_stale_list(self, gateway, registry, backend, notifier):
        """Should keep the previous list when enumeration fails."""
        stale = [Printer(name="Stale-Printer")]
        registry.replace(stale)
        backend.get_printers.side_effect = PrinterError("spooler down")

        result = await gateway.refresh()

        assert result == stale
        assert registry.list() == stale
        notifier.notify.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, gateway, backend, caplog):
        backend.get_printers.side_effect = PrinterError("spooler down")
        await gateway.refresh()
        assert "spooler down" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_failure_keeps_stale_list(self, gateway, registry, backend, caplog):
        stale = [Printer(name="Stale-Printer")]
        registry.replace(stale)
        backend.get_printers.side_effect = RuntimeError("cupsd went away")

        result = await gateway.refresh()

        assert result == stale
        assert "cupsd went away" in caplog.text

    @pytest.mark.asyncio
    async def test_notifier_failure_is_ignored(self, gateway, registry, notifier):
        notifier.notify.side_effect = RuntimeError("no display")

        await gateway.refresh()

        assert len(registry.list()) == 2

    @pytest.mark.asyncio
    async def test_last_refresh_wins(self, gateway, registry, backend):
        backend.get_printers.side_effect = [
            [Printer(name="first")],
            [Printer(name="second")],
        ]

        await gateway.refresh()
        await gateway.refresh()

        assert [p.name for p in registry.list()] == ["second"]
