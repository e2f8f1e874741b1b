"""HTTP API for the print bridge."""

from printbridge.api.app import create_app

__all__ = ["create_app"]
