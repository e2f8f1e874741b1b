"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends, Request

from printbridge.context import BridgeContext


def get_context(request: Request) -> BridgeContext:
    """Get the bridge context owned by the application.

    Returns:
        BridgeContext: Shared registry, gateway and dispatcher.
    """
    return request.app.state.bridge


Context = Annotated[BridgeContext, Depends(get_context)]
