"""FastAPI application factory."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from printbridge import __version__
from printbridge.api.router import router
from printbridge.config import APP_NAME
from printbridge.context import BridgeContext
from printbridge.exceptions import BridgeError

logger = logging.getLogger(__name__)


def create_app(context: BridgeContext, cors_origins: list[str] | None = None) -> FastAPI:
    """Build the bridge application around an owned context.

    Args:
        context: Registry, gateway, dispatcher and server state.
        cors_origins: Origins allowed to call the API (default: all).

    Returns:
        FastAPI: Configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Record the serving loop and load the printer list before serving.

        Args:
            app: FastAPI application instance.
        """
        # Startup
        context.loop = asyncio.get_running_loop()
        await context.discovery.refresh()
        context.server.set_status("Listening")
        yield
        # Shutdown
        context.server.set_status("Stopped")

    app = FastAPI(
        title=APP_NAME,
        description="Local bridge between the gang-sheet web app and installed printers",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.bridge = context

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BridgeError)
    async def bridge_error_handler(request: Request, exc: BridgeError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
            message = f"Invalid request: {location or 'body'}: {errors[0].get('msg')}"
        else:
            message = "Invalid request."
        return JSONResponse(status_code=400, content={"ok": False, "error": message})

    app.include_router(router)

    return app
