from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from mirrormd.di.server_container import ServerContainer
from mirrormd.domain.errors import RenderError, ResourceNotFound, ValidationError
from mirrormd.domain.models import INVALID_MARKDOWN
from mirrormd.web.limits import BodySizeLimitMiddleware
from mirrormd.web.routes import router

log = logging.getLogger(__name__)


def create_app(container: ServerContainer | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The lifespan owns the render engine: it is launched lazily by the first export
    and shut down exactly once when uvicorn stops (SIGINT/SIGTERM included).
    """
    c = container or ServerContainer.from_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("MirrorMD server starting (PDF themes: %s)", ", ".join(c.catalog.ids()))
        if c.config is not None and c.config.loaded_from:
            log.info("Config loaded from %s", c.config.loaded_from)
        try:
            yield
        finally:
            await c.engine.shutdown()
            log.info("MirrorMD server stopped")

    app = FastAPI(
        title="MirrorMD",
        version=c.config.get_version() if c.config is not None else "0.0.0",
        description="Markdown preview rendering and themed PDF export.",
        lifespan=lifespan,
    )
    app.state.container = c

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=c.settings.max_body_bytes)
    _register_error_handlers(app)
    app.include_router(router)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def on_request_validation(request: Request, exc: RequestValidationError):
        fields = {str(part) for err in exc.errors() for part in err.get("loc", ())}
        error = INVALID_MARKDOWN if "markdown" in fields else "Invalid request"
        return JSONResponse(status_code=400, content={"error": error})

    @app.exception_handler(ValidationError)
    async def on_validation(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(ResourceNotFound)
    async def on_not_found(request: Request, exc: ResourceNotFound):
        return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})

    @app.exception_handler(RenderError)
    async def on_render_error(request: Request, exc: RenderError):
        log.error("Render failure on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Rendering failed", "message": "Please try again."},
        )

    @app.exception_handler(Exception)
    async def on_unexpected(request: Request, exc: Exception):
        log.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"},
        )
