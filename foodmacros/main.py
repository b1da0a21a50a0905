from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from foodmacros.api.v1.analyze import MISSING_DESCRIPTION, error_response
from foodmacros.api.v1.analyze import router as analyze_router
from foodmacros.api.v1.cards import router as cards_router
from foodmacros.api.v1.pages import router as pages_router
from foodmacros.config import Settings, resolve_base_url
from foodmacros.widget.server import build_widget_server

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app() -> FastAPI:
    settings = Settings()
    configure_logging(settings)

    widget_server = build_widget_server(settings)
    mcp_app = widget_server.http_app(path="/mcp")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The MCP session manager only runs inside its own lifespan
        async with mcp_app.lifespan(app):
            logger.info("Widget base URL: %s", resolve_base_url(settings) or "(same origin)")
            yield

    app = FastAPI(title="Food Macros API", version="1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        # Clients expect {"error": ...}; a missing or non-JSON body is a missing description.
        if request.url.path == "/api/analyze-food":
            return error_response(MISSING_DESCRIPTION, 400)
        return error_response("Invalid request", 400)

    app.include_router(analyze_router)
    app.include_router(cards_router)
    app.include_router(pages_router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    @app.get("/readyz")
    def readyz():
        return {"status": "ready"}

    if settings.enable_tracing:
        from foodmacros.telemetry import setup_telemetry
        setup_telemetry(app, settings)

    # Last, so it only sees paths the API routers did not claim
    app.mount("/", mcp_app)
    return app

app = create_app()
