"""FastAPI application entrypoint."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from app.api.auth import router as auth_router
from app.api.users import router as users_router
from app.core.config import Settings
from app.core.config import get_settings
from app.core.errors import register_error_handlers
from app.core.logging import configure_logging
from app.core.logging import request_context_middleware
from app.core.responses import json_response
from app.core.responses import success
from app.db import models as _models  # noqa: F401
from app.db.base import build_engine
from app.db.base import create_session_factory

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application; raises ``ConfigurationError`` before serving anything."""
    if settings is None:
        settings = get_settings()

    configure_logging(settings.log_level)
    logger.info("Starting application with settings=%s", settings.safe_for_logging())

    engine = build_engine(settings.database_url)

    app = FastAPI(title="Layered REST backend")
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    register_error_handlers(app)
    # Added first so CORS wraps it: error responses it builds still get CORS headers.
    app.middleware("http")(request_context_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(auth_router)
    app.include_router(users_router)

    @app.get("/health")
    def health() -> JSONResponse:
        """Health check endpoint for service readiness."""
        return json_response(success({"status": "ok"}, message="Service healthy"))

    return app


def run() -> None:
    """Serve the application with uvicorn on the configured host and port."""
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
