"""userapi REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from userapi.api.deps import (
    build_user_service,
    database_url_from_env,
    dispose_database,
    init_database,
)
from userapi.api.errors import register_error_handlers
from userapi.api.middleware.request_id import RequestIDMiddleware
from userapi.api.routers import users
from userapi.core.logging import setup_logging
from userapi.services.user_service import UserService

log = structlog.get_logger("userapi.api")


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: create engine and schema. Shutdown: dispose engine."""
    await init_database(app)
    log.info("app.started", database=app.state.engine.url.render_as_string(hide_password=True))
    yield
    await dispose_database(app)
    log.info("app.stopped")


def create_app(
    user_service: UserService | None = None,
    database_url: str | None = None,
    log_level: str | None = None,
    log_format: str | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    *user_service* and *database_url* default to a fresh
    :class:`UserService` and ``USERAPI_DATABASE_URL``; *log_level* and
    *log_format* fall back to ``USERAPI_LOG_LEVEL`` / ``USERAPI_LOG_FORMAT``.
    """
    setup_logging(log_level, log_format)

    app = FastAPI(
        title="userapi",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=_lifespan,
    )
    app.state.user_service = user_service or build_user_service()
    app.state.database_url = database_url or database_url_from_env()
    app.state.engine = None
    app.state.session_factory = None

    register_error_handlers(app)

    cors_origins = os.environ.get("USERAPI_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(users.router, prefix="/users", tags=["users"])

    return app
