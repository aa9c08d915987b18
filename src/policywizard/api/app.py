"""FastAPI application factory for the policy wizard."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from policywizard import __version__
from policywizard.api.deps import init_session_manager, reset_session_manager
from policywizard.api.middleware import RequestTimingMiddleware
from policywizard.api.routers import sessions
from policywizard.api.schemas import HealthResponse
from policywizard.service.session_manager import SessionManager
from policywizard.service.translation import MessageCatalog
from policywizard.settings import Settings


def build_session_manager(settings: Settings) -> SessionManager:
    """Create a SessionManager configured from *settings*."""
    return SessionManager(
        ttl_seconds=settings.session_ttl_seconds,
        cleanup_interval=settings.session_cleanup_interval,
        translator=MessageCatalog(settings.locale),
        confirm_template=settings.confirm_modal_template,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Start/stop the SessionManager alongside the application."""
    mgr = build_session_manager(app.state.settings)
    mgr.start()
    init_session_manager(mgr)
    try:
        yield
    finally:
        mgr.stop()
        reset_session_manager()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Policy Wizard",
        description="Manages model transformations and dependent cubes of a policy being edited.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestTimingMiddleware)

    app.include_router(sessions.router, prefix="/sessions", tags=["sessions"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("policywizard.api")
    logger.info(
        "Policy Wizard API v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "policywizard.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
