"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from autoticket.api.middleware import setup_middleware
from autoticket.core.config import Settings
from autoticket.core.logging import setup_logging
from autoticket.services.dispatcher import QueryDispatcher
from autoticket.services.ticket_query import TicketQueryController
from autoticket.services.ticket_store import BaseTicketStore, build_ticket_store

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, store: BaseTicketStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    *store* overrides the ticket store built from settings (tests, embedding).
    """
    if settings is None:
        settings = Settings()

    if not settings.is_testing:
        setup_logging(level=settings.log_level, log_format=settings.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting auto-ticket view (env=%s)", settings.app_env)
        ticket_store = store if store is not None else build_ticket_store(settings)
        dispatcher = QueryDispatcher(ticket_store, unknown_mode_policy=settings.unknown_mode_policy)
        controller = TicketQueryController(dispatcher, retry_policy=settings.retry_policy)
        app.state.controller = controller
        controller.start_mount()
        yield
        logger.info("Shutting down auto-ticket view")
        await controller.unmount()
        if store is None:
            await ticket_store.aclose()

    application = FastAPI(
        title="Auto-Ticket",
        description="Parking ticket list and search",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.state.settings = settings
    application.state.controller = None

    setup_middleware(application)

    _register_routes(application)

    return application


def _register_routes(app: FastAPI) -> None:
    """Register all API route modules."""
    from autoticket.api.routes.health import router as health_router
    from autoticket.api.routes.tickets import router as tickets_router

    app.include_router(health_router, tags=["health"])
    app.include_router(tickets_router)


# Module-level app instance for uvicorn (uvicorn autoticket.main:app)
app = create_app()


def run() -> None:
    """Serve the module-level app on the configured host and port."""
    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.app_host, port=settings.app_port, log_level=settings.log_level.lower())
