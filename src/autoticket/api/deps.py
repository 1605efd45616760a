"""Dependency injection for FastAPI routes."""

from __future__ import annotations

from fastapi import HTTPException, Request

from autoticket.core.config import Settings
from autoticket.services.ticket_query import TicketQueryController


def get_settings_from_app(request: Request) -> Settings:
    """Settings stored on the application at creation time."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else Settings()


def get_controller(request: Request) -> TicketQueryController:
    """Dependency that provides the ticket view controller."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None or not controller.is_mounted:
        raise HTTPException(status_code=503, detail="Ticket view is not ready")
    return controller
