"""Ticket view routes: /api/v1/tickets."""

from __future__ import annotations

import dataclasses
from typing import Any

from fastapi import APIRouter, Depends

from autoticket.api.deps import get_controller, get_settings_from_app
from autoticket.api.schemas.tickets import SearchRequest
from autoticket.core.config import Settings
from autoticket.services.dispatcher import UnknownSearchModeError, coerce_mode
from autoticket.services.presenter import build_ticket_list_view
from autoticket.services.ticket_query import TicketQueryController

router = APIRouter(prefix="/api/v1/tickets", tags=["tickets"])


def _render(controller: TicketQueryController, settings: Settings) -> dict[str, Any]:
    view = build_ticket_list_view(
        controller.state,
        mode=controller.mode,
        query=controller.query,
        currency_symbol=settings.currency_symbol,
    )
    return dataclasses.asdict(view)


@router.get("/view")
def get_view(
    controller: TicketQueryController = Depends(get_controller),
    settings: Settings = Depends(get_settings_from_app),
) -> dict[str, Any]:
    """Current ticket list view."""
    return _render(controller, settings)


@router.post("/search")
async def search_tickets(
    body: SearchRequest,
    controller: TicketQueryController = Depends(get_controller),
    settings: Settings = Depends(get_settings_from_app),
) -> dict[str, Any]:
    """Submit a search and return the resulting view."""
    if settings.unknown_mode_policy == "error" and coerce_mode(body.mode) is None:
        raise UnknownSearchModeError(body.mode)
    await controller.submit(body.mode, body.query)
    return _render(controller, settings)


@router.post("/retry")
async def retry_tickets(
    controller: TicketQueryController = Depends(get_controller),
    settings: Settings = Depends(get_settings_from_app),
) -> dict[str, Any]:
    """Retry after a failed query and return the resulting view."""
    await controller.retry()
    return _render(controller, settings)
