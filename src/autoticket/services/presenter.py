"""View models for the ticket list, built from the current request state."""

from __future__ import annotations

from dataclasses import dataclass

from autoticket.api.schemas.tickets import Ticket
from autoticket.core.constants import (
    DEFAULT_CURRENCY_SYMBOL,
    LOADING_MESSAGE,
    RETRY_LABEL,
    SearchMode,
)
from autoticket.services.formatting import (
    empty_result_message,
    format_date_time,
    format_exit_time,
    format_price,
    query_field_for,
    submit_label_for,
)
from autoticket.services.view_state import Error, Loading, RequestState, Success


@dataclass(frozen=True)
class TicketCard:
    """Display strings for one ticket."""

    ticket_id: str
    vehicle: str
    parking_lot: str
    entry_time: str
    exit_time: str
    price: str
    is_parked: bool


@dataclass(frozen=True)
class ErrorBanner:
    message: str
    retry_label: str = RETRY_LABEL


@dataclass(frozen=True)
class EmptyNotice:
    title: str
    hint: str


@dataclass(frozen=True)
class QueryField:
    label: str
    placeholder: str
    value: str


@dataclass(frozen=True)
class TicketListView:
    """Everything a renderer needs for the ticket list page."""

    status: str
    mode: str
    is_loading: bool
    loading_message: str | None
    error: ErrorBanner | None
    cards: tuple[TicketCard, ...]
    empty: EmptyNotice | None
    query_field: QueryField | None
    submit_label: str


def build_ticket_card(ticket: Ticket, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> TicketCard:
    return TicketCard(
        ticket_id=ticket.ticket_id,
        vehicle=ticket.license_plate or "",
        parking_lot=ticket.lot_id or "",
        entry_time=format_date_time(ticket.entry_time),
        exit_time=format_exit_time(ticket.exit_time),
        price=format_price(ticket.price, currency_symbol),
        is_parked=ticket.is_parked,
    )


def build_ticket_list_view(
    state: RequestState,
    mode: SearchMode = SearchMode.ALL,
    query: str = "",
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL,
) -> TicketListView:
    """Project *state* into a :class:`TicketListView`.

    Loading hides everything else. An error shows its banner over an empty
    list. A success with no tickets carries the empty notice for *mode*.
    """
    field = query_field_for(mode)
    query_field = QueryField(label=field[0], placeholder=field[1], value=query) if field else None
    submit_label = submit_label_for(mode)

    if isinstance(state, Loading):
        return TicketListView(
            status=state.kind,
            mode=mode.value,
            is_loading=True,
            loading_message=LOADING_MESSAGE,
            error=None,
            cards=(),
            empty=None,
            query_field=query_field,
            submit_label=submit_label,
        )

    error: ErrorBanner | None = None
    cards: tuple[TicketCard, ...] = ()
    if isinstance(state, Error):
        error = ErrorBanner(message=state.message)
    elif isinstance(state, Success):
        cards = tuple(build_ticket_card(t, currency_symbol) for t in state.tickets)

    empty: EmptyNotice | None = None
    if isinstance(state, Success) and not cards:
        title, hint = empty_result_message(mode)
        empty = EmptyNotice(title=title, hint=hint)

    return TicketListView(
        status=state.kind,
        mode=mode.value,
        is_loading=False,
        loading_message=None,
        error=error,
        cards=cards,
        empty=empty,
        query_field=query_field,
        submit_label=submit_label,
    )
