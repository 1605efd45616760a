"""Query dispatcher: turns a (mode, query) pair into one ticket store call."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Sequence

from autoticket.api.schemas.tickets import Ticket
from autoticket.core.constants import UNKNOWN_MODE_POLICIES, SearchMode
from autoticket.services.ticket_store import BaseTicketStore

logger = logging.getLogger(__name__)


class TicketQueryError(Exception):
    """Ticket query error with HTTP status hint."""

    def __init__(self, detail: str, status_code: int = 400) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class UnknownSearchModeError(TicketQueryError):
    """Raised for an unrecognized search mode under the ``error`` policy."""

    def __init__(self, mode: object) -> None:
        self.mode = mode
        super().__init__(f"Unknown search mode: {mode!r}", status_code=422)


def coerce_mode(mode: SearchMode | str) -> SearchMode | None:
    """Return the matching :class:`SearchMode`, or None if unrecognized."""
    if isinstance(mode, SearchMode):
        return mode
    try:
        return SearchMode(mode)
    except ValueError:
        return None


class QueryDispatcher:
    """Selects exactly one remote query per dispatch.

    The query string is never validated here; an empty query is handed to
    the store, which owns the matching rules. There are no retries and no
    debouncing.
    """

    def __init__(self, store: BaseTicketStore, unknown_mode_policy: str = "fallback") -> None:
        if unknown_mode_policy not in UNKNOWN_MODE_POLICIES:
            raise ValueError(f"Invalid unknown_mode_policy: {unknown_mode_policy!r}")
        self.store = store
        self.unknown_mode_policy = unknown_mode_policy

    def resolve_mode(self, mode: SearchMode | str) -> SearchMode:
        """Map *mode* to a :class:`SearchMode`, applying the unknown-mode policy."""
        resolved = coerce_mode(mode)
        if resolved is not None:
            return resolved
        if self.unknown_mode_policy == "error":
            raise UnknownSearchModeError(mode)
        logger.warning("Unknown search mode %r, falling back to all tickets", mode)
        return SearchMode.ALL

    def dispatch(self, mode: SearchMode | str, query: str = "") -> Awaitable[Sequence[Ticket]]:
        """Start the store call for *mode* and return its awaitable.

        Raises :class:`UnknownSearchModeError` synchronously, before any
        remote call, when the policy is ``error``.
        """
        resolved = self.resolve_mode(mode)
        if resolved is SearchMode.LICENSE_PLATE:
            logger.debug("Dispatching license plate query %r", query)
            return self.store.get_tickets_by_license_plate(query)
        if resolved is SearchMode.LOT:
            logger.debug("Dispatching lot query %r", query)
            return self.store.get_tickets_by_lot_id(query)
        logger.debug("Dispatching all-tickets query")
        return self.store.get_all_tickets()
