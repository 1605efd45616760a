"""Remote ticket store clients.

The ticket store owns ticket records (entry/exit times, pricing) and is
reached through three read-only queries. ``HttpTicketStore`` talks to the
real service over HTTP; ``InMemoryTicketStore`` serves a fixed list and is
used in *stub mode* when no store URL is configured.
"""

from __future__ import annotations

import logging
import urllib.parse
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from autoticket.api.schemas.tickets import Ticket
from autoticket.core.context import ensure_correlation_id

logger = logging.getLogger(__name__)


class TicketStoreError(Exception):
    """A ticket query failed; ``message`` is shown to the user verbatim."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BaseTicketStore(ABC):
    """Query contract of the remote ticket store.

    Every query returns tickets in the order the store defines and raises
    :class:`TicketStoreError` on transport or server failure.
    """

    @abstractmethod
    async def get_all_tickets(self) -> Sequence[Ticket]:
        """Fetch every ticket."""

    @abstractmethod
    async def get_tickets_by_license_plate(self, plate: str) -> Sequence[Ticket]:
        """Fetch tickets for a vehicle. Matching rules belong to the store."""

    @abstractmethod
    async def get_tickets_by_lot_id(self, lot_id: str) -> Sequence[Ticket]:
        """Fetch tickets for one parking lot."""

    async def aclose(self) -> None:
        """Release any held resources. Default is a no-op."""


def parse_tickets(payload: Any) -> list[Ticket]:
    """Validate a JSON payload into tickets, preserving order.

    Accepts either a bare list or an object wrapping the list in
    ``tickets``/``items``/``data``.
    """
    if isinstance(payload, dict):
        for key in ("tickets", "items", "data"):
            if isinstance(payload.get(key), list):
                payload = payload[key]
                break
    if not isinstance(payload, list):
        raise TicketStoreError("Unexpected response from ticket store")
    try:
        return [Ticket.model_validate(item) for item in payload]
    except ValidationError as exc:
        logger.warning("Ticket store returned malformed tickets: %s", exc)
        raise TicketStoreError("Ticket store returned malformed tickets") from exc


def _error_message(response: httpx.Response) -> str:
    """Pick the most human-readable failure description from a response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return response.reason_phrase or f"Request failed with status {response.status_code}"


class HttpTicketStore(BaseTicketStore):
    """Ticket store reached over HTTP with ``httpx.AsyncClient``.

    Endpoints, relative to *base_url*::

        GET /tickets
        GET /tickets/license/{plate}
        GET /tickets/lot/{lot_id}

    If *client* is None, an ``AsyncClient`` is created and owned by this
    store; close it with :meth:`aclose`.
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def get_all_tickets(self) -> Sequence[Ticket]:
        return await self._get("/tickets")

    async def get_tickets_by_license_plate(self, plate: str) -> Sequence[Ticket]:
        return await self._get(f"/tickets/license/{urllib.parse.quote(plate, safe='')}")

    async def get_tickets_by_lot_id(self, lot_id: str) -> Sequence[Ticket]:
        return await self._get(f"/tickets/lot/{urllib.parse.quote(lot_id, safe='')}")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str) -> list[Ticket]:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json", "X-Correlation-ID": ensure_correlation_id()}
        try:
            response = await self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("Ticket store request to %s failed", url, exc_info=True)
            raise TicketStoreError(f"Network error: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "Ticket store returned %d for %s: %s",
                response.status_code,
                url,
                message,
                extra={"store_path": path, "status_code": response.status_code},
            )
            raise TicketStoreError(message, status_code=response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise TicketStoreError("Ticket store returned invalid JSON") from exc
        tickets = parse_tickets(payload)
        logger.debug(
            "Ticket store %s → %d ticket(s)",
            path,
            len(tickets),
            extra={"store_path": path, "ticket_count": len(tickets)},
        )
        return tickets


def _normalize_plate(plate: str) -> str:
    return "".join(plate.split()).upper()


class InMemoryTicketStore(BaseTicketStore):
    """Ticket store backed by a list, for local development and tests.

    Plates match exactly, ignoring case and whitespace; lot ids match
    exactly. An empty query matches nothing.
    """

    def __init__(self, tickets: Iterable[Ticket | dict[str, Any]] = ()) -> None:
        self._tickets: list[Ticket] = [
            t if isinstance(t, Ticket) else Ticket.model_validate(t) for t in tickets
        ]
        logger.info("InMemoryTicketStore running in STUB mode (%d tickets)", len(self._tickets))

    async def get_all_tickets(self) -> Sequence[Ticket]:
        return list(self._tickets)

    async def get_tickets_by_license_plate(self, plate: str) -> Sequence[Ticket]:
        wanted = _normalize_plate(plate)
        if not wanted:
            return []
        return [
            t
            for t in self._tickets
            if t.license_plate is not None and _normalize_plate(t.license_plate) == wanted
        ]

    async def get_tickets_by_lot_id(self, lot_id: str) -> Sequence[Ticket]:
        wanted = lot_id.strip()
        if not wanted:
            return []
        return [t for t in self._tickets if t.lot_id == wanted]


def build_ticket_store(settings: Any) -> BaseTicketStore:
    """Create the store configured by *settings* (stub store when no URL)."""
    if settings.uses_stub_store:
        return InMemoryTicketStore()
    return HttpTicketStore(settings.ticket_store_url, timeout=settings.ticket_store_timeout)
