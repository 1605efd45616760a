"""Shared pytest fixtures and test configuration."""

from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Generator, Sequence
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Ensure src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from autoticket.api.schemas.tickets import Ticket  # noqa: E402
from autoticket.services.ticket_store import BaseTicketStore, TicketStoreError  # noqa: E402


class RecordingTicketStore(BaseTicketStore):
    """Ticket store returning canned results and recording every call."""

    def __init__(
        self,
        all_tickets: Sequence[Ticket] = (),
        by_plate: dict[str, Sequence[Ticket]] | None = None,
        by_lot: dict[str, Sequence[Ticket]] | None = None,
        error: str | None = None,
    ) -> None:
        self.all_tickets = list(all_tickets)
        self.by_plate = by_plate or {}
        self.by_lot = by_lot or {}
        self.error = error
        self.calls: list[tuple[str, str | None]] = []
        self.closed = False

    def _maybe_fail(self) -> None:
        if self.error is not None:
            raise TicketStoreError(self.error)

    async def get_all_tickets(self) -> Sequence[Ticket]:
        self.calls.append(("all", None))
        self._maybe_fail()
        return list(self.all_tickets)

    async def get_tickets_by_license_plate(self, plate: str) -> Sequence[Ticket]:
        self.calls.append(("license", plate))
        self._maybe_fail()
        return list(self.by_plate.get(plate, []))

    async def get_tickets_by_lot_id(self, lot_id: str) -> Sequence[Ticket]:
        self.calls.append(("lot", lot_id))
        self._maybe_fail()
        return list(self.by_lot.get(lot_id, []))

    async def aclose(self) -> None:
        self.closed = True


class GatedTicketStore(BaseTicketStore):
    """Ticket store whose calls block until the test resolves them.

    Each call appends a future to ``pending``; the test decides when and in
    which order those futures complete.
    """

    def __init__(self) -> None:
        self.pending: list[tuple[str, str | None, asyncio.Future[Any]]] = []

    async def _wait(self, kind: str, arg: str | None) -> Sequence[Ticket]:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self.pending.append((kind, arg, future))
        result: Sequence[Ticket] = await future
        return result

    async def get_all_tickets(self) -> Sequence[Ticket]:
        return await self._wait("all", None)

    async def get_tickets_by_license_plate(self, plate: str) -> Sequence[Ticket]:
        return await self._wait("license", plate)

    async def get_tickets_by_lot_id(self, lot_id: str) -> Sequence[Ticket]:
        return await self._wait("lot", lot_id)

    def resolve(self, index: int, tickets: Sequence[Ticket]) -> None:
        self.pending[index][2].set_result(list(tickets))

    def reject(self, index: int, message: str) -> None:
        self.pending[index][2].set_exception(TicketStoreError(message))


@pytest.fixture
def recording_store() -> RecordingTicketStore:
    return RecordingTicketStore()


@pytest.fixture
def gated_store() -> GatedTicketStore:
    return GatedTicketStore()


@pytest.fixture
def sample_tickets() -> list[Ticket]:
    """Three fixed tickets covering parked, exited and zero-price cases."""
    return [
        Ticket(
            ticket_id="T-1",
            license_plate="CA 123-456",
            lot_id="LOT-7",
            entry_time="2025-03-01T08:15:00",
            exit_time=None,
            price=None,
        ),
        Ticket(
            ticket_id="T-2",
            license_plate="GP 99 XZ",
            lot_id="LOT-2",
            entry_time="2025-03-01T09:00:00",
            exit_time="2025-03-01T11:30:00",
            price="45.5",
        ),
        Ticket(
            ticket_id="T-3",
            license_plate="CA 123-456",
            lot_id="LOT-7",
            entry_time="2025-03-02T10:00:00",
            exit_time="2025-03-02T10:05:00",
            price=0,
        ),
    ]


@pytest.fixture
def app_factory() -> Any:
    """Build a test app around a given ticket store."""
    from autoticket.core.config import Settings
    from autoticket.main import create_app

    def _make(store: BaseTicketStore, **settings_overrides: Any) -> Any:
        settings = Settings(_env_file=None, app_env="testing", **settings_overrides)
        return create_app(settings=settings, store=store)

    return _make


@pytest.fixture
def client(app_factory: Any, sample_tickets: list[Ticket]) -> Generator[TestClient, None, None]:
    """Test client over a store seeded with the sample tickets."""
    store = RecordingTicketStore(
        all_tickets=sample_tickets,
        by_plate={"CA 123-456": [sample_tickets[0], sample_tickets[2]]},
        by_lot={"LOT-2": [sample_tickets[1]]},
    )
    with TestClient(app_factory(store)) as test_client:
        yield test_client
