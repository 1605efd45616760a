"""Ticket query controller: reconciles async query outcomes into view state.

Every query is tagged with a monotonically increasing sequence number.
A result is committed only while its number is still the latest issued
and the view has not been torn down, so a slow, superseded response can
never overwrite a newer one and nothing lands after ``unmount()``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from autoticket.core.constants import RETRY_POLICIES, UNKNOWN_ERROR_MESSAGE, SearchMode
from autoticket.core.context import ensure_correlation_id
from autoticket.services.dispatcher import QueryDispatcher, UnknownSearchModeError
from autoticket.services.view_state import (
    Error,
    Listener,
    Loading,
    RequestState,
    Success,
    ViewStateStore,
)

logger = logging.getLogger(__name__)


def _mode_name(mode: SearchMode | str) -> str:
    return mode.value if isinstance(mode, SearchMode) else str(mode)


def failure_message(exc: BaseException) -> str:
    """Human-readable description of a failed query."""
    for attr in ("message", "detail"):
        value = getattr(exc, attr, None)
        if isinstance(value, str) and value.strip():
            return value
    text = str(exc)
    return text if text.strip() else UNKNOWN_ERROR_MESSAGE


class TicketQueryController:
    """Owns the ticket list view state for one mounted view.

    ``mode`` and ``query`` hold the latest submitted search. ``retry()``
    re-issues the all-tickets query under the ``all`` retry policy, or the
    last issued query under ``last``.
    """

    def __init__(
        self,
        dispatcher: QueryDispatcher,
        view: ViewStateStore | None = None,
        retry_policy: str = "all",
    ) -> None:
        if retry_policy not in RETRY_POLICIES:
            raise ValueError(f"Invalid retry_policy: {retry_policy!r}")
        self.dispatcher = dispatcher
        self.view = view or ViewStateStore()
        self.retry_policy = retry_policy
        self.mode: SearchMode = SearchMode.ALL
        self.query: str = ""
        self._sequence = 0
        self._last_request: tuple[SearchMode | str, str] = (SearchMode.ALL, "")
        self._mounted = False
        self._closed = False
        self._tasks: set[asyncio.Task[Any]] = set()

    # ── State access ────────────────────────────────────────────────

    @property
    def state(self) -> RequestState:
        return self.view.state

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def latest_sequence(self) -> int:
        return self._sequence

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a state listener; returns an unsubscribe callable."""
        return self.view.subscribe(listener)

    # ── Lifecycle ───────────────────────────────────────────────────

    async def mount(self) -> RequestState:
        """Mark the view mounted and load all tickets."""
        if self._closed:
            raise RuntimeError("Cannot mount a controller that has been unmounted")
        self._mounted = True
        logger.info("Ticket view mounted")
        return await self.run_query(SearchMode.ALL, "")

    async def unmount(self) -> None:
        """Tear the view down; in-flight results are dropped from here on."""
        self._closed = True
        self._mounted = False
        self._sequence += 1

        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        self.view.clear_listeners()
        logger.info("Ticket view unmounted (%d pending queries cancelled)", len(pending))

    # ── Queries ─────────────────────────────────────────────────────

    async def run_query(self, mode: SearchMode | str, query: str = "") -> RequestState:
        """Issue one query and commit its outcome if it is still current.

        Failures never propagate; they become an ``Error`` state carrying
        the store's message. Returns the view state after the call.
        """
        if self._closed:
            logger.debug("Ignoring query on unmounted view (%r, %r)", mode, query)
            return self.state

        ensure_correlation_id()
        self._sequence += 1
        sequence = self._sequence
        self._last_request = (mode, query)
        self._commit(sequence, Loading())
        fields = {"query_sequence": sequence, "search_mode": _mode_name(mode)}

        try:
            tickets = await self.dispatcher.dispatch(mode, query)
        except Exception as exc:
            message = failure_message(exc)
            logger.warning(
                "Query #%d (%s, %r) failed: %s",
                sequence,
                fields["search_mode"],
                query,
                message,
                extra=fields,
            )
            self._commit(sequence, Error(message))
        else:
            result = tuple(tickets)
            logger.info(
                "Query #%d (%s) returned %d ticket(s)",
                sequence,
                fields["search_mode"],
                len(result),
                extra={**fields, "ticket_count": len(result)},
            )
            self._commit(sequence, Success(result))
        return self.state

    async def submit(self, mode: SearchMode | str, query: str = "") -> RequestState:
        """Handle an explicit search submission from the user.

        Submitting ``ALL`` always fetches every ticket, whatever is left in
        the query field.
        """
        try:
            resolved = self.dispatcher.resolve_mode(mode)
        except UnknownSearchModeError:
            return await self.run_query(mode, query)

        self.mode = resolved
        self.query = query
        if resolved is SearchMode.ALL:
            return await self.run_query(SearchMode.ALL, "")
        return await self.run_query(resolved, query)

    async def retry(self) -> RequestState:
        """Retry action offered next to an error message."""
        if self.retry_policy == "last":
            mode, query = self._last_request
            return await self.run_query(mode, query)
        return await self.run_query(SearchMode.ALL, "")

    # ── Fire-and-forget variants ────────────────────────────────────

    def start_mount(self) -> asyncio.Task[RequestState]:
        """Mount without waiting for the first load; the view reads Loading meanwhile."""
        if self._closed:
            raise RuntimeError("Cannot mount a controller that has been unmounted")
        self._mounted = True
        return self._track(self.run_query(SearchMode.ALL, ""))

    def start_query(self, mode: SearchMode | str, query: str = "") -> asyncio.Task[RequestState]:
        return self._track(self.run_query(mode, query))

    def start_submit(self, mode: SearchMode | str, query: str = "") -> asyncio.Task[RequestState]:
        return self._track(self.submit(mode, query))

    # ── Internals ───────────────────────────────────────────────────

    def _commit(self, sequence: int, state: RequestState) -> bool:
        if self._closed or sequence != self._sequence:
            logger.debug(
                "Discarding %s for query #%d (latest is #%d)",
                state.kind,
                sequence,
                self._sequence,
            )
            return False
        self.view.set(state)
        return True

    def _track(self, coro: Coroutine[Any, Any, RequestState]) -> asyncio.Task[RequestState]:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in query task: %s", exc, exc_info=exc)
