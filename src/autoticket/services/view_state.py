"""View state container: the single source of truth for rendering.

``RequestState`` is a tagged union of three frozen dataclasses. The
container holds exactly one of them at a time and notifies subscribers
after every replacement. States are never mutated in place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal, Union

from autoticket.api.schemas.tickets import Ticket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Loading:
    kind: Literal["loading"] = field(default="loading", init=False)


@dataclass(frozen=True)
class Success:
    tickets: tuple[Ticket, ...] = ()
    kind: Literal["success"] = field(default="success", init=False)


@dataclass(frozen=True)
class Error:
    message: str
    kind: Literal["error"] = field(default="error", init=False)


RequestState = Union[Loading, Success, Error]

Listener = Callable[[RequestState], None]


class ViewStateStore:
    """Holds the current :data:`RequestState` and fans out changes."""

    def __init__(self, initial: RequestState | None = None) -> None:
        self._state: RequestState = initial if initial is not None else Loading()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> RequestState:
        return self._state

    def set(self, state: RequestState) -> None:
        """Replace the current state and notify every listener."""
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("View state listener %r failed", listener)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()
