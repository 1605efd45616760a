"""Request context management via contextvars: correlation IDs."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def set_correlation_id(value: str) -> None:
    """Set the correlation ID for the current request context."""
    _correlation_id.set(value)


def get_correlation_id() -> str | None:
    """Get the correlation ID for the current request context."""
    return _correlation_id.get()


def ensure_correlation_id() -> str:
    """Return the current correlation ID, creating one if none is set."""
    current = _correlation_id.get()
    if current is None:
        current = uuid.uuid4().hex[:12]
        _correlation_id.set(current)
    return current
