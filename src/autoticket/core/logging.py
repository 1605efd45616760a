"""Logging setup for the ticket view.

Query and store log calls attach structured fields through ``extra=``
(``query_sequence``, ``search_mode``, ``ticket_count``, ``store_path``,
``status_code``). The JSON formatter lifts those into a ``query`` object;
the text formatter appends them as ``key=value`` pairs. Anything else passed
through ``extra=`` lands under ``extra`` with secrets masked.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import UTC, datetime
from typing import Any

# Structured fields emitted by the query controller and ticket stores
QUERY_LOG_FIELDS: tuple[str, ...] = (
    "query_sequence",
    "search_mode",
    "ticket_count",
    "store_path",
    "status_code",
)

# Key names whose values never reach the log output
SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"authorization", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
]

REDACTED = "***REDACTED***"

# Freeform text: (pattern, replacement) applied in order
_TEXT_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(Authorization:\s*Bearer\s+)\S+", re.IGNORECASE), r"\1" + REDACTED),
    (re.compile(r"(password[\s=:]+)\S+", re.IGNORECASE), r"\1" + REDACTED),
    # Store URLs may carry a key in the query string
    (re.compile(r"((?:token|api[_-]?key)[\s=:]+)[^\s&]+", re.IGNORECASE), r"\1" + REDACTED),
]

_RESERVED_RECORD_KEYS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "correlation_id",
}


def is_sensitive_key(key: str) -> bool:
    return any(p.search(key) for p in SENSITIVE_PATTERNS)


def redact_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Copy of *data* with sensitive keys masked, recursing into dicts and lists."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if is_sensitive_key(key):
            result[key] = REDACTED
        elif isinstance(value, dict):
            result[key] = redact_dict(value)
        elif isinstance(value, list):
            result[key] = [redact_dict(item) if isinstance(item, dict) else item for item in value]
        else:
            result[key] = value
    return result


def redact_string(text: str) -> str:
    for pattern, replacement in _TEXT_RULES:
        text = pattern.sub(replacement, text)
    return text


def query_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Structured query fields present on *record*, in a stable order."""
    return {
        name: getattr(record, name)
        for name in QUERY_LOG_FIELDS
        if getattr(record, name, None) is not None
    }


def _other_extras(record: logging.LogRecord) -> dict[str, Any]:
    return {
        k: v
        for k, v in record.__dict__.items()
        if k not in _RESERVED_RECORD_KEYS and k not in QUERY_LOG_FIELDS
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line: level, logger, message, correlation id, query fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_string(record.getMessage()),
        }

        correlation_id = getattr(record, "correlation_id", None)
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        fields = query_fields(record)
        if fields:
            log_entry["query"] = fields

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
            }

        extras = _other_extras(record)
        if extras:
            log_entry["extra"] = redact_dict(extras)

        return json.dumps(log_entry, default=str)


class RedactingFormatter(logging.Formatter):
    """Human-readable lines; query fields are appended as ``[key=value ...]``."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None) -> None:
        super().__init__(
            fmt=fmt or "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt=datefmt or "%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = query_fields(record)
        if fields:
            line += " [" + " ".join(f"{k}={v}" for k, v in fields.items()) + "]"
        return redact_string(line)


class CorrelationFilter(logging.Filter):
    """Copies the current correlation id onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        from autoticket.core.context import get_correlation_id

        record.correlation_id = get_correlation_id()
        return True


def setup_logging(level: str = "INFO", log_format: str = "text") -> None:
    """Configure the root logger.

    Args:
        level: Log level name; unknown names fall back to INFO.
        log_format: "json" for one JSON object per line, anything else for text.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if log_format == "json" else RedactingFormatter())
    handler.addFilter(CorrelationFilter())
    root.addHandler(handler)

    # Per-request access lines and client internals are noise at INFO
    for name in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
