"""Display formatting for ticket fields.

Pure functions, no side effects. A zero price is a real amount and formats
as ``R 0.00``; only a missing or unparseable price reads "Not paid".
Timestamps are parsed when they are ISO-8601 and shown as
``YYYY-MM-DD HH:MM`` in their own offset; anything else is shown as given.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from autoticket.core.constants import (
    DATETIME_DISPLAY_FORMAT,
    DEFAULT_CURRENCY_SYMBOL,
    EMPTY_ALL_HINT,
    EMPTY_ALL_TITLE,
    EMPTY_SEARCH_HINT,
    EMPTY_SEARCH_TITLE,
    MISSING_VALUE_LABEL,
    NOT_PAID_LABEL,
    QUERY_FIELDS,
    STILL_PARKED_LABEL,
    SUBMIT_LABEL_ALL,
    SUBMIT_LABEL_SEARCH,
    SearchMode,
)

_CENTS = Decimal("0.01")


def to_amount(value: Any) -> Decimal | None:
    """Parse a price into a finite Decimal, or None if absent/unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None
    return amount if amount.is_finite() else None


def format_price(price: Any, currency_symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """``45.5`` → ``"R 45.50"``; ``None`` → ``"Not paid"``; ``0`` → ``"R 0.00"``."""
    amount = to_amount(price)
    if amount is None:
        return NOT_PAID_LABEL
    try:
        rounded = amount.quantize(_CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return NOT_PAID_LABEL
    if rounded.is_zero():
        rounded = rounded.copy_abs()
    return f"{currency_symbol} {rounded}"


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def format_date_time(value: Any) -> str:
    """Render a timestamp for display; ``"N/A"`` when absent."""
    if _is_missing(value):
        return MISSING_VALUE_LABEL
    if isinstance(value, datetime):
        return value.strftime(DATETIME_DISPLAY_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return value
        return parsed.strftime(DATETIME_DISPLAY_FORMAT)
    return str(value)


def format_exit_time(value: Any) -> str:
    """Like :func:`format_date_time`, but an absent exit means still parked."""
    if _is_missing(value):
        return STILL_PARKED_LABEL
    return format_date_time(value)


def empty_result_message(mode: SearchMode) -> tuple[str, str]:
    """(title, hint) shown when a query returns no tickets."""
    if mode is SearchMode.ALL:
        return EMPTY_ALL_TITLE, EMPTY_ALL_HINT
    return EMPTY_SEARCH_TITLE, EMPTY_SEARCH_HINT


def query_field_for(mode: SearchMode) -> tuple[str, str] | None:
    """(label, placeholder) of the query input, or None when hidden."""
    return QUERY_FIELDS.get(mode)


def submit_label_for(mode: SearchMode) -> str:
    return SUBMIT_LABEL_ALL if mode is SearchMode.ALL else SUBMIT_LABEL_SEARCH
