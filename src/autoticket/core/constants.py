"""Domain constants for the ticket query view."""

from __future__ import annotations

from enum import Enum


class SearchMode(str, Enum):
    """Dimension by which the ticket list is filtered."""

    ALL = "all"
    LICENSE_PLATE = "license"
    LOT = "lot"


# ── Display sentinels ───────────────────────────────────────────────
DEFAULT_CURRENCY_SYMBOL = "R"
NOT_PAID_LABEL = "Not paid"
MISSING_VALUE_LABEL = "N/A"
STILL_PARKED_LABEL = "Still parked"
LOADING_MESSAGE = "Loading tickets..."
RETRY_LABEL = "Try Again"
UNKNOWN_ERROR_MESSAGE = "Unknown error"

DATETIME_DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

# ── Empty results (title, hint) ─────────────────────────────────────
EMPTY_ALL_TITLE = "No tickets found"
EMPTY_ALL_HINT = "You don't have any tickets yet."
EMPTY_SEARCH_TITLE = "No matching tickets"
EMPTY_SEARCH_HINT = "Try a different search criteria."

# ── Search form ─────────────────────────────────────────────────────
# Mode → (input label, placeholder); ALL shows no input field
QUERY_FIELDS: dict[SearchMode, tuple[str, str]] = {
    SearchMode.LICENSE_PLATE: ("License Plate", "Enter license plate"),
    SearchMode.LOT: ("Lot ID", "Enter lot ID"),
}

SUBMIT_LABEL_ALL = "Refresh All"
SUBMIT_LABEL_SEARCH = "Search"

# ── Policies ────────────────────────────────────────────────────────
UNKNOWN_MODE_POLICIES: list[str] = ["fallback", "error"]
RETRY_POLICIES: list[str] = ["all", "last"]
