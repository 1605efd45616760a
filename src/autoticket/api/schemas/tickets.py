"""Ticket entity schemas."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class Ticket(BaseModel):
    """Read-only projection of a ticket record owned by the remote store.

    Only ``ticket_id`` is required; everything else may be missing and is
    defaulted to ``None`` so the view never fails on a partial record.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    ticket_id: str
    license_plate: str | None = None
    lot_id: str | None = None
    entry_time: datetime | str | None = None
    exit_time: datetime | str | None = None
    price: Decimal | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _lenient_price(cls, value: Any) -> Any:
        """Unparseable prices are treated as not computed."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str) and not value.strip():
            return None
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        return amount if amount.is_finite() else None

    @field_validator("license_plate", "lot_id", mode="before")
    @classmethod
    def _text_or_missing(cls, value: Any) -> Any:
        """Numbers become text; any other non-string value is treated as missing."""
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return value if isinstance(value, str) else None

    @field_validator("entry_time", "exit_time", mode="before")
    @classmethod
    def _blank_time_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value if value.strip() else None
        if isinstance(value, bool):
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, (int, float)):
            return value
        return None

    @property
    def is_parked(self) -> bool:
        return self.exit_time is None


class SearchRequest(BaseModel):
    """Body of a search submission."""

    mode: str = "all"
    query: str = ""
