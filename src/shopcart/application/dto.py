"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartLineDTO:
    """Output: a single cart line as displayed to the user."""

    product_id: str
    quantity: int
    unit_price: str  # formatted, e.g. "$9.99"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    """Output: the current projection of a cart."""

    id: str
    client_id: str | None
    status: str
    items: list[CartLineDTO]
    item_count: int
    total: str
    opened_at: str
    closed_at: str | None
    version: int


@dataclass(frozen=True)
class EventDTO:
    """Output: one entry of a cart's history."""

    type: str
    occurred_at: str
    details: str
