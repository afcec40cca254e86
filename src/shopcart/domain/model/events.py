"""Domain events of the shopping cart.

Events are facts: immutable, append-only per cart id and the only
durable record of what happened.  Every event carries the cart id and
the moment it happened.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shopcart.domain.model.value_objects import PricedProductItem


@dataclass(frozen=True)
class Opened:
    cart_id: str
    client_id: str | None
    opened_at: datetime


@dataclass(frozen=True)
class ProductAdded:
    cart_id: str
    product_item: PricedProductItem
    added_at: datetime


@dataclass(frozen=True)
class ProductRemoved:
    cart_id: str
    product_item: PricedProductItem
    removed_at: datetime


@dataclass(frozen=True)
class Confirmed:
    cart_id: str
    client_id: str | None
    confirmed_at: datetime


@dataclass(frozen=True)
class Cancelled:
    cart_id: str
    cancelled_at: datetime


CartEvent = Opened | ProductAdded | ProductRemoved | Confirmed | Cancelled

EVENT_TYPES: tuple[type, ...] = (Opened, ProductAdded, ProductRemoved, Confirmed, Cancelled)


def occurred_at(event: CartEvent) -> datetime:
    """Timestamp of any event variant."""
    if isinstance(event, Opened):
        return event.opened_at
    if isinstance(event, ProductAdded):
        return event.added_at
    if isinstance(event, ProductRemoved):
        return event.removed_at
    if isinstance(event, Confirmed):
        return event.confirmed_at
    return event.cancelled_at
