"""JSON-friendly encoding of cart events.

Every event becomes a flat dict with a ``type`` discriminator.  Decimals
are kept as strings and datetimes as ISO-8601 so decoding reproduces an
equal event.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from decimal import Decimal
from typing import Any

from shopcart.domain.exceptions import InvariantViolation
from shopcart.domain.model.events import (
    Cancelled,
    CartEvent,
    Confirmed,
    Opened,
    ProductAdded,
    ProductRemoved,
)
from shopcart.domain.model.value_objects import PricedProductItem


def encode_item(item: PricedProductItem) -> dict[str, Any]:
    return {
        "product_id": item.product_id,
        "quantity": item.quantity,
        "unit_price": str(item.unit_price),
    }


def decode_item(raw: dict[str, Any]) -> PricedProductItem:
    return PricedProductItem(raw["product_id"], raw["quantity"], Decimal(raw["unit_price"]))


def encode_event(event: CartEvent) -> dict[str, Any]:
    raw: dict[str, Any] = {"type": type(event).__name__, "cart_id": event.cart_id}

    if isinstance(event, Opened):
        raw["client_id"] = event.client_id
        raw["opened_at"] = event.opened_at.isoformat()
    elif isinstance(event, ProductAdded):
        raw["product_item"] = encode_item(event.product_item)
        raw["added_at"] = event.added_at.isoformat()
    elif isinstance(event, ProductRemoved):
        raw["product_item"] = encode_item(event.product_item)
        raw["removed_at"] = event.removed_at.isoformat()
    elif isinstance(event, Confirmed):
        raw["client_id"] = event.client_id
        raw["confirmed_at"] = event.confirmed_at.isoformat()
    elif isinstance(event, Cancelled):
        raw["cancelled_at"] = event.cancelled_at.isoformat()
    else:
        raise TypeError(f"Not a cart event: {event!r}")

    return raw


_DECODERS: dict[str, Callable[[dict[str, Any]], CartEvent]] = {
    "Opened": lambda raw: Opened(
        raw["cart_id"], raw["client_id"], datetime.fromisoformat(raw["opened_at"])
    ),
    "ProductAdded": lambda raw: ProductAdded(
        raw["cart_id"],
        decode_item(raw["product_item"]),
        datetime.fromisoformat(raw["added_at"]),
    ),
    "ProductRemoved": lambda raw: ProductRemoved(
        raw["cart_id"],
        decode_item(raw["product_item"]),
        datetime.fromisoformat(raw["removed_at"]),
    ),
    "Confirmed": lambda raw: Confirmed(
        raw["cart_id"], raw["client_id"], datetime.fromisoformat(raw["confirmed_at"])
    ),
    "Cancelled": lambda raw: Cancelled(
        raw["cart_id"], datetime.fromisoformat(raw["cancelled_at"])
    ),
}


def decode_event(raw: dict[str, Any]) -> CartEvent:
    decoder = _DECODERS.get(raw.get("type", ""))
    if decoder is None:
        raise InvariantViolation(f"Unknown event type in cart history: {raw.get('type')!r}")
    return decoder(raw)
