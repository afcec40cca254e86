"""Tests for the JSON event encoding."""

import json
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from shopcart.domain.exceptions import InvariantViolation
from shopcart.domain.model.events import (
    Cancelled,
    Confirmed,
    Opened,
    ProductAdded,
    ProductRemoved,
)
from shopcart.domain.model.value_objects import PricedProductItem
from shopcart.infrastructure.persistence.event_codec import decode_event, encode_event

AT = datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone(timedelta(hours=2)))
ITEM = PricedProductItem("P", 3, Decimal("9.990"))

EVENTS = [
    Opened("cart-1", "C", AT),
    Opened("cart-1", None, AT),
    ProductAdded("cart-1", ITEM, AT),
    ProductRemoved("cart-1", ITEM, AT),
    Confirmed("cart-1", "C", AT),
    Cancelled("cart-1", AT),
]


@pytest.mark.parametrize("event", EVENTS, ids=lambda e: type(e).__name__)
def test_every_event_survives_json(event):
    raw = json.loads(json.dumps(encode_event(event)))
    decoded = decode_event(raw)

    assert decoded == event
    assert type(decoded) is type(event)


def test_decimal_is_stored_as_text():
    raw = encode_event(ProductAdded("cart-1", ITEM, AT))
    assert raw["type"] == "ProductAdded"
    assert raw["product_item"] == {"product_id": "P", "quantity": 3, "unit_price": "9.990"}


def test_unknown_type_is_corruption():
    with pytest.raises(InvariantViolation, match="Unknown event type"):
        decode_event({"type": "ProductTeleported", "cart_id": "cart-1"})
