"""Projector: folds events into state.

``evolve`` works on the decider's immutable CartState and is what a
replay of the event log uses.  ``project`` applies the same events to
the stored ShoppingCart read model.  Both reject any event that is not
legal for the state it is applied to: the decider is the only producer
of events, so such an event means the history is corrupt.
"""

from __future__ import annotations

from collections.abc import Iterable

from shopcart.domain.exceptions import InvariantViolation
from shopcart.domain.model.cart_state import CartState, CartStatus, Closed, Empty, Pending
from shopcart.domain.model.events import (
    Cancelled,
    CartEvent,
    Confirmed,
    Opened,
    ProductAdded,
    ProductRemoved,
)
from shopcart.domain.model.shopping_cart import ShoppingCart


def evolve(state: CartState, event: CartEvent) -> CartState:
    """Return the state after *event*; *state* itself is left untouched."""
    if isinstance(state, Empty):
        if isinstance(event, Opened):
            return Pending(lines={}, client_id=event.client_id, opened_at=event.opened_at)
        raise _illegal(state, event)

    if not isinstance(state, Pending):
        raise _illegal(state, event)

    if isinstance(event, ProductAdded):
        item = event.product_item
        lines = dict(state.lines)
        lines[item.key] = lines.get(item.key, 0) + item.quantity
        return Pending(lines=lines, client_id=state.client_id, opened_at=state.opened_at)

    if isinstance(event, ProductRemoved):
        item = event.product_item
        held = state.quantity_of(item.key)
        if held < item.quantity:
            raise InvariantViolation(
                f"Cannot remove {item.quantity} of product '{item.product_id}' "
                f"at {item.unit_price}, only {held} held"
            )
        lines = dict(state.lines)
        if held == item.quantity:
            del lines[item.key]
        else:
            lines[item.key] = held - item.quantity
        return Pending(lines=lines, client_id=state.client_id, opened_at=state.opened_at)

    if isinstance(event, Confirmed):
        return Closed(CartStatus.CONFIRMED, event.confirmed_at, event.client_id)

    if isinstance(event, Cancelled):
        return Closed(CartStatus.CANCELLED, event.cancelled_at, state.client_id)

    raise _illegal(state, event)


def fold(events: Iterable[CartEvent], state: CartState | None = None) -> CartState:
    """Replay *events* starting from *state* (``Empty`` by default)."""
    result: CartState = Empty() if state is None else state
    for event in events:
        result = evolve(result, event)
    return result


def project(cart: ShoppingCart | None, event: CartEvent) -> ShoppingCart:
    """Apply *event* to the read model, creating it on ``Opened``."""
    if cart is None:
        if not isinstance(event, Opened):
            raise InvariantViolation(
                f"{type(event).__name__} for cart '{event.cart_id}' before it was opened"
            )
        return ShoppingCart.open(event)

    cart.apply(event)
    return cart


def _illegal(state: CartState, event: CartEvent) -> InvariantViolation:
    return InvariantViolation(
        f"Cannot apply {type(event).__name__} to {type(state).__name__} cart "
        f"'{event.cart_id}'"
    )
