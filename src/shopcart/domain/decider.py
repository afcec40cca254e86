"""Cart decider: turns a command and the current state into events.

``decide`` is a pure function of its inputs plus the injected price
calculator and clock.  It never mutates state; applying the returned
events is the projector's job.

Every (state, command) pair is listed in ``TRANSITIONS``, including the
ones that are rejected, so adding a new state or command variant without
deciding what it does is caught by the test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from shopcart.domain.exceptions import (
    EmptyCart,
    InsufficientQuantity,
    InvalidTransition,
    PriceCalculationError,
)
from shopcart.domain.model.cart_state import CartState, Closed, Empty, Pending
from shopcart.domain.model.commands import AddProduct, Cancel, CartCommand, Confirm, RemoveProduct
from shopcart.domain.model.events import (
    Cancelled,
    CartEvent,
    Confirmed,
    Opened,
    ProductAdded,
    ProductRemoved,
)
from shopcart.domain.model.value_objects import PricedProductItem, ProductItem
from shopcart.domain.service.clock import Clock
from shopcart.domain.service.price_calculator import ProductPriceCalculator

_ACTIONS = {
    AddProduct: "Adding product to",
    RemoveProduct: "Removing product from",
    Confirm: "Confirming",
    Cancel: "Cancelling",
}


class CartDecider:

    def __init__(self, price_calculator: ProductPriceCalculator, clock: Clock) -> None:
        self._price_calculator = price_calculator
        self._clock = clock

    def decide(self, command: CartCommand, state: CartState) -> list[CartEvent]:
        decision = TRANSITIONS.get((type(state), type(command)))
        if decision is None:
            raise InvalidTransition(
                f"Unsupported command {type(command).__name__} "
                f"for state {type(state).__name__}"
            )
        return decision(self, command, state)

    # --- Transitions ----------------------------------------------------------

    def _open_and_add(self, command: AddProduct, state: Empty) -> list[CartEvent]:
        now = self._clock.now()
        return [
            Opened(command.cart_id, command.client_id, now),
            ProductAdded(command.cart_id, self._price(command.product_item), now),
        ]

    def _add(self, command: AddProduct, state: Pending) -> list[CartEvent]:
        return [
            ProductAdded(command.cart_id, self._price(command.product_item), self._clock.now())
        ]

    def _remove(self, command: RemoveProduct, state: Pending) -> list[CartEvent]:
        item = command.product_item
        held = state.quantity_of(item.key)
        if held < item.quantity:
            raise InsufficientQuantity(
                f"Cannot remove {item.quantity} items of product '{item.product_id}' "
                f"at {item.unit_price}, only {held} in cart"
            )
        return [ProductRemoved(command.cart_id, item, self._clock.now())]

    def _confirm(self, command: Confirm, state: Pending) -> list[CartEvent]:
        if state.is_empty:
            raise EmptyCart("Confirming empty cart is not allowed.")
        client_id = command.client_id or state.client_id
        return [Confirmed(command.cart_id, client_id, self._clock.now())]

    def _cancel(self, command: Cancel, state: Pending) -> list[CartEvent]:
        return [Cancelled(command.cart_id, self._clock.now())]

    def _absorb(self, command: CartCommand, state: Closed) -> list[CartEvent]:
        return []

    def _reject(self, command: CartCommand, state: CartState) -> list[CartEvent]:
        if isinstance(state, Closed):
            where = f"the cart in '{state.status.value}' status"
        else:
            where = "a cart that was not opened yet"
        raise InvalidTransition(f"{_ACTIONS[type(command)]} {where} is not allowed.")

    # --- Pricing --------------------------------------------------------------

    def _price(self, product_item: ProductItem) -> PricedProductItem:
        priced = self._price_calculator.calculate(product_item)
        if len(priced) != 1:
            raise PriceCalculationError(
                f"Expected one priced item for product '{product_item.product_id}', "
                f"got {len(priced)}"
            )
        item = priced[0]
        if not isinstance(item, PricedProductItem) or item.product_item != product_item:
            raise PriceCalculationError(
                f"Price calculator returned {item!r} for {product_item!r}"
            )
        return item


Decision = Callable[[CartDecider, Any, Any], list[CartEvent]]

TRANSITIONS: dict[tuple[type, type], Decision] = {
    (Empty, AddProduct): CartDecider._open_and_add,
    (Empty, RemoveProduct): CartDecider._reject,
    (Empty, Confirm): CartDecider._reject,
    (Empty, Cancel): CartDecider._reject,
    (Pending, AddProduct): CartDecider._add,
    (Pending, RemoveProduct): CartDecider._remove,
    (Pending, Confirm): CartDecider._confirm,
    (Pending, Cancel): CartDecider._cancel,
    (Closed, AddProduct): CartDecider._reject,
    (Closed, RemoveProduct): CartDecider._reject,
    (Closed, Confirm): CartDecider._absorb,
    (Closed, Cancel): CartDecider._absorb,
}
