"""Abstract repository for the ShoppingCart aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (JSON, in-memory) live in the
infrastructure layer and in the test fakes.

Implementations provide storage only; the read-decide-write cycle in
``get_and_apply`` is shared by all of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from shopcart.domain.exceptions import InvariantViolation
from shopcart.domain.model.cart_state import CartState
from shopcart.domain.model.events import CartEvent
from shopcart.domain.model.shopping_cart import ShoppingCart, to_state
from shopcart.domain.projector import fold, project


class CartRepository(ABC):

    @abstractmethod
    def find(self, cart_id: str) -> ShoppingCart | None:
        """Return the stored projection of a cart, or None if not found."""

    @abstractmethod
    def events_for(self, cart_id: str) -> list[CartEvent]:
        """Return the cart's event log, oldest first."""

    @abstractmethod
    def store(
        self,
        cart_id: str,
        expected_version: int,
        cart: ShoppingCart,
        events: list[CartEvent],
    ) -> None:
        """Persist the projection and append *events*, all or nothing.

        Raises ConcurrencyConflict when the stored version is not
        *expected_version* (0 meaning "no cart stored yet").
        """

    # --- Read-decide-write ----------------------------------------------------

    def get_and_apply(
        self,
        cart_id: str,
        handle: Callable[[CartState], list[CartEvent]],
    ) -> list[CartEvent]:
        """Load the cart, let *handle* decide, then project and store.

        *handle* receives ``Empty`` when nothing is stored yet.  When it
        returns no events nothing is written.
        """
        cart = self.find(cart_id)
        expected_version = cart.version if cart is not None else 0

        events = handle(to_state(cart))
        if not events:
            return []

        for event in events:
            cart = project(cart, event)

        if cart is None:
            raise InvariantViolation(f"Events for cart '{cart_id}' produced no projection")
        self.store(cart_id, expected_version, cart, events)
        return events

    # --- State views ----------------------------------------------------------

    def load_state(self, cart_id: str) -> CartState:
        """State mapped from the stored projection."""
        return to_state(self.find(cart_id))

    def replay_state(self, cart_id: str) -> CartState:
        """State rebuilt by folding the full event log."""
        return fold(self.events_for(cart_id))
