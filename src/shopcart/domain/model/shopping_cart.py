"""ShoppingCart read model: the stored projection of a cart's events.

The event log is the source of truth; this record is a cache kept
consistent with it by applying the very same events.  The repository
loads it, maps it to the decider's CartState and stores it back together
with the new events.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

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
from shopcart.domain.model.value_objects import Money, PricedProductItem


@dataclass
class ShoppingCart:
    """Denormalized cart record.

    Use ``ShoppingCart.open()`` to create one from an ``Opened`` event
    and ``apply()`` for everything after that.  The ``__init__`` is
    intentionally simple so the repository can reconstitute persisted
    carts without replaying anything.
    """

    id: str
    status: CartStatus
    opened_at: datetime
    client_id: str | None = None
    items: list[PricedProductItem] = field(default_factory=list)
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    version: int = 0

    # --- Event application ----------------------------------------------------

    @staticmethod
    def open(event: Opened) -> ShoppingCart:
        return ShoppingCart(
            id=event.cart_id,
            status=CartStatus.PENDING,
            opened_at=event.opened_at,
            client_id=event.client_id,
            version=1,
        )

    def apply(self, event: CartEvent) -> None:
        """Fold one event into this record, in place."""
        if event.cart_id != self.id:
            raise InvariantViolation(
                f"Event for cart '{event.cart_id}' applied to cart '{self.id}'"
            )
        if isinstance(event, Opened):
            raise InvariantViolation(f"Cart '{self.id}' is already opened")
        if self.status != CartStatus.PENDING:
            raise InvariantViolation(
                f"Cannot apply {type(event).__name__} to cart '{self.id}' "
                f"in {self.status.value} status"
            )

        if isinstance(event, ProductAdded):
            self._apply_product_added(event)
        elif isinstance(event, ProductRemoved):
            self._apply_product_removed(event)
        elif isinstance(event, Confirmed):
            self.status = CartStatus.CONFIRMED
            self.client_id = event.client_id
            self.confirmed_at = event.confirmed_at
        elif isinstance(event, Cancelled):
            self.status = CartStatus.CANCELLED
            self.cancelled_at = event.cancelled_at
        else:
            raise InvariantViolation(f"Unknown event: {event!r}")

        self.version += 1

    def _apply_product_added(self, event: ProductAdded) -> None:
        new_item = event.product_item
        existing = self._find_item_matching(new_item)

        if existing is None:
            self.items.append(new_item)
            return

        self._replace(existing, existing.merge_with(new_item))

    def _apply_product_removed(self, event: ProductRemoved) -> None:
        to_remove = event.product_item
        existing = self._find_item_matching(to_remove)

        if existing is None:
            raise InvariantViolation(
                f"Product '{to_remove.product_id}' at {to_remove.unit_price} "
                f"is not in cart '{self.id}'"
            )
        if not existing.has_enough(to_remove.quantity):
            raise InvariantViolation(
                f"Cannot remove {to_remove.quantity} of product '{to_remove.product_id}' "
                f"from cart '{self.id}', only {existing.quantity} held"
            )

        if existing.has_the_same_quantity(to_remove):
            self.items.remove(existing)
            return

        self._replace(existing, existing.subtract(to_remove))

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero()
        for item in self.items:
            result = result + item.total_price
        return result

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    # --- Internal helpers -----------------------------------------------------

    def _find_item_matching(self, item: PricedProductItem) -> PricedProductItem | None:
        for existing in self.items:
            if existing.matches_product_and_price(item):
                return existing
        return None

    def _replace(self, existing: PricedProductItem, replacement: PricedProductItem) -> None:
        self.items[self.items.index(existing)] = replacement


def to_state(cart: ShoppingCart | None) -> CartState:
    """Map the stored record (or its absence) to the decider's state."""
    if cart is None:
        return Empty()

    if cart.status == CartStatus.PENDING:
        return Pending(
            lines={item.key: item.quantity for item in cart.items},
            client_id=cart.client_id,
            opened_at=cart.opened_at,
        )
    if cart.status == CartStatus.CONFIRMED:
        return Closed(CartStatus.CONFIRMED, cart.confirmed_at, cart.client_id)  # type: ignore[arg-type]
    if cart.status == CartStatus.CANCELLED:
        return Closed(CartStatus.CANCELLED, cart.cancelled_at, cart.client_id)  # type: ignore[arg-type]

    raise InvariantViolation(f"Unknown cart status: {cart.status!r}")
