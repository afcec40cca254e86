"""The decider's view of a shopping cart.

Exactly three variants exist.  State is never stored with an identity of
its own: it is derived by folding events, or mapped from the stored
ShoppingCart projection.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum

from shopcart.domain.model.value_objects import LineKey, Money


class CartStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class Empty:
    """No cart exists yet for this id."""


@dataclass(frozen=True)
class Pending:
    """An open cart.

    ``lines`` maps ``(product_id, unit_price)`` to a quantity that is
    always greater than zero.  The mapping is never mutated; the
    projector builds a new one for every event.
    """

    lines: dict[LineKey, int] = field(default_factory=dict)
    client_id: str | None = None
    opened_at: datetime | None = None

    def quantity_of(self, key: LineKey) -> int:
        return self.lines.get(key, 0)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total(self) -> Money:
        result = Money.zero()
        for (_, unit_price), quantity in self.lines.items():
            result = result + Money(Decimal(unit_price)) * quantity
        return result


@dataclass(frozen=True)
class Closed:
    """A confirmed or cancelled cart.  Terminal."""

    status: CartStatus
    closed_at: datetime
    client_id: str | None = None


CartState = Empty | Pending | Closed

STATE_TYPES: tuple[type, ...] = (Empty, Pending, Closed)
