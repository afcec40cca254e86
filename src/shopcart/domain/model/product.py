"""Product aggregate.

Products live independently of carts.  A cart line captures the unit
price at the moment the product was added, so changing a price here
never touches existing lines; the next AddProduct simply opens a new
line at the new price.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shopcart.domain.exceptions import ValidationError
from shopcart.domain.model.value_objects import Money

CENT = Decimal("0.01")


@dataclass
class Product:
    """A product in the catalog.

    Prices are whole cents, so the price shown for a cart line is
    exactly the price that identifies it.
    """

    id: str
    name: str
    price: Money

    def __post_init__(self) -> None:
        _check_price(self.price)

    def update_price(self, new_price: Money) -> None:
        _check_price(new_price)
        self.price = new_price


def _check_price(price: Money) -> None:
    if price.amount <= 0:
        raise ValidationError("Product price must be greater than zero")
    if price.amount != price.amount.quantize(CENT):
        raise ValidationError(
            f"Product price cannot have more than 2 decimal places, got {price.amount}"
        )
