"""Commands accepted by the shopping cart.

A command is a request; the decider turns it into events or rejects it.
Construction validates the input so malformed commands never reach the
decider.
"""

from __future__ import annotations

from dataclasses import dataclass

from shopcart.domain.exceptions import ValidationError
from shopcart.domain.model.value_objects import PricedProductItem, ProductItem


def _require_id(value: str | None, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} is required")


@dataclass(frozen=True)
class AddProduct:
    cart_id: str
    product_item: ProductItem
    client_id: str | None = None

    def __post_init__(self) -> None:
        _require_id(self.cart_id, "Cart ID")
        if self.client_id is not None:
            _require_id(self.client_id, "Client ID")
        if not isinstance(self.product_item, ProductItem):
            raise ValidationError("Product item is required")
        if isinstance(self.product_item, PricedProductItem):
            raise ValidationError("Added product must not carry a price; the cart prices it")


@dataclass(frozen=True)
class RemoveProduct:
    cart_id: str
    product_item: PricedProductItem

    def __post_init__(self) -> None:
        _require_id(self.cart_id, "Cart ID")
        if not isinstance(self.product_item, PricedProductItem):
            raise ValidationError("Priced product item is required")


@dataclass(frozen=True)
class Confirm:
    cart_id: str
    client_id: str | None = None

    def __post_init__(self) -> None:
        _require_id(self.cart_id, "Cart ID")
        if self.client_id is not None:
            _require_id(self.client_id, "Client ID")


@dataclass(frozen=True)
class Cancel:
    cart_id: str

    def __post_init__(self) -> None:
        _require_id(self.cart_id, "Cart ID")


CartCommand = AddProduct | RemoveProduct | Confirm | Cancel

COMMAND_TYPES: tuple[type, ...] = (AddProduct, RemoveProduct, Confirm, Cancel)
