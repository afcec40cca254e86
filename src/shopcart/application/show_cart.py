"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from shopcart.application.dto import CartDTO, CartLineDTO
from shopcart.domain.exceptions import EntityNotFoundError
from shopcart.domain.model.shopping_cart import ShoppingCart
from shopcart.domain.repository.cart_repository import CartRepository

_TIME_FORMAT = "%Y-%m-%d %H:%M UTC"


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str) -> CartDTO:
        cart = self._cart_repo.find(cart_id)
        if cart is None:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")
        return self._to_dto(cart)

    @staticmethod
    def _to_dto(cart: ShoppingCart) -> CartDTO:
        closed_at = cart.confirmed_at or cart.cancelled_at
        return CartDTO(
            id=cart.id,
            client_id=cart.client_id,
            status=cart.status.value,
            items=[
                CartLineDTO(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=f"${item.unit_price:.2f}",
                    line_total=str(item.total_price),
                )
                for item in cart.items
            ],
            item_count=cart.item_count,
            total=str(cart.total),
            opened_at=cart.opened_at.strftime(_TIME_FORMAT),
            closed_at=closed_at.strftime(_TIME_FORMAT) if closed_at else None,
            version=cart.version,
        )
