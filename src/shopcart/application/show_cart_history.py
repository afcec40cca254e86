"""Application service: Show Cart History use case (query)."""

from __future__ import annotations

from shopcart.application.dto import EventDTO
from shopcart.domain.exceptions import EntityNotFoundError
from shopcart.domain.model.events import (
    CartEvent,
    Confirmed,
    Opened,
    ProductAdded,
    ProductRemoved,
    occurred_at,
)
from shopcart.domain.repository.cart_repository import CartRepository


class ShowCartHistoryHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, cart_id: str) -> list[EventDTO]:
        events = self._cart_repo.events_for(cart_id)
        if not events:
            raise EntityNotFoundError(f"Cart '{cart_id}' not found")
        return [self._to_dto(event) for event in events]

    @staticmethod
    def _to_dto(event: CartEvent) -> EventDTO:
        if isinstance(event, (ProductAdded, ProductRemoved)):
            item = event.product_item
            details = f"{item.quantity} x {item.product_id} @ ${item.unit_price:.2f}"
        elif isinstance(event, (Opened, Confirmed)):
            details = f"client={event.client_id or '-'}"
        else:
            details = ""
        return EventDTO(
            type=type(event).__name__,
            occurred_at=occurred_at(event).isoformat(),
            details=details,
        )
