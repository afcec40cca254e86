"""Application service: handle a cart command.

Runs the repository's read-decide-write cycle with the decider as the
decision step.  A ConcurrencyConflict means another writer stored the
cart in between; the whole cycle is retried against fresh state.
"""

from __future__ import annotations

import structlog

from shopcart.domain.decider import CartDecider
from shopcart.domain.exceptions import ConcurrencyConflict, ValidationError
from shopcart.domain.model.commands import CartCommand
from shopcart.domain.model.events import CartEvent
from shopcart.domain.repository.cart_repository import CartRepository

logger = structlog.get_logger(__name__)


class CartCommandHandler:

    def __init__(
        self,
        decider: CartDecider,
        cart_repo: CartRepository,
        max_retries: int = 3,
    ) -> None:
        self._decider = decider
        self._cart_repo = cart_repo
        self._max_retries = max_retries

    def handle(self, cart_id: str, command: CartCommand) -> list[CartEvent]:
        """Decide and persist *command*; return the events it produced.

        Domain errors propagate unchanged and leave the cart as it was.
        """
        if command.cart_id != cart_id:
            raise ValidationError(
                f"Command is for cart '{command.cart_id}', not '{cart_id}'"
            )

        for attempt in range(1, self._max_retries + 1):
            try:
                events = self._cart_repo.get_and_apply(
                    cart_id,
                    lambda state: self._decider.decide(command, state),
                )
            except ConcurrencyConflict:
                if attempt == self._max_retries:
                    logger.warning(
                        "Giving up on cart command",
                        cart_id=cart_id,
                        command=type(command).__name__,
                        attempts=attempt,
                    )
                    raise
                logger.info(
                    "Concurrency conflict, retrying",
                    cart_id=cart_id,
                    command=type(command).__name__,
                    attempt=attempt,
                )
                continue

            logger.info(
                "Handled cart command",
                cart_id=cart_id,
                command=type(command).__name__,
                events=[type(e).__name__ for e in events],
            )
            return events

        raise ConcurrencyConflict(f"Cart '{cart_id}' could not be updated")
