"""JSON-file-backed implementation of CartRepository.

One file holds both the cart projections and the per-cart event logs:

    {"carts": {"<cart id>": {...}}, "events": {"<cart id>": [{...}, ...]}}

A store rewrites the file through a temporary file and an atomic
rename, so a command's events and the updated projection land together
or not at all.  The version check and the write run under a lock file
next to the data file, so writers in other processes, or other
repository instances, wait their turn and then see the new version.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from filelock import FileLock, Timeout

from shopcart.domain.exceptions import ConcurrencyConflict
from shopcart.domain.model.cart_state import CartStatus
from shopcart.domain.model.events import CartEvent
from shopcart.domain.model.shopping_cart import ShoppingCart
from shopcart.domain.repository.cart_repository import CartRepository
from shopcart.infrastructure.persistence.event_codec import (
    decode_event,
    decode_item,
    encode_event,
    encode_item,
)
from shopcart.infrastructure.persistence.json_file import (
    ensure_json_file,
    read_json,
    write_json_atomically,
)

logger = structlog.get_logger(__name__)


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path, lock_timeout: float = 10) -> None:
        self._file_path = file_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = FileLock(f"{file_path}.lock", timeout=lock_timeout)
        with self._lock:
            ensure_json_file(file_path, {"carts": {}, "events": {}})

    # --- CartRepository interface ---------------------------------------------

    def find(self, cart_id: str) -> ShoppingCart | None:
        raw = read_json(self._file_path)["carts"].get(cart_id)
        if raw is None:
            return None
        return self._to_domain(raw)

    def events_for(self, cart_id: str) -> list[CartEvent]:
        return [decode_event(e) for e in read_json(self._file_path)["events"].get(cart_id, [])]

    def store(
        self,
        cart_id: str,
        expected_version: int,
        cart: ShoppingCart,
        events: list[CartEvent],
    ) -> None:
        try:
            self._lock.acquire()
        except Timeout as exc:
            raise ConcurrencyConflict(
                f"Cart '{cart_id}' is locked by another writer"
            ) from exc

        try:
            data = read_json(self._file_path)

            stored = data["carts"].get(cart_id)
            current_version = stored["version"] if stored is not None else 0
            if current_version != expected_version:
                logger.warning(
                    "Stale cart version",
                    cart_id=cart_id,
                    expected_version=expected_version,
                    current_version=current_version,
                )
                raise ConcurrencyConflict(
                    f"Concurrency conflict on cart '{cart_id}': expected version "
                    f"{expected_version}, but current version is {current_version}"
                )

            data["carts"][cart_id] = self._to_raw(cart)
            data["events"].setdefault(cart_id, []).extend(encode_event(e) for e in events)
            write_json_atomically(self._file_path, data)
        finally:
            self._lock.release()

        logger.debug(
            "Persisted cart events",
            cart_id=cart_id,
            version=cart.version,
            events=len(events),
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: ShoppingCart) -> dict[str, Any]:
        return {
            "id": cart.id,
            "client_id": cart.client_id,
            "status": cart.status.value,
            "opened_at": cart.opened_at.isoformat(),
            "confirmed_at": cart.confirmed_at.isoformat() if cart.confirmed_at else None,
            "cancelled_at": cart.cancelled_at.isoformat() if cart.cancelled_at else None,
            "version": cart.version,
            "items": [encode_item(item) for item in cart.items],
        }

    @staticmethod
    def _to_domain(raw: dict[str, Any]) -> ShoppingCart:
        return ShoppingCart(
            id=raw["id"],
            client_id=raw.get("client_id"),
            status=CartStatus(raw["status"]),
            opened_at=datetime.fromisoformat(raw["opened_at"]),
            confirmed_at=_parse_optional(raw.get("confirmed_at")),
            cancelled_at=_parse_optional(raw.get("cancelled_at")),
            version=raw["version"],
            items=[decode_item(i) for i in raw["items"]],
        )


def _parse_optional(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
