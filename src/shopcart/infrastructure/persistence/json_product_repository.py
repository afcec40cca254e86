"""JSON-file-backed product catalog.

Products are stored as an object keyed by product id:

    {"1": {"name": "Widget", "price": "9.99", "currency": "USD"}}
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Any

from shopcart.domain.model.product import Product
from shopcart.domain.model.value_objects import Money
from shopcart.domain.repository.product_repository import ProductRepository
from shopcart.infrastructure.persistence.json_file import (
    ensure_json_file,
    read_json,
    write_json_atomically,
)


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        ensure_json_file(file_path, {})

    def get_by_id(self, product_id: str) -> Product | None:
        raw = read_json(self._file_path).get(product_id)
        return self._to_domain(product_id, raw) if raw is not None else None

    def get_by_name(self, name: str) -> Product | None:
        wanted = name.strip().lower()
        return next((p for p in self.list_all() if p.name.lower() == wanted), None)

    def list_all(self) -> list[Product]:
        return [
            self._to_domain(product_id, raw)
            for product_id, raw in read_json(self._file_path).items()
        ]

    def save(self, product: Product) -> None:
        catalog = read_json(self._file_path)
        catalog[product.id] = {
            "name": product.name,
            "price": str(product.price.amount),
            "currency": product.price.currency,
        }
        write_json_atomically(self._file_path, catalog)

    @staticmethod
    def _to_domain(product_id: str, raw: dict[str, Any]) -> Product:
        return Product(
            id=product_id,
            name=raw["name"],
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
        )
