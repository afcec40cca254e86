"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from shopcart.domain.decider import CartDecider
from shopcart.domain.service.catalog_price_calculator import CatalogPriceCalculator
from shopcart.infrastructure.clock import SystemClock
from shopcart.infrastructure.persistence.json_cart_repository import JsonCartRepository
from shopcart.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

DATA_DIR_ENVVAR = "SHOPCART_DATA_DIR"


def product_repository(data_dir: Path = DEFAULT_DATA_DIR) -> JsonProductRepository:
    return JsonProductRepository(data_dir / "products.json")


def cart_repository(data_dir: Path = DEFAULT_DATA_DIR) -> JsonCartRepository:
    return JsonCartRepository(data_dir / "carts.json")


def cart_decider(data_dir: Path = DEFAULT_DATA_DIR) -> CartDecider:
    return CartDecider(
        price_calculator=CatalogPriceCalculator(product_repository(data_dir)),
        clock=SystemClock(),
    )
