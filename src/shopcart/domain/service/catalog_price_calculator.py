"""Price calculator backed by the product catalog."""

from __future__ import annotations

from shopcart.domain.exceptions import EntityNotFoundError
from shopcart.domain.model.value_objects import PricedProductItem, ProductItem
from shopcart.domain.repository.product_repository import ProductRepository
from shopcart.domain.service.price_calculator import ProductPriceCalculator


class CatalogPriceCalculator(ProductPriceCalculator):
    """Prices each item at the product's current catalog price."""

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def calculate(self, *product_items: ProductItem) -> list[PricedProductItem]:
        priced: list[PricedProductItem] = []
        for item in product_items:
            product = self._product_repo.get_by_id(item.product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{item.product_id}' not found")
            priced.append(PricedProductItem.create(item, product.price.amount))
        return priced
