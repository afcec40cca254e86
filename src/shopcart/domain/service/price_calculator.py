"""Price calculator port.

Defined in the domain layer so the decider never depends on where
prices come from.  Implementations must return exactly one priced item
per input item, in the same order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcart.domain.model.value_objects import PricedProductItem, ProductItem


class ProductPriceCalculator(ABC):

    @abstractmethod
    def calculate(self, *product_items: ProductItem) -> list[PricedProductItem]:
        """Attach the current unit price to each product item."""
