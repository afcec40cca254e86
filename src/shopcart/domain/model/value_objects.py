"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from shopcart.domain.exceptions import ValidationError

LineKey = tuple[str, Decimal]


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        return Money(to_decimal(amount))

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))


def to_decimal(value: str | int | Decimal, what: str = "amount") -> Decimal:
    """Coerce user input to a finite Decimal or raise ValidationError."""
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid {what}: {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"Invalid {what}: {value!r}")
    return result


@dataclass(frozen=True)
class ProductItem:
    """A quantity of one product, before any price is attached."""

    product_id: str
    quantity: int

    def __post_init__(self) -> None:
        if not isinstance(self.product_id, str) or not self.product_id.strip():
            raise ValidationError("Product ID is required")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.quantity).__name__}"
            )
        if self.quantity <= 0:
            raise ValidationError("Quantity has to be a positive number")

    def matches_product(self, other: ProductItem) -> bool:
        return self.product_id == other.product_id

    def merge_with(self, other: ProductItem) -> ProductItem:
        if not self.matches_product(other):
            raise ValidationError("Product does not match.")
        return ProductItem(self.product_id, self.quantity + other.quantity)

    def subtract(self, other: ProductItem) -> ProductItem:
        """Return what is left after taking *other* away.

        Raises ValidationError when nothing would be left; callers that
        want to drop the whole line check ``has_the_same_quantity`` first.
        """
        if not self.matches_product(other):
            raise ValidationError("Product does not match.")
        return ProductItem(self.product_id, self.quantity - other.quantity)

    def has_enough(self, quantity: int) -> bool:
        return self.quantity >= quantity

    def has_the_same_quantity(self, other: ProductItem) -> bool:
        return self.quantity == other.quantity


@dataclass(frozen=True)
class PricedProductItem(ProductItem):
    """A product item with the unit price it was added at.

    Two priced items describe the same cart line only when both the
    product and the unit price match, see ``key``.
    """

    unit_price: Decimal

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.unit_price, Decimal):
            raise ValidationError(
                f"Unit price must be a Decimal, got {type(self.unit_price).__name__}"
            )
        if not self.unit_price.is_finite() or self.unit_price <= 0:
            raise ValidationError("Unit price has to be positive number")

    @staticmethod
    def create(product_item: ProductItem, unit_price: str | int | Decimal) -> PricedProductItem:
        return PricedProductItem(
            product_item.product_id,
            product_item.quantity,
            to_decimal(unit_price, "unit price"),
        )

    @staticmethod
    def of(product_id: str, quantity: int, unit_price: str | int | Decimal) -> PricedProductItem:
        """Convenient factory that coerces the price to Decimal safely."""
        return PricedProductItem.create(ProductItem(product_id, quantity), unit_price)

    @property
    def product_item(self) -> ProductItem:
        return ProductItem(self.product_id, self.quantity)

    @property
    def key(self) -> LineKey:
        return (self.product_id, self.unit_price)

    @property
    def total_price(self) -> Money:
        return Money(self.unit_price) * self.quantity

    def matches_product_and_price(self, other: PricedProductItem) -> bool:
        return self.key == other.key

    def merge_with(self, other: PricedProductItem) -> PricedProductItem:  # type: ignore[override]
        if not self.matches_product_and_price(other):
            raise ValidationError("Product or price does not match.")
        return PricedProductItem(
            self.product_id, self.quantity + other.quantity, self.unit_price
        )

    def subtract(self, other: PricedProductItem) -> PricedProductItem:  # type: ignore[override]
        if not self.matches_product_and_price(other):
            raise ValidationError("Product or price does not match.")
        return PricedProductItem(
            self.product_id, self.quantity - other.quantity, self.unit_price
        )
