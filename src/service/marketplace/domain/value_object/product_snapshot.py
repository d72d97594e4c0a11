"""Product data frozen into an order at creation time."""

from decimal import Decimal
import math

import attrs

from src.platform.exception.exceptions import InvalidInputError
from src.service.marketplace.domain.entity.product_entity import Product


@attrs.define(frozen=True)
class ProductSnapshot:
    product_id: str
    name: str
    price: float
    seller_id: str
    revision: str | None

    @classmethod
    def from_product(cls, product: Product) -> 'ProductSnapshot':
        return cls(
            product_id=product.id or '',
            name=product.name,
            price=product.price,
            seller_id=product.seller_id,
            revision=product.revision,
        )

    def total_for(self, quantity: int) -> float:
        # Decimal keeps 9.99 x 3 at 29.97 instead of 29.969999...
        total = float(Decimal(str(self.price)) * quantity)
        if not math.isfinite(total):
            raise InvalidInputError('Total price is too large')
        return total
