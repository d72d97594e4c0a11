from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import attrs

from src.platform.exception.exceptions import InvalidInputError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.domain.enum.order_status import OrderStatus
from src.service.marketplace.domain.value_object.product_snapshot import ProductSnapshot


# orders.quantity is a 32-bit INTEGER column
MAX_QUANTITY = 2**31 - 1


def parse_quantity(value: Any) -> int:
    """Accept integers in 1..MAX_QUANTITY, and integer-valued numeric strings ("3", "3.0")."""
    if isinstance(value, bool):
        raise InvalidInputError('Quantity must be a positive integer')
    if isinstance(value, int):
        amount = Decimal(value)
    else:
        try:
            amount = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidInputError('Quantity must be a positive integer')
    if not amount.is_finite() or amount != amount.to_integral_value() or amount < 1:
        raise InvalidInputError('Quantity must be a positive integer')
    # checked on the Decimal so "1e100000000" never becomes an int
    if amount > MAX_QUANTITY:
        raise InvalidInputError(f'Quantity must not exceed {MAX_QUANTITY}')
    return int(amount)


@attrs.define
class Order:
    product_id: str
    product_name: str
    buyer_id: str
    seller_id: str
    quantity: int
    total_price: float
    shipping_address: Optional[str] = None
    status: OrderStatus = OrderStatus.PENDING
    order_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    revision: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        product: ProductSnapshot,
        buyer_id: str,
        quantity: int,
        shipping_address: Optional[str] = None,
    ) -> 'Order':
        # product fields are copied now and never recomputed
        return cls(
            product_id=product.product_id,
            product_name=product.name,
            buyer_id=buyer_id,
            seller_id=product.seller_id,
            quantity=quantity,
            total_price=product.total_for(quantity),
            shipping_address=shipping_address,
            status=OrderStatus.PENDING,
            order_date=datetime.now(timezone.utc),
        )

    @Logger.io
    def change_status(self, new_status: OrderStatus) -> 'Order':
        if not self.status.can_transition_to(new_status):
            if self.status.is_terminal:
                raise InvalidInputError(f'Order is already {self.status.value}')
            raise InvalidInputError(
                f'Cannot change order status from {self.status.value} to {new_status.value}'
            )
        return attrs.evolve(self, status=new_status, updated_at=datetime.now(timezone.utc))

    def involves(self, user_id: str) -> bool:
        return user_id in (self.buyer_id, self.seller_id)
