from typing import Any, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import metrics
from src.service.marketplace.app.interface.i_order_repo import IOrderRepo
from src.service.marketplace.app.interface.i_product_repo import IProductRepo
from src.service.marketplace.domain.entity.order_entity import Order, parse_quantity
from src.service.marketplace.domain.value_object.product_snapshot import ProductSnapshot


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class CreateOrderUseCase:
    """
    Place an order against a product.

    Flow:
    1. Validate productId / buyerId / quantity
    2. Read the product and freeze name, price and seller into a snapshot
    3. Build the order (status always Pending, totalPrice = price x quantity)
    4. Persist, guarded by the product revision read in step 2
       (product changed or deleted meanwhile -> 409, nothing written)

    The product itself is never modified.
    """

    def __init__(self, *, product_repo: IProductRepo, order_repo: IOrderRepo) -> None:
        self.product_repo = product_repo
        self.order_repo = order_repo

    @classmethod
    @inject
    def depends(
        cls,
        product_repo: IProductRepo = Depends(Provide[Container.product_repo]),
        order_repo: IOrderRepo = Depends(Provide[Container.order_repo]),
    ) -> Self:
        return cls(product_repo=product_repo, order_repo=order_repo)

    @Logger.io
    async def create(
        self,
        *,
        product_id: Optional[str],
        buyer_id: Optional[str],
        quantity: Any,
        shipping_address: Optional[str] = None,
        caller_id: Optional[str] = None,
    ) -> Order:
        if caller_id is not None:
            if _is_missing(buyer_id):
                buyer_id = caller_id
            elif buyer_id != caller_id:
                raise ForbiddenError('Cannot place an order on behalf of another buyer')

        if _is_missing(product_id) or _is_missing(buyer_id) or _is_missing(quantity):
            raise InvalidInputError('ProductId, buyerId, and quantity are required')
        order_quantity = parse_quantity(quantity)

        product = await self.product_repo.get_by_id(product_id)  # type: ignore[arg-type]
        if not product:
            raise NotFoundError('Product not found')

        snapshot = ProductSnapshot.from_product(product)
        order = Order.create(
            product=snapshot,
            buyer_id=buyer_id,  # type: ignore[arg-type]
            quantity=order_quantity,
            shipping_address=shipping_address,
        )

        try:
            created_order = await self.order_repo.create(order, product=snapshot)
        except ConflictError:
            metrics.record_order_created(result='conflict')
            raise
        metrics.record_order_created(result='success')

        Logger.base.info(
            f'🧾 [CREATE_ORDER] Order {created_order.id} placed by {created_order.buyer_id} '
            f'for product {snapshot.product_id} x{order_quantity}'
        )
        return created_order
