from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import metrics
from src.service.marketplace.app.interface.i_order_repo import IOrderRepo
from src.service.marketplace.domain.entity.order_entity import Order
from src.service.marketplace.domain.enum.order_status import OrderStatus


class UpdateOrderStatusUseCase:
    def __init__(self, *, order_repo: IOrderRepo) -> None:
        self.order_repo = order_repo

    @classmethod
    @inject
    def depends(
        cls,
        order_repo: IOrderRepo = Depends(Provide[Container.order_repo]),
    ) -> Self:
        return cls(order_repo=order_repo)

    @Logger.io
    async def update_status(
        self, *, order_id: str, status: Optional[str], caller_id: Optional[str] = None
    ) -> Order:
        """
        Move an order along Pending -> Shipped -> Delivered (or Pending -> Cancelled).

        Only status and updatedAt are written.
        """
        if status is None or not status.strip():
            raise InvalidInputError('Status is required')

        order = await self.order_repo.get_by_id(order_id)
        if not order:
            raise NotFoundError('Order not found')

        new_status = OrderStatus.parse(status)

        if caller_id is not None and caller_id != order.seller_id:
            raise ForbiddenError('Only the seller can update the order status')

        previous_status = order.status
        updated = order.change_status(new_status)
        saved = await self.order_repo.update_status(updated)
        if not saved:
            raise NotFoundError('Order not found')

        metrics.record_status_transition(
            from_status=previous_status.value, to_status=new_status.value
        )
        Logger.base.info(
            f'🚚 [ORDER_STATUS] Order {order_id}: {previous_status.value} -> {new_status.value}'
        )
        return saved
