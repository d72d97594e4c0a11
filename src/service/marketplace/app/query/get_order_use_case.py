from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_order_repo import IOrderRepo
from src.service.marketplace.domain.entity.order_entity import Order


class GetOrderUseCase:
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
    async def get_by_id(self, *, order_id: str) -> Order:
        order = await self.order_repo.get_by_id(order_id)
        if not order:
            raise NotFoundError('Order not found')
        return order
