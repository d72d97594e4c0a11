from enum import StrEnum
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidInputError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_order_repo import IOrderRepo
from src.service.marketplace.domain.entity.order_entity import Order


class ParticipantRole(StrEnum):
    BUYER = 'buyer'
    SELLER = 'seller'


class ListOrdersUseCase:
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
    async def list_orders(
        self, *, user_id: Optional[str] = None, role: Optional[str] = None
    ) -> List[Order]:
        """
        Without user_id: every order.
        With user_id: orders where the user is buyer, then orders where the user
        is seller, each order once. `role` narrows to one side.
        """
        if not user_id:
            return await self.order_repo.list_all()

        participant_role = self._parse_role(role)
        if participant_role == ParticipantRole.BUYER:
            return await self.order_repo.list_by_buyer(user_id)
        if participant_role == ParticipantRole.SELLER:
            return await self.order_repo.list_by_seller(user_id)

        bought = await self.order_repo.list_by_buyer(user_id)
        sold = await self.order_repo.list_by_seller(user_id)

        orders: dict[str, Order] = {}
        for order in [*bought, *sold]:
            orders.setdefault(order.id or '', order)

        Logger.base.info(
            f'📋 [LIST_ORDERS] user {user_id}: {len(bought)} bought, {len(sold)} sold, '
            f'{len(orders)} unique'
        )
        return list(orders.values())

    @staticmethod
    def _parse_role(role: Optional[str]) -> Optional[ParticipantRole]:
        if not role:
            return None
        try:
            return ParticipantRole(role.strip().lower())
        except ValueError:
            raise InvalidInputError('Role must be "buyer" or "seller"')
