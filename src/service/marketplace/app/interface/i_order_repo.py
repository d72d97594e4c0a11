from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.domain.entity.order_entity import Order
from src.service.marketplace.domain.value_object.product_snapshot import ProductSnapshot


class IOrderRepo(ABC):
    @abstractmethod
    async def list_all(self) -> List[Order]:
        pass

    @abstractmethod
    async def list_by_buyer(self, buyer_id: str) -> List[Order]:
        pass

    @abstractmethod
    async def list_by_seller(self, seller_id: str) -> List[Order]:
        pass

    @abstractmethod
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def create(self, order: Order, *, product: ProductSnapshot) -> Order:
        """Persist only if `product` is still at the revision it was read at."""
        pass

    @abstractmethod
    async def update_status(self, order: Order) -> Optional[Order]:
        pass
