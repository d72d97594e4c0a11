from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.domain.entity.product_entity import Product


class IProductRepo(ABC):
    @abstractmethod
    async def list_all(self) -> List[Product]:
        pass

    @abstractmethod
    async def list_by_seller(self, seller_id: str) -> List[Product]:
        pass

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    async def create(self, product: Product) -> Product:
        pass

    @abstractmethod
    async def update(self, product: Product) -> Optional[Product]:
        """Write the mutable fields; None when the product no longer exists."""
        pass

    @abstractmethod
    async def delete(self, product_id: str) -> bool:
        pass
