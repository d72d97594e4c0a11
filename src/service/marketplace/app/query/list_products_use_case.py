from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_product_repo import IProductRepo
from src.service.marketplace.domain.entity.product_entity import Product


class ListProductsUseCase:
    def __init__(self, *, product_repo: IProductRepo) -> None:
        self.product_repo = product_repo

    @classmethod
    @inject
    def depends(
        cls,
        product_repo: IProductRepo = Depends(Provide[Container.product_repo]),
    ) -> Self:
        return cls(product_repo=product_repo)

    @Logger.io
    async def list_products(self, *, seller_id: Optional[str] = None) -> List[Product]:
        if seller_id:
            products = await self.product_repo.list_by_seller(seller_id)
            Logger.base.info(f'📋 [LIST_BY_SELLER] Found {len(products)} products for seller {seller_id}')
            return products

        products = await self.product_repo.list_all()
        Logger.base.info(f'🌟 [LIST_PRODUCTS] Found {len(products)} products')
        return products
