from typing import Any, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import metrics
from src.service.marketplace.app.interface.i_product_repo import IProductRepo
from src.service.marketplace.domain.entity.product_entity import Product


class CreateProductUseCase:
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
    async def create(
        self,
        *,
        name: Optional[str],
        price: Any,
        seller_id: Optional[str],
        description: Optional[str] = None,
        image_url: Optional[str] = None,
        caller_id: Optional[str] = None,
    ) -> Product:
        """
        List a new product.

        With a caller identity the product is attributed to the caller: a missing
        sellerId defaults to the caller, a different sellerId is rejected.
        """
        if caller_id is not None:
            if not seller_id:
                seller_id = caller_id
            elif seller_id != caller_id:
                raise ForbiddenError('Cannot list a product on behalf of another seller')

        product = Product.create(
            name=name,
            price=price,
            seller_id=seller_id,
            description=description,
            image_url=image_url,
        )
        created_product = await self.product_repo.create(product)
        metrics.record_product_created()

        Logger.base.info(
            f'🛍️ [CREATE_PRODUCT] Product {created_product.id} listed by seller {created_product.seller_id}'
        )
        return created_product
