from typing import Any, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_product_repo import IProductRepo
from src.service.marketplace.domain.entity.product_entity import Product


class UpdateProductUseCase:
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
    async def update(
        self,
        *,
        product_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Any = None,
        image_url: Optional[str] = None,
        caller_id: Optional[str] = None,
    ) -> Product:
        product = await self.product_repo.get_by_id(product_id)
        if not product:
            raise NotFoundError('Product not found')

        product.ensure_owned_by(caller_id)

        updated = product.update_details(
            name=name, description=description, price=price, image_url=image_url
        )
        saved = await self.product_repo.update(updated)
        if not saved:
            # deleted between read and write
            raise NotFoundError('Product not found')
        return saved
