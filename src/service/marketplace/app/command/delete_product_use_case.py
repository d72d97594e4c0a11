from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import metrics
from src.service.marketplace.app.interface.i_product_repo import IProductRepo


class DeleteProductUseCase:
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
    async def delete(self, *, product_id: str, caller_id: Optional[str] = None) -> None:
        """Remove a product. Orders referencing it keep their snapshot and are not checked."""
        if caller_id is not None:
            product = await self.product_repo.get_by_id(product_id)
            if not product:
                raise NotFoundError('Product not found')
            product.ensure_owned_by(caller_id)

        if not await self.product_repo.delete(product_id):
            raise NotFoundError('Product not found')

        metrics.record_product_deleted()
        Logger.base.info(f'🗑️ [DELETE_PRODUCT] Product {product_id} deleted')
