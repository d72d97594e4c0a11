from typing import Any, List, Optional

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_product_repo import IProductRepo
from src.service.marketplace.app.interface.i_record_store import (
    IRecordStore,
    Record,
    RecordNotFoundError,
    Table,
)
from src.service.marketplace.domain.entity.product_entity import Product
from src.service.marketplace.driven_adapter.repo.record_store_errors import (
    parse_timestamp,
    translate_store_errors,
)


class ProductRepoImpl(IProductRepo):
    def __init__(self, *, record_store: IRecordStore) -> None:
        self.record_store = record_store

    @staticmethod
    def _to_entity(record: Record) -> Product:
        fields = record.fields
        return Product(
            id=record.id,
            name=fields.get('name', ''),
            description=fields.get('description'),
            price=float(fields.get('price', 0)),
            image_url=fields.get('imageUrl'),
            seller_id=str(fields.get('sellerId', '')),
            created_at=parse_timestamp(fields.get('createdAt')) or record.created_time,
            updated_at=parse_timestamp(fields.get('updatedAt')),
            revision=record.revision,
        )

    @staticmethod
    def _to_fields(product: Product) -> dict[str, Any]:
        return {
            'name': product.name,
            'description': product.description,
            'price': product.price,
            'imageUrl': product.image_url,
            'sellerId': product.seller_id,
            'createdAt': product.created_at,
        }

    @Logger.io
    async def list_all(self) -> List[Product]:
        with translate_store_errors('Failed to fetch products'):
            records = await self.record_store.list(Table.PRODUCTS)
        return [self._to_entity(record) for record in records]

    @Logger.io
    async def list_by_seller(self, seller_id: str) -> List[Product]:
        with translate_store_errors('Failed to fetch products'):
            records = await self.record_store.list(Table.PRODUCTS, where={'sellerId': seller_id})
        return [self._to_entity(record) for record in records]

    @Logger.io
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        try:
            with translate_store_errors('Failed to fetch product'):
                record = await self.record_store.find(Table.PRODUCTS, product_id)
        except RecordNotFoundError:
            return None
        return self._to_entity(record)

    @Logger.io
    async def create(self, product: Product) -> Product:
        fields = {key: value for key, value in self._to_fields(product).items() if value is not None}
        with translate_store_errors('Failed to create product'):
            record = await self.record_store.create(Table.PRODUCTS, fields)
        return self._to_entity(record)

    @Logger.io
    async def update(self, product: Product) -> Optional[Product]:
        if product.id is None:
            raise ValueError('Product ID is required for update')
        # sellerId and createdAt are never rewritten
        fields = {
            'name': product.name,
            'description': product.description,
            'price': product.price,
            'imageUrl': product.image_url,
            'updatedAt': product.updated_at,
        }
        try:
            with translate_store_errors('Failed to update product'):
                record = await self.record_store.update(Table.PRODUCTS, product.id, fields)
        except RecordNotFoundError:
            return None
        return self._to_entity(record)

    @Logger.io
    async def delete(self, product_id: str) -> bool:
        try:
            with translate_store_errors('Failed to delete product'):
                await self.record_store.destroy(Table.PRODUCTS, product_id)
        except RecordNotFoundError:
            return False
        return True
