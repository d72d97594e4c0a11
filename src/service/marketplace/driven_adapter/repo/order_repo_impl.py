from typing import Any, List, Optional

from src.platform.exception.exceptions import InvalidInputError, StoreFailureError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_order_repo import IOrderRepo
from src.service.marketplace.app.interface.i_record_store import (
    IRecordStore,
    Record,
    RecordGuard,
    RecordNotFoundError,
    Table,
)
from src.service.marketplace.domain.entity.order_entity import Order
from src.service.marketplace.domain.enum.order_status import OrderStatus
from src.service.marketplace.domain.value_object.product_snapshot import ProductSnapshot
from src.service.marketplace.driven_adapter.repo.record_store_errors import (
    first_link,
    parse_timestamp,
    translate_conflict,
    translate_store_errors,
)


class OrderRepoImpl(IOrderRepo):
    def __init__(self, *, record_store: IRecordStore) -> None:
        self.record_store = record_store

    @staticmethod
    def _to_entity(record: Record) -> Order:
        fields = record.fields
        return Order(
            id=record.id,
            product_id=str(first_link(fields.get('productId')) or ''),
            product_name=fields.get('productName', ''),
            buyer_id=str(fields.get('buyerId', '')),
            seller_id=str(fields.get('sellerId', '')),
            quantity=int(fields.get('quantity', 0)),
            total_price=float(fields.get('totalPrice', 0)),
            shipping_address=fields.get('shippingAddress'),
            status=OrderRepoImpl._to_status(record),
            order_date=parse_timestamp(fields.get('orderDate')) or record.created_time,
            updated_at=parse_timestamp(fields.get('updatedAt')),
            revision=record.revision,
        )

    @staticmethod
    def _to_status(record: Record) -> OrderStatus:
        raw = record.fields.get('status') or OrderStatus.PENDING.value
        try:
            return OrderStatus.parse(str(raw))
        except InvalidInputError as e:
            Logger.base.error(f'❌ [ORDER] Record {record.id} holds unknown status "{raw}"')
            raise StoreFailureError(
                'Failed to read order', detail=f'Unknown order status "{raw}" on record {record.id}'
            ) from e

    @staticmethod
    def _to_fields(order: Order) -> dict[str, Any]:
        fields = {
            'productId': order.product_id,
            'productName': order.product_name,
            'buyerId': order.buyer_id,
            'sellerId': order.seller_id,
            'quantity': order.quantity,
            'totalPrice': order.total_price,
            'shippingAddress': order.shipping_address,
            'status': order.status.value,
            'orderDate': order.order_date,
        }
        return {key: value for key, value in fields.items() if value is not None}

    @Logger.io
    async def list_all(self) -> List[Order]:
        with translate_store_errors('Failed to fetch orders'):
            records = await self.record_store.list(Table.ORDERS)
        return [self._to_entity(record) for record in records]

    @Logger.io
    async def list_by_buyer(self, buyer_id: str) -> List[Order]:
        with translate_store_errors('Failed to fetch orders'):
            records = await self.record_store.list(Table.ORDERS, where={'buyerId': buyer_id})
        return [self._to_entity(record) for record in records]

    @Logger.io
    async def list_by_seller(self, seller_id: str) -> List[Order]:
        with translate_store_errors('Failed to fetch orders'):
            records = await self.record_store.list(Table.ORDERS, where={'sellerId': seller_id})
        return [self._to_entity(record) for record in records]

    @Logger.io
    async def get_by_id(self, order_id: str) -> Optional[Order]:
        try:
            with translate_store_errors('Failed to fetch order'):
                record = await self.record_store.find(Table.ORDERS, order_id)
        except RecordNotFoundError:
            return None
        return self._to_entity(record)

    @Logger.io
    async def create(self, order: Order, *, product: ProductSnapshot) -> Order:
        guard = RecordGuard(table=Table.PRODUCTS, id=product.product_id, revision=product.revision)
        with translate_conflict('Product changed while the order was being placed, please retry'):
            with translate_store_errors('Failed to create order'):
                record = await self.record_store.create(
                    Table.ORDERS, self._to_fields(order), guard=guard
                )
        return self._to_entity(record)

    @Logger.io
    async def update_status(self, order: Order) -> Optional[Order]:
        if order.id is None:
            raise ValueError('Order ID is required for status update')
        fields = {'status': order.status.value, 'updatedAt': order.updated_at}
        conflict_message = 'Order changed while its status was being updated, please retry'
        try:
            with translate_conflict(conflict_message):
                with translate_store_errors('Failed to update order'):
                    record = await self.record_store.update(
                        Table.ORDERS, order.id, fields, expected_revision=order.revision
                    )
        except RecordNotFoundError:
            return None
        return self._to_entity(record)
