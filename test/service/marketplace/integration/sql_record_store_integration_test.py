"""
Integration tests for SqlRecordStoreImpl on a throwaway SQLite database.
"""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.exception.exceptions import ConflictError, InvalidInputError
from src.service.marketplace.app.command.update_order_status_use_case import (
    UpdateOrderStatusUseCase,
)
from src.service.marketplace.app.interface.i_record_store import (
    RecordConflictError,
    RecordGuard,
    RecordNotFoundError,
    RecordStoreError,
    Table,
)
from src.service.marketplace.domain.entity.order_entity import Order
from src.service.marketplace.domain.entity.product_entity import Product
from src.service.marketplace.domain.enum.order_status import OrderStatus
from src.service.marketplace.domain.value_object.product_snapshot import ProductSnapshot
from src.service.marketplace.driven_adapter.record_store.sql_record_store_impl import (
    SqlRecordStoreImpl,
)
from src.service.marketplace.driven_adapter.repo.order_repo_impl import OrderRepoImpl
from src.service.marketplace.driven_adapter.repo.product_repo_impl import ProductRepoImpl


@pytest.fixture
async def store(tmp_path: Path) -> AsyncGenerator[SqlRecordStoreImpl, None]:
    settings = Settings(DATABASE_URL=f'sqlite+aiosqlite:///{tmp_path / "store.db"}')
    sql_store = SqlRecordStoreImpl(database=Database(settings=settings), settings=settings)
    await sql_store.initialize()
    yield sql_store
    await sql_store.close()


PRODUCT_FIELDS = {'name': 'Widget', 'price': 9.99, 'sellerId': 's1'}


@pytest.mark.integration
class TestSqlRecordStore:
    async def test_create_then_find(self, store: SqlRecordStoreImpl) -> None:
        created = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)

        found = await store.find(Table.PRODUCTS, created.id)

        assert found.id == created.id
        assert found.fields == PRODUCT_FIELDS
        assert found.revision == '1'
        assert found.created_time is not None

    async def test_find_missing(self, store: SqlRecordStoreImpl) -> None:
        with pytest.raises(RecordNotFoundError):
            await store.find(Table.PRODUCTS, 'nonexistent')

    async def test_list_with_equality_filter(self, store: SqlRecordStoreImpl) -> None:
        mine = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)
        await store.create(Table.PRODUCTS, {**PRODUCT_FIELDS, 'sellerId': 's2'})

        records = await store.list(Table.PRODUCTS, where={'sellerId': 's1'})
        everything = await store.list(Table.PRODUCTS)

        assert [record.id for record in records] == [mine.id]
        assert len(everything) == 2

    async def test_list_rejects_unknown_field(self, store: SqlRecordStoreImpl) -> None:
        with pytest.raises(RecordStoreError):
            await store.list(Table.PRODUCTS, where={'color': 'red'})

    async def test_update_merges_and_bumps_revision(self, store: SqlRecordStoreImpl) -> None:
        created = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)

        updated = await store.update(Table.PRODUCTS, created.id, {'price': 12.5})

        assert updated.fields['price'] == 12.5
        assert updated.fields['name'] == 'Widget'
        assert updated.fields['sellerId'] == 's1'
        assert updated.revision == '2'

    async def test_update_missing(self, store: SqlRecordStoreImpl) -> None:
        with pytest.raises(RecordNotFoundError):
            await store.update(Table.PRODUCTS, 'nonexistent', {'price': 1})

    async def test_update_at_expected_revision(self, store: SqlRecordStoreImpl) -> None:
        created = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)

        updated = await store.update(
            Table.PRODUCTS, created.id, {'price': 12.5}, expected_revision=created.revision
        )

        assert updated.revision == '2'

    async def test_update_at_stale_revision_writes_nothing(self, store: SqlRecordStoreImpl) -> None:
        created = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)
        await store.update(Table.PRODUCTS, created.id, {'price': 12.5})

        with pytest.raises(RecordConflictError):
            await store.update(
                Table.PRODUCTS, created.id, {'price': 1.0}, expected_revision=created.revision
            )

        found = await store.find(Table.PRODUCTS, created.id)
        assert (found.fields['price'], found.revision) == (12.5, '2')

    async def test_update_missing_with_expected_revision(self, store: SqlRecordStoreImpl) -> None:
        with pytest.raises(RecordNotFoundError):
            await store.update(Table.PRODUCTS, 'nonexistent', {'price': 1}, expected_revision='1')

    async def test_destroy(self, store: SqlRecordStoreImpl) -> None:
        created = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)

        await store.destroy(Table.PRODUCTS, created.id)

        with pytest.raises(RecordNotFoundError):
            await store.destroy(Table.PRODUCTS, created.id)

    async def test_guarded_create(self, store: SqlRecordStoreImpl) -> None:
        product = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)
        guard = RecordGuard(table=Table.PRODUCTS, id=product.id, revision=product.revision)

        order = await store.create(Table.ORDERS, _order_fields(product.id), guard=guard)

        assert order.fields['productId'] == product.id

    async def test_guarded_create_after_product_change(self, store: SqlRecordStoreImpl) -> None:
        product = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)
        guard = RecordGuard(table=Table.PRODUCTS, id=product.id, revision=product.revision)
        await store.update(Table.PRODUCTS, product.id, {'price': 99.0})

        with pytest.raises(RecordConflictError):
            await store.create(Table.ORDERS, _order_fields(product.id), guard=guard)

        assert await store.list(Table.ORDERS) == []

    async def test_guarded_create_after_product_delete(self, store: SqlRecordStoreImpl) -> None:
        product = await store.create(Table.PRODUCTS, PRODUCT_FIELDS)
        guard = RecordGuard(table=Table.PRODUCTS, id=product.id, revision=product.revision)
        await store.destroy(Table.PRODUCTS, product.id)

        with pytest.raises(RecordConflictError):
            await store.create(Table.ORDERS, _order_fields(product.id), guard=guard)


@pytest.mark.integration
class TestRepositoriesOverSql:
    async def test_order_repo_maps_conflict(self, store: SqlRecordStoreImpl) -> None:
        product_repo = ProductRepoImpl(record_store=store)
        order_repo = OrderRepoImpl(record_store=store)
        product = await product_repo.create(Product.create(name='Widget', price=9.99, seller_id='s1'))
        snapshot = ProductSnapshot.from_product(product)

        # Seller reprices between the read and the order write
        await product_repo.update(product.update_details(price=20))

        with pytest.raises(ConflictError):
            await order_repo.create(
                Order.create(product=snapshot, buyer_id='b1', quantity=1), product=snapshot
            )
        assert await order_repo.list_all() == []

    async def test_order_status_update_from_stale_read(self, store: SqlRecordStoreImpl) -> None:
        order_repo = OrderRepoImpl(record_store=store)
        order = await _place_order(store)

        await order_repo.update_status(order.change_status(OrderStatus.SHIPPED))

        with pytest.raises(ConflictError):
            await order_repo.update_status(order.change_status(OrderStatus.CANCELLED))
        stored = await order_repo.get_by_id(order.id)
        assert stored is not None and stored.status == OrderStatus.SHIPPED

    async def test_concurrent_status_updates_have_one_winner(
        self, store: SqlRecordStoreImpl
    ) -> None:
        order_repo = OrderRepoImpl(record_store=store)
        use_case = UpdateOrderStatusUseCase(order_repo=order_repo)
        order = await _place_order(store)

        results = await asyncio.gather(
            use_case.update_status(order_id=order.id, status='Shipped'),
            use_case.update_status(order_id=order.id, status='Cancelled'),
            return_exceptions=True,
        )

        winners = [result for result in results if isinstance(result, Order)]
        losers = [result for result in results if isinstance(result, Exception)]
        assert len(winners) == 1
        assert len(losers) == 1
        assert isinstance(losers[0], (ConflictError, InvalidInputError))
        stored = await order_repo.get_by_id(order.id)
        assert stored is not None and stored.status == winners[0].status

    async def test_product_round_trip(self, store: SqlRecordStoreImpl) -> None:
        repo = ProductRepoImpl(record_store=store)
        created = await repo.create(
            Product.create(name='Widget', price='9.99', seller_id='s1', description='d')
        )

        fetched = await repo.get_by_id(created.id)

        assert fetched is not None
        assert (fetched.name, fetched.price, fetched.seller_id, fetched.description) == (
            'Widget',
            9.99,
            's1',
            'd',
        )
        assert fetched.created_at is not None and fetched.created_at.tzinfo is not None
        assert await repo.get_by_id('nonexistent') is None
        assert await repo.delete('nonexistent') is False


async def _place_order(store: SqlRecordStoreImpl) -> Order:
    product = await ProductRepoImpl(record_store=store).create(
        Product.create(name='Widget', price=9.99, seller_id='s1')
    )
    snapshot = ProductSnapshot.from_product(product)
    return await OrderRepoImpl(record_store=store).create(
        Order.create(product=snapshot, buyer_id='b1', quantity=1), product=snapshot
    )


def _order_fields(product_id: str) -> dict:
    return {
        'productId': product_id,
        'productName': 'Widget',
        'buyerId': 'b1',
        'sellerId': 's1',
        'quantity': 1,
        'totalPrice': 9.99,
        'status': 'Pending',
    }
