"""
Unit tests for CreateOrderUseCase

Covers input validation, product snapshotting, status forcing and the
revision-guarded write.
"""

from unittest.mock import AsyncMock, Mock

import attrs
import pytest

from src.platform.exception.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from src.service.marketplace.app.command.create_order_use_case import CreateOrderUseCase
from src.service.marketplace.domain.entity.order_entity import Order
from src.service.marketplace.domain.entity.product_entity import Product
from src.service.marketplace.domain.enum.order_status import OrderStatus
from src.service.marketplace.domain.value_object.product_snapshot import ProductSnapshot


@pytest.fixture
def product() -> Product:
    return Product(id='p1', name='Widget', price=9.99, seller_id='s1', revision='3')


@pytest.fixture
def mock_product_repo(product: Product) -> Mock:
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=product)
    return repo


@pytest.fixture
def mock_order_repo() -> Mock:
    repo = AsyncMock()

    async def _create(order: Order, *, product: ProductSnapshot) -> Order:
        return attrs.evolve(order, id='o1', revision='1')

    repo.create = AsyncMock(side_effect=_create)
    return repo


@pytest.fixture
def use_case(mock_product_repo: Mock, mock_order_repo: Mock) -> CreateOrderUseCase:
    return CreateOrderUseCase(product_repo=mock_product_repo, order_repo=mock_order_repo)


@pytest.mark.unit
class TestCreateOrderUseCase:
    async def test_create_order_snapshots_product(
        self, use_case: CreateOrderUseCase, mock_order_repo: Mock
    ) -> None:
        order = await use_case.create(
            product_id='p1', buyer_id='b1', quantity=3, shipping_address='1 Main St'
        )

        assert order.id == 'o1'
        assert order.total_price == 29.97
        assert order.seller_id == 's1'
        assert order.product_name == 'Widget'
        assert order.status is OrderStatus.PENDING

        # Write is guarded by the revision the product was read at
        snapshot = mock_order_repo.create.await_args.kwargs['product']
        assert snapshot == ProductSnapshot(
            product_id='p1', name='Widget', price=9.99, seller_id='s1', revision='3'
        )

    async def test_create_order_accepts_numeric_string_quantity(
        self, use_case: CreateOrderUseCase
    ) -> None:
        order = await use_case.create(product_id='p1', buyer_id='b1', quantity='2')

        assert order.quantity == 2
        assert order.total_price == 19.98

    @pytest.mark.parametrize(
        'product_id,buyer_id,quantity',
        [(None, 'b1', 1), ('p1', None, 1), ('p1', 'b1', None), ('', 'b1', 1), ('p1', ' ', 1)],
    )
    async def test_create_order_requires_fields(
        self,
        use_case: CreateOrderUseCase,
        mock_product_repo: Mock,
        product_id,
        buyer_id,
        quantity,
    ) -> None:
        with pytest.raises(InvalidInputError, match='required'):
            await use_case.create(product_id=product_id, buyer_id=buyer_id, quantity=quantity)

        mock_product_repo.get_by_id.assert_not_awaited()

    @pytest.mark.parametrize('quantity', [0, -2, 'abc', 1.5])
    async def test_create_order_rejects_bad_quantity(
        self, use_case: CreateOrderUseCase, quantity
    ) -> None:
        with pytest.raises(InvalidInputError):
            await use_case.create(product_id='p1', buyer_id='b1', quantity=quantity)

    async def test_create_order_product_not_found(
        self, use_case: CreateOrderUseCase, mock_product_repo: Mock, mock_order_repo: Mock
    ) -> None:
        mock_product_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match='Product not found'):
            await use_case.create(product_id='missing', buyer_id='b1', quantity=1)

        mock_order_repo.create.assert_not_awaited()

    async def test_create_order_conflict_propagates(
        self, use_case: CreateOrderUseCase, mock_order_repo: Mock
    ) -> None:
        mock_order_repo.create.side_effect = ConflictError('Product changed')

        with pytest.raises(ConflictError):
            await use_case.create(product_id='p1', buyer_id='b1', quantity=1)

    async def test_caller_identity_fills_missing_buyer(self, use_case: CreateOrderUseCase) -> None:
        order = await use_case.create(product_id='p1', buyer_id=None, quantity=1, caller_id='b9')

        assert order.buyer_id == 'b9'

    async def test_caller_identity_must_match_buyer(self, use_case: CreateOrderUseCase) -> None:
        with pytest.raises(ForbiddenError):
            await use_case.create(product_id='p1', buyer_id='b1', quantity=1, caller_id='b2')
