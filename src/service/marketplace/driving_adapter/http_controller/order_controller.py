from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.create_order_use_case import CreateOrderUseCase
from src.service.marketplace.app.command.update_order_status_use_case import (
    UpdateOrderStatusUseCase,
)
from src.service.marketplace.app.query.get_order_use_case import GetOrderUseCase
from src.service.marketplace.app.query.list_orders_use_case import ListOrdersUseCase
from src.service.marketplace.domain.entity.order_entity import Order
from src.service.marketplace.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
)
from src.service.marketplace.driving_adapter.schema.order_schema import (
    OrderCreateRequest,
    OrderResponse,
    OrderStatusUpdateRequest,
)


router = APIRouter()


def _to_response(order: Order) -> OrderResponse:
    if order.id is None:
        raise ValueError('Order ID should not be None.')

    return OrderResponse(
        id=order.id,
        product_id=order.product_id,
        product_name=order.product_name,
        buyer_id=order.buyer_id,
        seller_id=order.seller_id,
        quantity=order.quantity,
        total_price=order.total_price,
        shipping_address=order.shipping_address,
        status=order.status.value,
        order_date=order.order_date,
        updated_at=order.updated_at,
    )


@router.get('', status_code=status.HTTP_200_OK, response_model_exclude_none=True)
@Logger.io
async def list_orders(
    user_id: Optional[str] = Query(default=None, alias='userId'),
    role: Optional[str] = None,
    use_case: ListOrdersUseCase = Depends(ListOrdersUseCase.depends),
) -> List[OrderResponse]:
    orders = await use_case.list_orders(user_id=user_id, role=role)
    return [_to_response(order) for order in orders]


@router.get('/{order_id}', status_code=status.HTTP_200_OK, response_model_exclude_none=True)
@Logger.io
async def get_order(
    order_id: str,
    use_case: GetOrderUseCase = Depends(GetOrderUseCase.depends),
) -> OrderResponse:
    order = await use_case.get_by_id(order_id=order_id)
    return _to_response(order)


@router.post('', status_code=status.HTTP_201_CREATED, response_model_exclude_none=True)
@Logger.io
async def create_order(
    request: OrderCreateRequest,
    caller_id: Optional[str] = Depends(get_current_user_id),
    use_case: CreateOrderUseCase = Depends(CreateOrderUseCase.depends),
) -> OrderResponse:
    # request.status is deliberately not forwarded
    order = await use_case.create(
        product_id=request.product_id,
        buyer_id=request.buyer_id,
        quantity=request.quantity,
        shipping_address=request.shipping_address,
        caller_id=caller_id,
    )
    return _to_response(order)


@router.put('/{order_id}/status', status_code=status.HTTP_200_OK, response_model_exclude_none=True)
@Logger.io
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdateRequest,
    caller_id: Optional[str] = Depends(get_current_user_id),
    use_case: UpdateOrderStatusUseCase = Depends(UpdateOrderStatusUseCase.depends),
) -> OrderResponse:
    order = await use_case.update_status(
        order_id=order_id, status=request.status, caller_id=caller_id
    )
    return _to_response(order)
