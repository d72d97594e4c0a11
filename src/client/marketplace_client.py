"""
Marketplace API client

Typed synchronous wrappers over the HTTP API. Every call returns the same
response models the API serializes, and raises MarketplaceApiError for any
non-2xx answer.

    with MarketplaceClient('http://localhost:8000', user_id='s1') as client:
        product = client.create_product(name='Widget', price=9.99, seller_id='s1')
"""

from typing import Any, Optional

import httpx

from src.platform.constant.route_constant import (
    ORDER_BASE,
    ORDER_GET,
    ORDER_UPDATE_STATUS,
    PRODUCT_BASE,
    PRODUCT_GET,
    USER_ID_HEADER,
)
from src.service.marketplace.driving_adapter.schema.order_schema import (
    OrderCreateRequest,
    OrderResponse,
    OrderStatusUpdateRequest,
)
from src.service.marketplace.driving_adapter.schema.product_schema import (
    ProductCreateRequest,
    ProductResponse,
    ProductUpdateRequest,
)


class MarketplaceApiError(Exception):
    def __init__(self, status_code: int, message: str, error: Optional[str] = None) -> None:
        self.status_code = status_code
        self.message = message
        self.error = error
        super().__init__(f'{status_code} {message}')


class MarketplaceClient:
    def __init__(
        self,
        base_url: str = 'http://localhost:8000',
        *,
        http_client: Optional[httpx.Client] = None,
        user_id: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)
        self.user_id = user_id

    def __enter__(self) -> 'MarketplaceClient':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    # ========== Products ==========

    def list_products(self, *, seller_id: Optional[str] = None) -> list[ProductResponse]:
        params = {'sellerId': seller_id} if seller_id else None
        data = self._request('GET', PRODUCT_BASE, params=params)
        return [ProductResponse.model_validate(item) for item in data]

    def get_product(self, product_id: str) -> ProductResponse:
        data = self._request('GET', PRODUCT_GET.format(product_id=product_id))
        return ProductResponse.model_validate(data)

    def create_product(
        self,
        *,
        name: str,
        price: float | str,
        seller_id: Optional[str] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> ProductResponse:
        body = ProductCreateRequest(
            name=name,
            price=price,
            seller_id=seller_id,
            description=description,
            image_url=image_url,
        )
        data = self._request('POST', PRODUCT_BASE, json=self._dump(body))
        return ProductResponse.model_validate(data)

    def update_product(
        self,
        product_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Optional[float | str] = None,
        image_url: Optional[str] = None,
    ) -> ProductResponse:
        body = ProductUpdateRequest(
            name=name, description=description, price=price, image_url=image_url
        )
        data = self._request(
            'PUT', PRODUCT_GET.format(product_id=product_id), json=self._dump(body)
        )
        return ProductResponse.model_validate(data)

    def delete_product(self, product_id: str) -> str:
        data = self._request('DELETE', PRODUCT_GET.format(product_id=product_id))
        return data['message']

    # ========== Orders ==========

    def list_orders(
        self, *, user_id: Optional[str] = None, role: Optional[str] = None
    ) -> list[OrderResponse]:
        params = {key: value for key, value in (('userId', user_id), ('role', role)) if value}
        data = self._request('GET', ORDER_BASE, params=params or None)
        return [OrderResponse.model_validate(item) for item in data]

    def get_order(self, order_id: str) -> OrderResponse:
        data = self._request('GET', ORDER_GET.format(order_id=order_id))
        return OrderResponse.model_validate(data)

    def create_order(
        self,
        *,
        product_id: str,
        quantity: int,
        buyer_id: Optional[str] = None,
        shipping_address: Optional[str] = None,
    ) -> OrderResponse:
        body = OrderCreateRequest(
            product_id=product_id,
            buyer_id=buyer_id,
            quantity=quantity,
            shipping_address=shipping_address,
        )
        data = self._request('POST', ORDER_BASE, json=self._dump(body))
        return OrderResponse.model_validate(data)

    def update_order_status(self, order_id: str, status: str) -> OrderResponse:
        body = OrderStatusUpdateRequest(status=status)
        data = self._request(
            'PUT', ORDER_UPDATE_STATUS.format(order_id=order_id), json=self._dump(body)
        )
        return OrderResponse.model_validate(data)

    # ========== Helpers ==========

    @staticmethod
    def _dump(body: Any) -> dict[str, Any]:
        return body.model_dump(by_alias=True, exclude_none=True)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        headers = {USER_ID_HEADER: self.user_id} if self.user_id else None
        response = self._http.request(method, path, params=params, json=json, headers=headers)
        if response.is_success:
            return response.json()

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        raise MarketplaceApiError(
            response.status_code,
            payload.get('message') or response.reason_phrase,
            payload.get('error'),
        )
