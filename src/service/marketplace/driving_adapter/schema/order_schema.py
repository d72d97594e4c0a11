from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


class OrderCreateRequest(BaseModel):
    product_id: Optional[str] = None
    buyer_id: Optional[str] = None
    quantity: Optional[Union[StrictInt, StrictFloat, str]] = None
    shipping_address: Optional[str] = None
    status: Optional[str] = None  # accepted but ignored: new orders are always Pending

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            'example': {
                'productId': '0192f0c4-8d3e-7b5a-9c1d-2e3f4a5b6c7d',
                'buyerId': 'b1',
                'quantity': 3,
                'shippingAddress': '1 Main St, Springfield',
            }
        }


class OrderStatusUpdateRequest(BaseModel):
    status: Optional[str] = None

    class Config:
        json_schema_extra = {'example': {'status': 'Shipped'}}


class OrderResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    buyer_id: str
    seller_id: str
    quantity: int
    total_price: float
    shipping_address: Optional[str] = None
    status: str
    order_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
