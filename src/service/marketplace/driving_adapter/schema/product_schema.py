from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel


class ProductCreateRequest(BaseModel):
    # Presence is checked by the use case so a missing field answers 400, not 422
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[StrictInt, StrictFloat, str]] = None
    image_url: Optional[str] = None
    seller_id: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            'example': {
                'name': 'Widget',
                'description': 'A very useful widget',
                'price': 9.99,
                'imageUrl': 'https://example.com/widget.png',
                'sellerId': 's1',
            }
        }


class ProductUpdateRequest(BaseModel):
    # sellerId is not part of the update contract; extra keys are ignored
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Union[StrictInt, StrictFloat, str]] = None
    image_url: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {'example': {'price': 12.5, 'description': 'Now in blue'}}


class ProductResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    seller_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str
