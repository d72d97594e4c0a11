from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.create_product_use_case import CreateProductUseCase
from src.service.marketplace.app.command.delete_product_use_case import DeleteProductUseCase
from src.service.marketplace.app.command.update_product_use_case import UpdateProductUseCase
from src.service.marketplace.app.query.get_product_use_case import GetProductUseCase
from src.service.marketplace.app.query.list_products_use_case import ListProductsUseCase
from src.service.marketplace.domain.entity.product_entity import Product
from src.service.marketplace.driving_adapter.http_controller.auth.current_user import (
    get_current_user_id,
)
from src.service.marketplace.driving_adapter.schema.product_schema import (
    MessageResponse,
    ProductCreateRequest,
    ProductResponse,
    ProductUpdateRequest,
)


router = APIRouter()


def _to_response(product: Product) -> ProductResponse:
    if product.id is None:
        raise ValueError('Product ID should not be None.')

    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        image_url=product.image_url,
        seller_id=product.seller_id,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


@router.get('', status_code=status.HTTP_200_OK, response_model_exclude_none=True)
@Logger.io
async def list_products(
    seller_id: Optional[str] = Query(default=None, alias='sellerId'),
    use_case: ListProductsUseCase = Depends(ListProductsUseCase.depends),
) -> List[ProductResponse]:
    products = await use_case.list_products(seller_id=seller_id)
    return [_to_response(product) for product in products]


@router.get('/{product_id}', status_code=status.HTTP_200_OK, response_model_exclude_none=True)
@Logger.io
async def get_product(
    product_id: str,
    use_case: GetProductUseCase = Depends(GetProductUseCase.depends),
) -> ProductResponse:
    product = await use_case.get_by_id(product_id=product_id)
    return _to_response(product)


@router.post('', status_code=status.HTTP_201_CREATED, response_model_exclude_none=True)
@Logger.io
async def create_product(
    request: ProductCreateRequest,
    caller_id: Optional[str] = Depends(get_current_user_id),
    use_case: CreateProductUseCase = Depends(CreateProductUseCase.depends),
) -> ProductResponse:
    product = await use_case.create(
        name=request.name,
        price=request.price,
        seller_id=request.seller_id,
        description=request.description,
        image_url=request.image_url,
        caller_id=caller_id,
    )
    return _to_response(product)


@router.put('/{product_id}', status_code=status.HTTP_200_OK, response_model_exclude_none=True)
@Logger.io
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    caller_id: Optional[str] = Depends(get_current_user_id),
    use_case: UpdateProductUseCase = Depends(UpdateProductUseCase.depends),
) -> ProductResponse:
    product = await use_case.update(
        product_id=product_id,
        name=request.name,
        description=request.description,
        price=request.price,
        image_url=request.image_url,
        caller_id=caller_id,
    )
    return _to_response(product)


@router.delete('/{product_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def delete_product(
    product_id: str,
    caller_id: Optional[str] = Depends(get_current_user_id),
    use_case: DeleteProductUseCase = Depends(DeleteProductUseCase.depends),
) -> MessageResponse:
    await use_case.delete(product_id=product_id, caller_id=caller_id)
    return MessageResponse(message='Product deleted successfully')
