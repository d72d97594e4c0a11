from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
import math
from typing import Any, Optional

import attrs

from src.platform.exception.exceptions import ForbiddenError, InvalidInputError
from src.platform.logging.loguru_io import Logger


def normalize_price(value: Any) -> float:
    """Coerce a caller-supplied price into a finite, non-negative number."""
    if isinstance(value, bool) or value is None:
        raise InvalidInputError('Price must be a number')
    try:
        amount = Decimal(value.strip()) if isinstance(value, str) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError('Price must be a number')
    if not amount.is_finite():
        raise InvalidInputError('Price must be a number')
    if amount < 0:
        raise InvalidInputError('Price must not be negative')
    price = float(amount)
    if not math.isfinite(price):
        # finite as a Decimal but beyond float range, e.g. "1e400"
        raise InvalidInputError('Price must be a number')
    return price


def _require_text(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(f'{field_name} is required')
    return value


@attrs.define
class Product:
    name: str
    price: float
    seller_id: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    revision: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        name: Optional[str],
        price: Any,
        seller_id: Optional[str],
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> 'Product':
        missing = [
            field_name
            for field_name, value in (('name', name), ('price', price), ('sellerId', seller_id))
            if value is None or (isinstance(value, str) and not value.strip())
        ]
        if missing:
            raise InvalidInputError('Name, price, and sellerId are required')

        return cls(
            name=_require_text(name, 'Name'),
            price=normalize_price(price),
            seller_id=_require_text(seller_id, 'sellerId'),
            description=description,
            image_url=image_url or None,
            created_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def update_details(
        self,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        price: Any = None,
        image_url: Optional[str] = None,
    ) -> 'Product':
        # seller_id is not a parameter: ownership never changes after creation
        changes: dict[str, Any] = {'updated_at': datetime.now(timezone.utc)}
        if name is not None:
            changes['name'] = _require_text(name, 'Name')
        if description is not None:
            changes['description'] = description
        if price is not None:
            changes['price'] = normalize_price(price)
        if image_url is not None:
            changes['image_url'] = image_url or None
        return attrs.evolve(self, **changes)

    def ensure_owned_by(self, caller_id: Optional[str]) -> None:
        if caller_id is not None and caller_id != self.seller_id:
            raise ForbiddenError('Only the seller who listed this product can modify it')
