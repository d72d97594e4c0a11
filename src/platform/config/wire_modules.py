"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.marketplace.app.command import (
    create_order_use_case,
    create_product_use_case,
    delete_product_use_case,
    update_order_status_use_case,
    update_product_use_case,
)
from src.service.marketplace.app.query import (
    get_order_use_case,
    get_product_use_case,
    list_orders_use_case,
    list_products_use_case,
)


WIRE_MODULES: list[ModuleType] = [
    create_product_use_case,
    update_product_use_case,
    delete_product_use_case,
    get_product_use_case,
    list_products_use_case,
    create_order_use_case,
    update_order_status_use_case,
    get_order_use_case,
    list_orders_use_case,
]
