"""Marketplace Domain Value Objects"""

from src.service.marketplace.domain.value_object.product_snapshot import ProductSnapshot

__all__ = ['ProductSnapshot']
