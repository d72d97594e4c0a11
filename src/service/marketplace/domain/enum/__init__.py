"""Marketplace Domain Enums"""

from src.service.marketplace.domain.enum.order_status import OrderStatus

__all__ = ['OrderStatus']
