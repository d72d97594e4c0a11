from enum import StrEnum

from src.platform.exception.exceptions import InvalidInputError


class OrderStatus(StrEnum):
    PENDING = 'Pending'
    SHIPPED = 'Shipped'
    DELIVERED = 'Delivered'
    CANCELLED = 'Cancelled'

    @classmethod
    def parse(cls, value: str) -> 'OrderStatus':
        normalized = value.strip().lower()
        for status in cls:
            if status.value.lower() == normalized:
                return status
        allowed = ', '.join(status.value for status in cls)
        raise InvalidInputError(f'Invalid status "{value}". Allowed: {allowed}')

    @property
    def is_terminal(self) -> bool:
        return not ORDER_STATUS_TRANSITIONS[self]

    def can_transition_to(self, target: 'OrderStatus') -> bool:
        return target in ORDER_STATUS_TRANSITIONS[self]


# Pending -> Shipped -> Delivered, Pending -> Cancelled
ORDER_STATUS_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}
