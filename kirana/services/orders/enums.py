"""Order status enum and the fixed order transition table.

Valid transitions:
- Pending -> Preparing, Cancelled
- Preparing -> Out for Delivery, Cancelled
- Out for Delivery -> Delivered, Cancelled
- Delivered -> (terminal state)
- Cancelled -> (terminal state)
"""

from enum import Enum
from typing import Dict, Set


class OrderStatus(str, Enum):
    """Order fulfillment status as shown to vendors and customers."""

    PENDING = "Pending"
    PREPARING = "Preparing"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @classmethod
    def from_string(cls, value: str) -> "OrderStatus":
        """Convert a display value or member name to OrderStatus.

        Matching is case-insensitive, so "out for delivery",
        "Out for Delivery" and "OUT_FOR_DELIVERY" are all accepted.

        Raises:
            ValueError: If value is not a valid status
        """
        normalized = str(value).strip().lower()
        for status in cls:
            if normalized in (status.value.lower(), status.name.lower()):
                return status
        valid_values = ", ".join(s.value for s in cls)
        raise ValueError(
            f"Invalid order status: {value}. Valid values are: {valid_values}"
        )

    @property
    def is_terminal(self) -> bool:
        """Delivered and Cancelled orders never change again."""
        return self in TERMINAL_ORDER_STATUSES

    @property
    def can_cancel(self) -> bool:
        return OrderStatus.CANCELLED in ORDER_STATUS_TRANSITIONS[self]


TERMINAL_ORDER_STATUSES: Set[OrderStatus] = {
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
}

ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, Set[OrderStatus]] = {
    OrderStatus.PENDING: {
        OrderStatus.PREPARING,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PREPARING: {
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.CANCELLED,
    },
    OrderStatus.OUT_FOR_DELIVERY: {
        OrderStatus.DELIVERED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


def validate_order_status_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Check whether ``current -> new`` is in the transition table."""
    return new in ORDER_STATUS_TRANSITIONS.get(current, set())


def get_allowed_order_transitions(current: OrderStatus) -> Set[OrderStatus]:
    """Return a copy of the statuses reachable from ``current``."""
    return set(ORDER_STATUS_TRANSITIONS.get(current, set()))
