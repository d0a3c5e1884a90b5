"""Delivery status enum and delivery transition table.

Valid transitions:
- Pending Assignment -> Assigned, Delayed, Cancelled
- Assigned -> Out for Delivery, Pending Assignment, Delayed, Cancelled
- Out for Delivery -> Delivered, Attempted Delivery, Delayed, Cancelled
- Attempted Delivery -> Out for Delivery, Assigned, Pending Assignment, Cancelled
- Delayed -> Assigned, Out for Delivery, Pending Assignment, Cancelled
- Delivered -> (terminal state)
- Cancelled -> (terminal state)

Assigned and Out for Delivery require a delivery agent; Pending Assignment
never has one.
"""

from enum import Enum
from typing import Dict, Set


class DeliveryStatus(str, Enum):
    """Fulfillment status of a delivery."""

    PENDING_ASSIGNMENT = "Pending Assignment"
    ASSIGNED = "Assigned"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    ATTEMPTED_DELIVERY = "Attempted Delivery"
    CANCELLED = "Cancelled"
    DELAYED = "Delayed"

    @classmethod
    def from_string(cls, value: str) -> "DeliveryStatus":
        """Convert a display value or member name to DeliveryStatus.

        Raises:
            ValueError: If value is not a valid status
        """
        normalized = str(value).strip().lower()
        for status in cls:
            if normalized in (status.value.lower(), status.name.lower()):
                return status
        valid_values = ", ".join(s.value for s in cls)
        raise ValueError(
            f"Invalid delivery status: {value}. Valid values are: {valid_values}"
        )

    @property
    def is_terminal(self) -> bool:
        return self in (DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED)

    @property
    def requires_agent(self) -> bool:
        return self in AGENT_REQUIRED_STATUSES


AGENT_REQUIRED_STATUSES: Set[DeliveryStatus] = {
    DeliveryStatus.ASSIGNED,
    DeliveryStatus.OUT_FOR_DELIVERY,
}

DELIVERY_STATUS_TRANSITIONS: Dict[DeliveryStatus, Set[DeliveryStatus]] = {
    DeliveryStatus.PENDING_ASSIGNMENT: {
        DeliveryStatus.ASSIGNED,
        DeliveryStatus.DELAYED,
        DeliveryStatus.CANCELLED,
    },
    DeliveryStatus.ASSIGNED: {
        DeliveryStatus.OUT_FOR_DELIVERY,
        DeliveryStatus.PENDING_ASSIGNMENT,
        DeliveryStatus.DELAYED,
        DeliveryStatus.CANCELLED,
    },
    DeliveryStatus.OUT_FOR_DELIVERY: {
        DeliveryStatus.DELIVERED,
        DeliveryStatus.ATTEMPTED_DELIVERY,
        DeliveryStatus.DELAYED,
        DeliveryStatus.CANCELLED,
    },
    DeliveryStatus.ATTEMPTED_DELIVERY: {
        DeliveryStatus.OUT_FOR_DELIVERY,
        DeliveryStatus.ASSIGNED,
        DeliveryStatus.PENDING_ASSIGNMENT,
        DeliveryStatus.CANCELLED,
    },
    DeliveryStatus.DELAYED: {
        DeliveryStatus.ASSIGNED,
        DeliveryStatus.OUT_FOR_DELIVERY,
        DeliveryStatus.PENDING_ASSIGNMENT,
        DeliveryStatus.CANCELLED,
    },
    DeliveryStatus.DELIVERED: set(),  # Terminal
    DeliveryStatus.CANCELLED: set(),  # Terminal
}


def validate_delivery_status_transition(
    current: DeliveryStatus, new: DeliveryStatus
) -> bool:
    return new in DELIVERY_STATUS_TRANSITIONS.get(current, set())


def get_allowed_delivery_transitions(current: DeliveryStatus) -> Set[DeliveryStatus]:
    return set(DELIVERY_STATUS_TRANSITIONS.get(current, set()))
