"""Order state machine: the single place order status changes are decided."""

from typing import Union

from kirana.core.errors import InvalidTransitionError
from kirana.core.logging import get_logger
from kirana.services.orders.enums import (
    OrderStatus,
    get_allowed_order_transitions,
    validate_order_status_transition,
)

logger = get_logger(__name__)


def transition_order_status(
    current: OrderStatus,
    target: Union[OrderStatus, str],
) -> OrderStatus:
    """Decide the next status of an order.

    Args:
        current: Status the order is in now
        target: Requested status (enum or display string)

    Returns:
        The new status when the transition is allowed

    Raises:
        InvalidTransitionError: If ``target`` is not reachable from ``current``
        ValueError: If ``target`` is not a known status string
    """
    if not isinstance(target, OrderStatus):
        target = OrderStatus.from_string(target)

    if not validate_order_status_transition(current, target):
        allowed = sorted(s.value for s in get_allowed_order_transitions(current))
        if current.is_terminal:
            message = f"Order is already {current.value} and cannot change status"
        else:
            message = (
                f"Invalid transition from {current.value} to {target.value}"
            )
        logger.info(
            "Order transition rejected",
            current_status=current.value,
            target_status=target.value,
        )
        raise InvalidTransitionError(
            message,
            current_status=current,
            target_status=target,
            allowed_transitions=allowed,
        )

    return target
