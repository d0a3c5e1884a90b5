"""Delivery state machine shared by agent assignment and status updates.

``plan_delivery_transition`` is the only function that decides what a
delivery looks like after a change. Both the assign and set-status paths
(and agent removal) call it, so the rules below cannot drift between them:

- terminal deliveries (Delivered, Cancelled) reject every change;
- moving to the current status again is an idempotent no-op, which is also
  how an Assigned delivery is handed to a different agent;
- Pending Assignment always clears the delivery agent;
- Assigned and Out for Delivery require an agent after the change;
- Out for Delivery stamps the pickup time once, Delivered stamps the
  delivery time.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union
from uuid import UUID

from kirana.core.errors import InvalidTransitionError, ValidationError
from kirana.services.deliveries.enums import (
    DeliveryStatus,
    get_allowed_delivery_transitions,
    validate_delivery_status_transition,
)


class _Unchanged(Enum):
    TOKEN = "unchanged"


UNCHANGED = _Unchanged.TOKEN

AgentArg = Union[Optional[UUID], _Unchanged]


@dataclass(frozen=True)
class DeliveryState:
    """The fields of a delivery that transition rules depend on."""

    status: DeliveryStatus
    delivery_agent_id: Optional[UUID] = None
    actual_pickup_time: Optional[datetime] = None
    actual_delivery_time: Optional[datetime] = None

    @classmethod
    def from_delivery(cls, delivery: Any) -> "DeliveryState":
        return cls(
            status=delivery.status,
            delivery_agent_id=delivery.delivery_agent_id,
            actual_pickup_time=delivery.actual_pickup_time,
            actual_delivery_time=delivery.actual_delivery_time,
        )


@dataclass(frozen=True)
class DeliveryChange:
    """Outcome of a permitted transition: the column values to persist."""

    previous_status: DeliveryStatus
    status: DeliveryStatus
    delivery_agent_id: Optional[UUID]
    values: dict[str, Any] = field(default_factory=dict)


def plan_delivery_transition(
    state: DeliveryState,
    target: Union[DeliveryStatus, str],
    agent_id: AgentArg = UNCHANGED,
    now: Optional[datetime] = None,
) -> DeliveryChange:
    """Decide the result of moving a delivery to ``target``.

    Args:
        state: Current delivery state
        target: Requested status (enum or display string)
        agent_id: New agent, ``None`` to release the agent, or UNCHANGED
        now: Clock override for timestamp stamping

    Returns:
        DeliveryChange with the values to write

    Raises:
        InvalidTransitionError: If the change breaks a rule above
        ValidationError: If an agent is supplied while releasing the delivery
        ValueError: If ``target`` is not a known status string
    """
    if not isinstance(target, DeliveryStatus):
        target = DeliveryStatus.from_string(target)
    now = now or datetime.now(timezone.utc)
    current = state.status

    if current.is_terminal:
        raise InvalidTransitionError(
            f"Delivery is already {current.value} and cannot be changed",
            current_status=current,
            target_status=target,
            allowed_transitions=[],
        )

    if target != current and not validate_delivery_status_transition(current, target):
        raise InvalidTransitionError(
            f"Invalid transition from {current.value} to {target.value}",
            current_status=current,
            target_status=target,
            allowed_transitions=sorted(
                s.value for s in get_allowed_delivery_transitions(current)
            ),
        )

    if target == DeliveryStatus.PENDING_ASSIGNMENT:
        if agent_id is not UNCHANGED and agent_id is not None:
            raise ValidationError(
                "A delivery pending assignment cannot have a delivery agent",
                agent_id=str(agent_id),
            )
        new_agent_id = None
    elif agent_id is UNCHANGED:
        new_agent_id = state.delivery_agent_id
    else:
        new_agent_id = agent_id

    if target.requires_agent and new_agent_id is None:
        raise InvalidTransitionError(
            f"Status {target.value} requires an assigned delivery agent",
            current_status=current,
            target_status=target,
        )

    values: dict[str, Any] = {
        "status": target,
        "delivery_agent_id": new_agent_id,
    }
    if target == DeliveryStatus.OUT_FOR_DELIVERY and state.actual_pickup_time is None:
        values["actual_pickup_time"] = now
    if target == DeliveryStatus.DELIVERED:
        values["actual_delivery_time"] = now

    return DeliveryChange(
        previous_status=current,
        status=target,
        delivery_agent_id=new_agent_id,
        values=values,
    )
