"""
Delivery service: agent assignment and delivery status tracking.

Assignment, status updates, and agent release all go through
``plan_delivery_transition`` and the repository's guarded update, so a
rejected change never touches the row.
"""

import uuid
from datetime import datetime
from typing import Any, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    parse_identifier,
)
from kirana.core.logging import get_logger
from kirana.database.models.delivery import Delivery
from kirana.services.deliveries.enums import DeliveryStatus
from kirana.services.deliveries.repository import DeliveryRepository
from kirana.services.deliveries.state_machine import (
    UNCHANGED,
    AgentArg,
    DeliveryState,
    plan_delivery_transition,
)
from kirana.services.delivery_agents.repository import DeliveryAgentRepository

logger = get_logger(__name__)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def format_delivery(delivery: Delivery) -> dict[str, Any]:
    agent = delivery.agent
    return {
        "id": str(delivery.id),
        "order_id": str(delivery.order_id),
        "customer_id": str(delivery.customer_id),
        "customer_name": delivery.customer_name,
        "customer_phone": delivery.customer_phone,
        "customer_address": delivery.customer_address,
        "order_value": float(delivery.order_value),
        "status": delivery.status.value,
        "delivery_agent_id": (
            str(delivery.delivery_agent_id) if delivery.delivery_agent_id else None
        ),
        "agent": (
            {
                "id": str(agent.id),
                "name": agent.name,
                "phone": agent.phone,
                "vehicle_type": agent.vehicle_type.value,
            }
            if agent
            else None
        ),
        "scheduled_pickup_time": _isoformat(delivery.scheduled_pickup_time),
        "actual_pickup_time": _isoformat(delivery.actual_pickup_time),
        "scheduled_delivery_time": _isoformat(delivery.scheduled_delivery_time),
        "estimated_delivery_time": _isoformat(delivery.estimated_delivery_time),
        "actual_delivery_time": _isoformat(delivery.actual_delivery_time),
        "delivery_notes": delivery.delivery_notes,
        "created_at": _isoformat(delivery.created_at),
    }


class DeliveryService:
    """Vendor-facing delivery operations."""

    def __init__(self, session: AsyncSession):
        self.repository = DeliveryRepository(session)
        self.agent_repository = DeliveryAgentRepository(session)

    async def _get_owned_delivery(
        self, delivery_id: uuid.UUID, vendor_id: uuid.UUID
    ) -> Delivery:
        delivery = await self.repository.get_by_id(delivery_id)
        if not delivery:
            raise NotFoundError("Delivery not found", delivery_id=str(delivery_id))
        if delivery.vendor_id != vendor_id:
            logger.warning(
                "Delivery access by non-owner",
                delivery_id=str(delivery_id),
                vendor_id=str(vendor_id),
            )
            raise ForbiddenError(
                "Delivery belongs to another vendor", delivery_id=str(delivery_id)
            )
        return delivery

    async def _apply(
        self,
        delivery: Delivery,
        vendor_id: uuid.UUID,
        target: DeliveryStatus,
        agent_id: AgentArg = UNCHANGED,
    ) -> Delivery:
        change = plan_delivery_transition(
            DeliveryState.from_delivery(delivery), target, agent_id=agent_id
        )

        updated = await self.repository.apply_change(
            delivery_id=delivery.id,
            vendor_id=vendor_id,
            expected_status=change.previous_status,
            values=change.values,
        )
        if not updated:
            raise ConflictError(
                "Delivery was modified concurrently, reload and retry",
                delivery_id=str(delivery.id),
                expected_status=change.previous_status.value,
            )

        logger.info(
            "Delivery updated",
            delivery_id=str(delivery.id),
            vendor_id=str(vendor_id),
            from_status=change.previous_status.value,
            to_status=change.status.value,
            delivery_agent_id=(
                str(change.delivery_agent_id) if change.delivery_agent_id else None
            ),
        )
        return await self.repository.get_by_id(delivery.id)

    async def assign_agent(
        self,
        delivery_id: Any,
        agent_id: Optional[Any],
        vendor_id: uuid.UUID,
    ) -> dict[str, Any]:
        """
        Assign an agent to a delivery, or unassign it when agent_id is None.

        Assigning moves the delivery to Assigned; unassigning moves it back
        to Pending Assignment and clears the agent.

        Raises:
            InvalidIdentifierError: If an identifier is malformed
            NotFoundError: If the delivery or agent does not exist
            ForbiddenError: If the delivery or agent belongs to another vendor
            ValidationError: If the agent is inactive
            InvalidTransitionError: If the delivery cannot be (un)assigned now
            ConflictError: If the delivery changed between read and write
        """
        delivery_uuid = parse_identifier(delivery_id, "delivery id")
        agent_uuid = (
            parse_identifier(agent_id, "agent id") if agent_id is not None else None
        )

        if agent_uuid is not None:
            agent = await self.agent_repository.get_by_id(agent_uuid)
            if not agent:
                raise NotFoundError("Delivery agent not found", agent_id=str(agent_uuid))
            if agent.vendor_id != vendor_id:
                logger.warning(
                    "Assignment of another vendor's agent rejected",
                    agent_id=str(agent_uuid),
                    vendor_id=str(vendor_id),
                )
                raise ForbiddenError(
                    "Delivery agent belongs to another vendor",
                    agent_id=str(agent_uuid),
                )
            if not agent.is_active:
                raise ValidationError(
                    "Delivery agent is inactive", agent_id=str(agent_uuid)
                )

        delivery = await self._get_owned_delivery(delivery_uuid, vendor_id)

        if agent_uuid is None:
            delivery = await self._apply(
                delivery, vendor_id, DeliveryStatus.PENDING_ASSIGNMENT, agent_id=None
            )
        else:
            delivery = await self._apply(
                delivery, vendor_id, DeliveryStatus.ASSIGNED, agent_id=agent_uuid
            )
        return format_delivery(delivery)

    async def update_delivery_status(
        self,
        delivery_id: Any,
        new_status: Union[DeliveryStatus, str],
        vendor_id: uuid.UUID,
    ) -> dict[str, Any]:
        """Move a delivery to a new status, keeping its current agent unless released."""
        delivery_uuid = parse_identifier(delivery_id, "delivery id")
        try:
            target = (
                new_status
                if isinstance(new_status, DeliveryStatus)
                else DeliveryStatus.from_string(new_status)
            )
        except ValueError as e:
            raise ValidationError(str(e), status=str(new_status)) from e

        delivery = await self._get_owned_delivery(delivery_uuid, vendor_id)
        delivery = await self._apply(delivery, vendor_id, target)
        return format_delivery(delivery)

    async def get_delivery(self, delivery_id: Any, vendor_id: uuid.UUID) -> dict[str, Any]:
        delivery_uuid = parse_identifier(delivery_id, "delivery id")
        delivery = await self._get_owned_delivery(delivery_uuid, vendor_id)
        return format_delivery(delivery)

    async def list_deliveries(
        self,
        vendor_id: uuid.UUID,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> dict[str, Any]:
        """List a vendor's deliveries newest first, with agent name and phone."""
        status_filter = None
        if status:
            try:
                status_filter = DeliveryStatus.from_string(status)
            except ValueError as e:
                raise ValidationError(str(e), status=status) from e

        deliveries, total = await self.repository.list_vendor_deliveries(
            vendor_id=vendor_id,
            status=status_filter,
            skip=skip,
            limit=limit,
        )
        return {
            "deliveries": [format_delivery(d) for d in deliveries],
            "total": total,
            "skip": skip,
            "limit": limit,
        }

    async def release_agent(self, agent_id: uuid.UUID, vendor_id: uuid.UUID) -> int:
        """
        Return every open delivery of an agent to Pending Assignment.

        Nothing is written when any of them is already out for delivery.

        Returns:
            Number of deliveries released

        Raises:
            ConflictError: If the agent has a delivery on the road
        """
        deliveries = await self.repository.list_open_for_agent(agent_id)
        on_road = [
            d for d in deliveries if d.status == DeliveryStatus.OUT_FOR_DELIVERY
        ]
        if on_road:
            raise ConflictError(
                "Delivery agent has deliveries out for delivery and cannot be released",
                agent_id=str(agent_id),
                out_for_delivery=len(on_road),
            )

        for delivery in deliveries:
            await self._apply(
                delivery, vendor_id, DeliveryStatus.PENDING_ASSIGNMENT, agent_id=None
            )

        logger.info(
            "Agent deliveries released",
            agent_id=str(agent_id),
            count=len(deliveries),
        )
        return len(deliveries)
