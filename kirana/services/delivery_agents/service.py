"""
Delivery agent management for vendors.

Create/read/update/delete of couriers scoped to the calling vendor.
Deleting an agent first returns its open deliveries to Pending Assignment.
"""

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    parse_identifier,
)
from kirana.core.logging import get_logger
from kirana.database.models.delivery_agent import DeliveryAgent, VehicleType
from kirana.services.deliveries.service import DeliveryService
from kirana.services.delivery_agents.repository import DeliveryAgentRepository

logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "phone")
UPDATABLE_FIELDS = ("name", "phone", "vehicle_type", "vehicle_details", "is_active")


def format_agent(agent: DeliveryAgent) -> dict[str, Any]:
    return {
        "id": str(agent.id),
        "vendor_id": str(agent.vendor_id),
        "name": agent.name,
        "phone": agent.phone,
        "vehicle_type": agent.vehicle_type.value,
        "vehicle_details": agent.vehicle_details,
        "is_active": agent.is_active,
        "created_at": agent.created_at.isoformat() if agent.created_at else None,
    }


def _parse_vehicle_type(value: Any) -> VehicleType:
    try:
        return VehicleType.from_string(value)
    except ValueError as e:
        raise ValidationError(str(e), vehicle_type=str(value)) from e


class DeliveryAgentService:
    """Vendor-scoped delivery agent operations."""

    def __init__(self, session: AsyncSession):
        self.repository = DeliveryAgentRepository(session)
        self.delivery_service = DeliveryService(session)

    async def _get_owned_agent(
        self, agent_id: uuid.UUID, vendor_id: uuid.UUID
    ) -> DeliveryAgent:
        agent = await self.repository.get_by_id(agent_id)
        if not agent:
            raise NotFoundError("Delivery agent not found", agent_id=str(agent_id))
        if agent.vendor_id != vendor_id:
            raise ForbiddenError(
                "Delivery agent belongs to another vendor", agent_id=str(agent_id)
            )
        return agent

    async def create_agent(
        self, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Create a delivery agent for the vendor.

        Raises:
            ValidationError: If name or phone is missing, or vehicle_type is unknown
            DuplicateKeyError: If the vendor already has an agent with this phone
        """
        missing = [
            field
            for field in REQUIRED_FIELDS
            if not str(data.get(field) or "").strip()
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        vehicle_type = _parse_vehicle_type(data.get("vehicle_type") or VehicleType.OTHER.value)

        agent = await self.repository.create(
            vendor_id,
            name=data["name"].strip(),
            phone=data["phone"].strip(),
            vehicle_type=vehicle_type,
            vehicle_details=data.get("vehicle_details"),
            is_active=data.get("is_active", True),
        )
        return format_agent(agent)

    async def list_agents(self, vendor_id: uuid.UUID) -> list[dict[str, Any]]:
        agents = await self.repository.list_by_vendor(vendor_id)
        return [format_agent(agent) for agent in agents]

    async def get_agent(self, agent_id: Any, vendor_id: uuid.UUID) -> dict[str, Any]:
        agent_uuid = parse_identifier(agent_id, "agent id")
        agent = await self._get_owned_agent(agent_uuid, vendor_id)
        return format_agent(agent)

    async def update_agent(
        self, agent_id: Any, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Update an agent; ``id`` and ``vendor_id`` in the payload are ignored."""
        agent_uuid = parse_identifier(agent_id, "agent id")

        changes = {
            key: value
            for key, value in data.items()
            if key in UPDATABLE_FIELDS and (value is not None or key == "vehicle_details")
        }
        if "vehicle_type" in changes:
            changes["vehicle_type"] = _parse_vehicle_type(changes["vehicle_type"])
        for field in REQUIRED_FIELDS:
            if field in changes:
                if not str(changes[field] or "").strip():
                    raise ValidationError(f"{field} cannot be empty", field=field)
                changes[field] = changes[field].strip()

        agent = await self._get_owned_agent(agent_uuid, vendor_id)
        agent = await self.repository.update(agent, **changes)
        return format_agent(agent)

    async def delete_agent(self, agent_id: Any, vendor_id: uuid.UUID) -> dict[str, Any]:
        """
        Delete an agent after releasing its open deliveries.

        Raises:
            ConflictError: If the agent is currently out for delivery
        """
        agent_uuid = parse_identifier(agent_id, "agent id")
        await self._get_owned_agent(agent_uuid, vendor_id)

        released = await self.delivery_service.release_agent(agent_uuid, vendor_id)

        deleted = await self.repository.delete(agent_uuid, vendor_id)
        if not deleted:
            raise ConflictError(
                "Delivery agent was modified concurrently, reload and retry",
                agent_id=str(agent_uuid),
            )

        logger.info(
            "Delivery agent deleted",
            agent_id=str(agent_uuid),
            vendor_id=str(vendor_id),
            released_deliveries=released,
        )
        return {"id": str(agent_uuid), "deleted": True, "released_deliveries": released}
