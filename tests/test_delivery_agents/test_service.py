"""
Tests for delivery agent management.
"""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError

from kirana.core.errors import (
    ConflictError,
    DuplicateKeyError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from kirana.database.models.delivery_agent import VehicleType
from kirana.services.deliveries.service import DeliveryService
from kirana.services.delivery_agents.repository import DeliveryAgentRepository
from kirana.services.delivery_agents.service import DeliveryAgentService, format_agent


@pytest.fixture
def agent_service(mock_session: AsyncMock) -> DeliveryAgentService:
    service = DeliveryAgentService(mock_session)
    service.repository = AsyncMock(spec=DeliveryAgentRepository)
    service.delivery_service = AsyncMock(spec=DeliveryService)
    return service


class TestVehicleType:
    def test_parse_case_insensitive(self):
        assert VehicleType.from_string(" Scooter ") == VehicleType.SCOOTER

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Invalid vehicle type"):
            VehicleType.from_string("truck")


class TestCreateAgent:
    async def test_create_strips_and_defaults(self, agent_service, make_agent, vendor_id):
        agent_service.repository.create.return_value = make_agent()

        await agent_service.create_agent(
            vendor_id, {"name": "  Ravi Kumar ", "phone": " +919811111111 "}
        )

        agent_service.repository.create.assert_awaited_once_with(
            vendor_id,
            name="Ravi Kumar",
            phone="+919811111111",
            vehicle_type=VehicleType.OTHER,
            vehicle_details=None,
            is_active=True,
        )

    async def test_missing_fields(self, agent_service, vendor_id):
        with pytest.raises(ValidationError, match="Missing required fields: name, phone"):
            await agent_service.create_agent(vendor_id, {"name": " "})

        agent_service.repository.create.assert_not_called()

    async def test_unknown_vehicle_type(self, agent_service, vendor_id):
        with pytest.raises(ValidationError):
            await agent_service.create_agent(
                vendor_id, {"name": "Ravi", "phone": "1", "vehicle_type": "rocket"}
            )

    async def test_duplicate_phone_is_reported(self, mock_session, vendor_id):
        mock_session.flush.side_effect = IntegrityError(
            "INSERT", {}, Exception("uq_delivery_agents_vendor_phone")
        )
        service = DeliveryAgentService(mock_session)

        with pytest.raises(DuplicateKeyError, match="phone \\+919811111111 already exists"):
            await service.create_agent(
                vendor_id, {"name": "Ravi Kumar", "phone": "+919811111111"}
            )
        mock_session.rollback.assert_awaited_once()


class TestUpdateAgent:
    async def test_phone_taken_by_another_agent(self, mock_session, make_agent, vendor_id):
        agent = make_agent()
        mock_session.flush.side_effect = IntegrityError(
            "UPDATE", {}, Exception("uq_delivery_agents_vendor_phone")
        )
        service = DeliveryAgentService(mock_session)
        service.repository.get_by_id = AsyncMock(return_value=agent)

        with pytest.raises(DuplicateKeyError, match="phone \\+919822222222 already exists"):
            await service.update_agent(agent.id, vendor_id, {"phone": " +919822222222 "})

        mock_session.rollback.assert_awaited_once()
        mock_session.refresh.assert_not_called()

    async def test_update_ignores_identity_fields(self, agent_service, make_agent, vendor_id):
        agent = make_agent()
        agent_service.repository.get_by_id.return_value = agent
        agent_service.repository.update.return_value = agent

        await agent_service.update_agent(
            agent.id,
            vendor_id,
            {
                "id": str(uuid.uuid4()),
                "vendor_id": str(uuid.uuid4()),
                "vehicle_type": "car",
                "is_active": None,
                "vehicle_details": None,
            },
        )

        agent_service.repository.update.assert_awaited_once_with(
            agent, vehicle_type=VehicleType.CAR, vehicle_details=None
        )

    async def test_empty_name_rejected(self, agent_service, vendor_id):
        with pytest.raises(ValidationError, match="name cannot be empty"):
            await agent_service.update_agent(uuid.uuid4(), vendor_id, {"name": "  "})

    async def test_other_vendors_agent(self, agent_service, make_agent, other_vendor_id):
        agent_service.repository.get_by_id.return_value = make_agent()

        with pytest.raises(ForbiddenError):
            await agent_service.update_agent(uuid.uuid4(), other_vendor_id, {"name": "X"})

        agent_service.repository.update.assert_not_called()


class TestDeleteAgent:
    async def test_delete_releases_open_deliveries(
        self, agent_service, make_agent, vendor_id
    ):
        agent = make_agent()
        agent_service.repository.get_by_id.return_value = agent
        agent_service.delivery_service.release_agent.return_value = 2
        agent_service.repository.delete.return_value = True

        result = await agent_service.delete_agent(str(agent.id), vendor_id)

        assert result == {"id": str(agent.id), "deleted": True, "released_deliveries": 2}
        agent_service.delivery_service.release_agent.assert_awaited_once_with(
            agent.id, vendor_id
        )

    async def test_delete_refused_while_on_the_road(
        self, agent_service, make_agent, vendor_id
    ):
        agent_service.repository.get_by_id.return_value = make_agent()
        agent_service.delivery_service.release_agent.side_effect = ConflictError(
            "Delivery agent has deliveries out for delivery and cannot be released"
        )

        with pytest.raises(ConflictError, match="out for delivery"):
            await agent_service.delete_agent(uuid.uuid4(), vendor_id)

        agent_service.repository.delete.assert_not_called()

    async def test_delete_missing_agent(self, agent_service, vendor_id):
        agent_service.repository.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            await agent_service.delete_agent(uuid.uuid4(), vendor_id)


def test_format_agent(make_agent):
    agent = make_agent()
    data = format_agent(agent)

    assert data["vehicle_type"] == "bike"
    assert data["vendor_id"] == str(agent.vendor_id)
    assert data["created_at"] == "2026-10-01T00:00:00+00:00"
