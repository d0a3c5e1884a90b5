"""
Test suite for DeliveryService.

Covers agent assignment and release, status updates through the shared
state machine, ownership checks and guarded writes.
"""

import uuid
from unittest.mock import AsyncMock

import pytest

from kirana.core.errors import (
    ConflictError,
    ForbiddenError,
    InvalidIdentifierError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from kirana.services.deliveries.enums import DeliveryStatus
from kirana.services.deliveries.repository import DeliveryRepository
from kirana.services.deliveries.service import DeliveryService, format_delivery
from kirana.services.delivery_agents.repository import DeliveryAgentRepository

DELIVERY_55 = uuid.UUID("00000000-0000-0000-0000-000000000055")
AGENT_9 = uuid.UUID("00000000-0000-0000-0000-000000000009")


@pytest.fixture
def delivery_service(mock_session: AsyncMock) -> DeliveryService:
    service = DeliveryService(mock_session)
    service.repository = AsyncMock(spec=DeliveryRepository)
    service.agent_repository = AsyncMock(spec=DeliveryAgentRepository)
    service.repository.apply_change.return_value = True
    return service


class TestFormatDelivery:
    def test_includes_agent_summary(self, make_delivery, make_agent):
        agent = make_agent(agent_id=AGENT_9)
        data = format_delivery(make_delivery(status=DeliveryStatus.ASSIGNED, agent=agent))

        assert data["status"] == "Assigned"
        assert data["delivery_agent_id"] == str(AGENT_9)
        assert data["agent"] == {
            "id": str(AGENT_9),
            "name": "Ravi Kumar",
            "phone": "+919811111111",
            "vehicle_type": "bike",
        }
        assert data["order_value"] == 240.0

    def test_unassigned_delivery_has_no_agent(self, make_delivery):
        data = format_delivery(make_delivery())

        assert data["agent"] is None
        assert data["delivery_agent_id"] is None
        assert data["actual_delivery_time"] is None


# ============================================================================
# assign_agent
# ============================================================================


class TestAssignAgent:
    async def test_assign_agent_to_pending_delivery(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        agent = make_agent(agent_id=AGENT_9)
        pending = make_delivery(delivery_id=DELIVERY_55)
        assigned = make_delivery(
            delivery_id=DELIVERY_55, status=DeliveryStatus.ASSIGNED, agent=agent
        )
        delivery_service.agent_repository.get_by_id.return_value = agent
        delivery_service.repository.get_by_id.side_effect = [pending, assigned]

        result = await delivery_service.assign_agent(str(DELIVERY_55), str(AGENT_9), vendor_id)

        delivery_service.repository.apply_change.assert_awaited_once_with(
            delivery_id=DELIVERY_55,
            vendor_id=vendor_id,
            expected_status=DeliveryStatus.PENDING_ASSIGNMENT,
            values={"status": DeliveryStatus.ASSIGNED, "delivery_agent_id": AGENT_9},
        )
        assert result["status"] == "Assigned"
        assert result["agent"]["id"] == str(AGENT_9)

    async def test_agent_of_other_vendor_is_rejected_without_write(
        self, delivery_service, make_delivery, make_agent, vendor_id, other_vendor_id
    ):
        delivery_service.agent_repository.get_by_id.return_value = make_agent(
            agent_id=AGENT_9, owner_id=other_vendor_id
        )
        delivery_service.repository.get_by_id.return_value = make_delivery(
            delivery_id=DELIVERY_55
        )

        with pytest.raises(ForbiddenError, match="Delivery agent belongs"):
            await delivery_service.assign_agent(DELIVERY_55, AGENT_9, vendor_id)

        delivery_service.repository.apply_change.assert_not_called()

    async def test_delivery_of_other_vendor_is_rejected_without_write(
        self, delivery_service, make_delivery, make_agent, vendor_id, other_vendor_id
    ):
        delivery_service.agent_repository.get_by_id.return_value = make_agent(
            agent_id=AGENT_9, owner_id=other_vendor_id
        )
        delivery_service.repository.get_by_id.return_value = make_delivery(
            delivery_id=DELIVERY_55, owner_id=vendor_id
        )

        with pytest.raises(ForbiddenError):
            await delivery_service.assign_agent(DELIVERY_55, AGENT_9, other_vendor_id)

        delivery_service.repository.apply_change.assert_not_called()

    async def test_unknown_agent(self, delivery_service, vendor_id):
        delivery_service.agent_repository.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Delivery agent not found"):
            await delivery_service.assign_agent(DELIVERY_55, AGENT_9, vendor_id)

    async def test_inactive_agent(self, delivery_service, make_agent, vendor_id):
        delivery_service.agent_repository.get_by_id.return_value = make_agent(is_active=False)

        with pytest.raises(ValidationError, match="inactive"):
            await delivery_service.assign_agent(DELIVERY_55, AGENT_9, vendor_id)

        delivery_service.repository.apply_change.assert_not_called()

    async def test_unknown_delivery(self, delivery_service, make_agent, vendor_id):
        delivery_service.agent_repository.get_by_id.return_value = make_agent()
        delivery_service.repository.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match="Delivery not found"):
            await delivery_service.assign_agent(DELIVERY_55, AGENT_9, vendor_id)

    async def test_malformed_ids_never_reach_repository(self, delivery_service, vendor_id):
        with pytest.raises(InvalidIdentifierError):
            await delivery_service.assign_agent("del-55", str(AGENT_9), vendor_id)
        with pytest.raises(InvalidIdentifierError):
            await delivery_service.assign_agent(str(DELIVERY_55), "agent-9", vendor_id)

        delivery_service.repository.get_by_id.assert_not_called()
        delivery_service.agent_repository.get_by_id.assert_not_called()

    async def test_null_agent_unassigns(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        assigned = make_delivery(
            delivery_id=DELIVERY_55, status=DeliveryStatus.ASSIGNED, agent=make_agent()
        )
        released = make_delivery(delivery_id=DELIVERY_55)
        delivery_service.repository.get_by_id.side_effect = [assigned, released]

        result = await delivery_service.assign_agent(DELIVERY_55, None, vendor_id)

        delivery_service.agent_repository.get_by_id.assert_not_called()
        values = delivery_service.repository.apply_change.await_args.kwargs["values"]
        assert values == {
            "status": DeliveryStatus.PENDING_ASSIGNMENT,
            "delivery_agent_id": None,
        }
        assert result["status"] == "Pending Assignment"
        assert result["agent"] is None

    async def test_assigning_out_for_delivery_is_rejected(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        delivery_service.agent_repository.get_by_id.return_value = make_agent()
        delivery_service.repository.get_by_id.return_value = make_delivery(
            status=DeliveryStatus.OUT_FOR_DELIVERY, agent=make_agent()
        )

        with pytest.raises(InvalidTransitionError):
            await delivery_service.assign_agent(DELIVERY_55, AGENT_9, vendor_id)

    async def test_lost_race_is_conflict(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        delivery_service.agent_repository.get_by_id.return_value = make_agent()
        delivery_service.repository.get_by_id.return_value = make_delivery()
        delivery_service.repository.apply_change.return_value = False

        with pytest.raises(ConflictError):
            await delivery_service.assign_agent(DELIVERY_55, AGENT_9, vendor_id)


# ============================================================================
# update_delivery_status
# ============================================================================


class TestUpdateDeliveryStatus:
    async def test_delivered_stamps_delivery_time(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        agent = make_agent()
        delivery = make_delivery(status=DeliveryStatus.OUT_FOR_DELIVERY, agent=agent)
        delivery_service.repository.get_by_id.return_value = delivery

        await delivery_service.update_delivery_status(delivery.id, "Delivered", vendor_id)

        values = delivery_service.repository.apply_change.await_args.kwargs["values"]
        assert values["status"] == DeliveryStatus.DELIVERED
        assert values["delivery_agent_id"] == agent.id
        assert values["actual_delivery_time"] is not None

    async def test_pending_assignment_clears_agent(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        delivery = make_delivery(status=DeliveryStatus.ASSIGNED, agent=make_agent())
        delivery_service.repository.get_by_id.return_value = delivery

        await delivery_service.update_delivery_status(
            delivery.id, "Pending Assignment", vendor_id
        )

        values = delivery_service.repository.apply_change.await_args.kwargs["values"]
        assert values["delivery_agent_id"] is None

    async def test_unknown_status_is_validation_error(self, delivery_service, vendor_id):
        with pytest.raises(ValidationError):
            await delivery_service.update_delivery_status(uuid.uuid4(), "Lost", vendor_id)

        delivery_service.repository.get_by_id.assert_not_called()

    async def test_terminal_delivery_is_frozen(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        delivery_service.repository.get_by_id.return_value = make_delivery(
            status=DeliveryStatus.DELIVERED, agent=make_agent()
        )

        with pytest.raises(InvalidTransitionError):
            await delivery_service.update_delivery_status(uuid.uuid4(), "Cancelled", vendor_id)

        delivery_service.repository.apply_change.assert_not_called()

    async def test_other_vendor_is_forbidden(
        self, delivery_service, make_delivery, other_vendor_id
    ):
        delivery_service.repository.get_by_id.return_value = make_delivery()

        with pytest.raises(ForbiddenError):
            await delivery_service.update_delivery_status(
                uuid.uuid4(), "Delayed", other_vendor_id
            )


# ============================================================================
# Listing and release
# ============================================================================


class TestListAndRelease:
    async def test_list_deliveries(self, delivery_service, make_delivery, vendor_id):
        delivery_service.repository.list_vendor_deliveries.return_value = (
            [make_delivery()],
            1,
        )

        result = await delivery_service.list_deliveries(vendor_id, status="assigned")

        delivery_service.repository.list_vendor_deliveries.assert_awaited_once_with(
            vendor_id=vendor_id, status=DeliveryStatus.ASSIGNED, skip=0, limit=20
        )
        assert result["total"] == 1
        assert len(result["deliveries"]) == 1

    async def test_list_rejects_unknown_status(self, delivery_service, vendor_id):
        with pytest.raises(ValidationError):
            await delivery_service.list_deliveries(vendor_id, status="Lost")

    async def test_release_agent_returns_deliveries_to_pending(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        agent = make_agent()
        open_deliveries = [
            make_delivery(status=DeliveryStatus.ASSIGNED, agent=agent),
            make_delivery(status=DeliveryStatus.DELAYED, agent=agent),
        ]
        delivery_service.repository.list_open_for_agent.return_value = open_deliveries

        released = await delivery_service.release_agent(agent.id, vendor_id)

        assert released == 2
        for call in delivery_service.repository.apply_change.await_args_list:
            assert call.kwargs["values"] == {
                "status": DeliveryStatus.PENDING_ASSIGNMENT,
                "delivery_agent_id": None,
            }

    async def test_release_refused_when_a_delivery_is_on_the_road(
        self, delivery_service, make_delivery, make_agent, vendor_id
    ):
        agent = make_agent()
        delivery_service.repository.list_open_for_agent.return_value = [
            make_delivery(status=DeliveryStatus.ASSIGNED, agent=agent),
            make_delivery(status=DeliveryStatus.OUT_FOR_DELIVERY, agent=agent),
        ]

        with pytest.raises(ConflictError, match="out for delivery"):
            await delivery_service.release_agent(agent.id, vendor_id)

        delivery_service.repository.apply_change.assert_not_called()
