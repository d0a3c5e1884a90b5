"""
Pytest configuration and shared test fixtures.

Provides mocked async database sessions, authenticated request contexts for
vendors and customers, model factories, and sync/async clients bound to the
FastAPI application with its dependencies overridden.
"""

import os

os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("APP_LOG_LEVEL", "WARNING")

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, AsyncGenerator, Callable, Generator, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.api.deps import (
    RequestContext,
    get_request_context,
    require_customer,
    require_vendor,
)
from kirana.api.rate_limit import limiter
from kirana.core.roles import AccountRole
from kirana.database.connection import get_db
from kirana.database.models.delivery_agent import VehicleType
from kirana.main import app
from kirana.services.deliveries.enums import DeliveryStatus
from kirana.services.orders.enums import OrderStatus

limiter.enabled = False


# ============================================================================
# Identities
# ============================================================================


@pytest.fixture
def vendor_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def other_vendor_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def customer_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def vendor_context(vendor_id: uuid.UUID) -> RequestContext:
    return RequestContext(account_id=vendor_id, role=AccountRole.VENDOR)


@pytest.fixture
def customer_context(customer_id: uuid.UUID) -> RequestContext:
    return RequestContext(account_id=customer_id, role=AccountRole.CUSTOMER)


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def mock_session() -> AsyncMock:
    """
    Create mock async database session.

    Returns:
        AsyncMock: Mock database session
    """
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ============================================================================
# Model factories
# ============================================================================


@pytest.fixture
def make_order(vendor_id: uuid.UUID, customer_id: uuid.UUID) -> Callable[..., MagicMock]:
    """Build order doubles with the attributes the services read."""

    def factory(
        status: OrderStatus = OrderStatus.PENDING,
        order_id: Optional[uuid.UUID] = None,
        owner_id: Optional[uuid.UUID] = None,
        delivery: Any = None,
        order_number: str = "ORD-20261017-A1B2C3",
    ) -> MagicMock:
        order = MagicMock()
        order.id = order_id or uuid.uuid4()
        order.order_number = order_number
        order.vendor_id = owner_id or vendor_id
        order.customer_id = customer_id
        order.customer_name = "Asha Rao"
        order.status = status
        order.order_date = datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)
        order.delivery_address = {
            "street": "12 MG Road",
            "city": "Pune",
            "postal_code": "411001",
        }
        order.total_amount = Decimal("240.00")
        order.item_count = 2
        order.items = []
        order.delivery = delivery
        return order

    return factory


@pytest.fixture
def make_delivery(vendor_id: uuid.UUID, customer_id: uuid.UUID) -> Callable[..., MagicMock]:
    """Build delivery doubles with the attributes the services read."""

    def factory(
        status: DeliveryStatus = DeliveryStatus.PENDING_ASSIGNMENT,
        delivery_id: Optional[uuid.UUID] = None,
        owner_id: Optional[uuid.UUID] = None,
        agent: Any = None,
        actual_pickup_time: Optional[datetime] = None,
        actual_delivery_time: Optional[datetime] = None,
    ) -> MagicMock:
        delivery = MagicMock()
        delivery.id = delivery_id or uuid.uuid4()
        delivery.order_id = uuid.uuid4()
        delivery.customer_id = customer_id
        delivery.vendor_id = owner_id or vendor_id
        delivery.customer_name = "Asha Rao"
        delivery.customer_phone = "+919800000001"
        delivery.customer_address = {
            "street": "12 MG Road",
            "city": "Pune",
            "postal_code": "411001",
        }
        delivery.order_value = Decimal("240.00")
        delivery.status = status
        delivery.agent = agent
        delivery.delivery_agent_id = agent.id if agent else None
        delivery.scheduled_pickup_time = None
        delivery.actual_pickup_time = actual_pickup_time
        delivery.scheduled_delivery_time = None
        delivery.estimated_delivery_time = None
        delivery.actual_delivery_time = actual_delivery_time
        delivery.delivery_notes = None
        delivery.created_at = datetime(2026, 10, 17, 10, 0, tzinfo=timezone.utc)
        return delivery

    return factory


@pytest.fixture
def make_agent(vendor_id: uuid.UUID) -> Callable[..., MagicMock]:
    """Build delivery agent doubles."""

    def factory(
        agent_id: Optional[uuid.UUID] = None,
        owner_id: Optional[uuid.UUID] = None,
        is_active: bool = True,
        name: str = "Ravi Kumar",
        phone: str = "+919811111111",
    ) -> MagicMock:
        agent = MagicMock()
        agent.id = agent_id or uuid.uuid4()
        agent.vendor_id = owner_id or vendor_id
        agent.name = name
        agent.phone = phone
        agent.vehicle_type = VehicleType.BIKE
        agent.vehicle_details = "Honda Activa"
        agent.is_active = is_active
        agent.created_at = datetime(2026, 10, 1, tzinfo=timezone.utc)
        return agent

    return factory


# ============================================================================
# Application clients
# ============================================================================


@pytest.fixture
def override_dependencies(mock_session: AsyncMock) -> Generator[Callable[..., None], None, None]:
    """
    Install dependency overrides for the database and the caller identity.

    Example:
        def test_list(override_dependencies, vendor_context, test_client):
            override_dependencies(vendor_context)
            response = test_client.get("/api/vendor/orders")
    """

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_session

    def install(context: Optional[RequestContext] = None) -> None:
        app.dependency_overrides[get_db] = _get_db
        if context is None:
            return

        async def _context() -> RequestContext:
            return context

        app.dependency_overrides[get_request_context] = _context
        if context.role == AccountRole.VENDOR:
            app.dependency_overrides[require_vendor] = _context
        else:
            app.dependency_overrides[require_customer] = _context

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def test_client() -> Generator[TestClient, None, None]:
    """
    Create a synchronous test client for the FastAPI application.

    Example:
        def test_health_endpoint(test_client):
            response = test_client.get("/health")
            assert response.status_code == 200
    """
    with TestClient(app) as client:
        yield client


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an asynchronous test client for the FastAPI application."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
