"""
Tests for the vendor dashboard.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from kirana.database.models.order import Order
from kirana.services.dashboard.repository import DashboardRepository, utc_month
from kirana.services.dashboard.service import DashboardService, month_window

NOW = datetime(2026, 2, 14, 12, 0, tzinfo=timezone.utc)


class TestMonthWindow:
    def test_window_crosses_year_boundary(self):
        assert month_window(NOW, 4) == [(2025, 11), (2025, 12), (2026, 1), (2026, 2)]

    def test_single_month(self):
        assert month_window(NOW, 1) == [(2026, 2)]


@pytest.fixture
def dashboard_service(mock_session: AsyncMock) -> DashboardService:
    service = DashboardService(mock_session)
    service.repository = AsyncMock()
    service.order_repository = AsyncMock()
    return service


async def test_dashboard_shape(dashboard_service, make_order, vendor_id):
    low = MagicMock()
    low.id = uuid.uuid4()
    low.name = "Paneer"
    low.stock = 2
    low.unit = "pack"
    low.category = "Dairy"
    dashboard_service.repository.get_order_totals.return_value = {
        "revenue": Decimal("1530.50"),
        "orders": 12,
        "customers": 7,
    }
    dashboard_service.repository.count_products.return_value = 40
    dashboard_service.repository.get_monthly_sales.return_value = {
        (2026, 1): Decimal("800.00"),
        (2026, 2): Decimal("730.50"),
    }
    dashboard_service.order_repository.list_vendor_orders.return_value = ([make_order()], 12)
    dashboard_service.repository.get_low_stock_products.return_value = [low]

    dashboard = await dashboard_service.get_dashboard(vendor_id, now=NOW)

    stats = dashboard["stats"]
    assert stats["revenue"] == 1530.5
    assert stats["orders"] == 12
    assert stats["customers"] == 7
    assert stats["products"] == 40
    assert [point["name"] for point in stats["sales_data"]] == [
        "Sep", "Oct", "Nov", "Dec", "Jan", "Feb",
    ]
    assert stats["sales_data"][0]["sales"] == 0.0
    assert stats["sales_data"][-1]["sales"] == 730.5
    assert len(dashboard["recent_orders"]) == 1
    assert dashboard["low_stock_products"][0]["name"] == "Paneer"

    since = dashboard_service.repository.get_monthly_sales.await_args.args[1]
    assert since == datetime(2025, 9, 1, tzinfo=timezone.utc)
    dashboard_service.order_repository.list_vendor_orders.assert_awaited_once_with(
        vendor_id, skip=0, limit=5
    )


class TestMonthlySalesQuery:
    def test_months_are_bucketed_in_utc(self):
        sql = str(
            utc_month(Order.order_date).compile(
                dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}
            )
        )

        assert sql == "date_trunc('month', timezone('UTC', orders.order_date))"

    async def test_monthly_sales_groups_by_utc_month(self, mock_session, vendor_id):
        result = MagicMock()
        result.all.return_value = [(datetime(2026, 1, 1), Decimal("120.50"))]
        mock_session.execute.return_value = result

        sales = await DashboardRepository(mock_session).get_monthly_sales(
            vendor_id, datetime(2025, 9, 1, tzinfo=timezone.utc)
        )

        assert sales == {(2026, 1): Decimal("120.50")}
        stmt = mock_session.execute.await_args.args[0]
        assert "timezone(" in str(stmt.compile(dialect=postgresql.dialect()))
