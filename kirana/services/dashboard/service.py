"""
Vendor dashboard service.

Builds headline stats, a monthly sales series, the most recent orders and
the products running low on stock. Cancelled orders count towards neither
revenue nor sales.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.config import get_settings
from kirana.core.logging import get_logger
from kirana.services.dashboard.repository import DashboardRepository
from kirana.services.orders.repository import OrderRepository
from kirana.services.orders.service import format_vendor_order

logger = get_logger(__name__)

RECENT_ORDER_COUNT = 5
LOW_STOCK_COUNT = 3


def month_window(now: datetime, months: int) -> list[tuple[int, int]]:
    """The last ``months`` calendar months as (year, month), oldest first."""
    year, month = now.year, now.month
    window = []
    for _ in range(months):
        window.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(window))


class DashboardService:
    """Vendor dashboard aggregation."""

    def __init__(self, session: AsyncSession):
        self.repository = DashboardRepository(session)
        self.order_repository = OrderRepository(session)

    async def get_dashboard(
        self, vendor_id: uuid.UUID, now: Optional[datetime] = None
    ) -> dict[str, Any]:
        settings = get_settings()
        now = now or datetime.now(timezone.utc)

        window = month_window(now, settings.dashboard_months)
        first_year, first_month = window[0]
        since = datetime(first_year, first_month, 1, tzinfo=timezone.utc)

        totals = await self.repository.get_order_totals(vendor_id)
        product_count = await self.repository.count_products(vendor_id)
        monthly = await self.repository.get_monthly_sales(vendor_id, since)
        recent_orders, _ = await self.order_repository.list_vendor_orders(
            vendor_id, skip=0, limit=RECENT_ORDER_COUNT
        )
        low_stock = await self.repository.get_low_stock_products(
            vendor_id, settings.low_stock_threshold, limit=LOW_STOCK_COUNT
        )

        sales_data = [
            {
                "name": datetime(year, month, 1).strftime("%b"),
                "sales": float(monthly.get((year, month), Decimal("0"))),
            }
            for year, month in window
        ]

        logger.debug(
            "Dashboard built",
            vendor_id=str(vendor_id),
            orders=totals["orders"],
            low_stock=len(low_stock),
        )
        return {
            "stats": {
                "revenue": float(totals["revenue"]),
                "orders": totals["orders"],
                "customers": totals["customers"],
                "products": product_count,
                "sales_data": sales_data,
            },
            "recent_orders": [format_vendor_order(order) for order in recent_orders],
            "low_stock_products": [
                {
                    "id": str(product.id),
                    "name": product.name,
                    "stock": product.stock,
                    "unit": product.unit,
                    "category": product.category,
                }
                for product in low_stock
            ],
        }
