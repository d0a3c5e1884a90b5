"""Aggregate queries behind the vendor dashboard."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Sequence

from sqlalchemy import distinct, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import RepositoryError
from kirana.core.logging import get_logger
from kirana.database.models.order import Order
from kirana.database.models.product import Product
from kirana.services.orders.enums import OrderStatus

logger = get_logger(__name__)


def utc_month(column):
    """Truncate a timestamptz column to its calendar month in UTC."""
    return func.date_trunc("month", func.timezone("UTC", column))


class DashboardRepository:
    """Read-only aggregates for one vendor."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_order_totals(self, vendor_id: uuid.UUID) -> dict[str, object]:
        """
        Revenue (excluding cancelled orders), order count and distinct customers.
        """
        try:
            revenue_stmt = select(
                func.coalesce(func.sum(Order.total_amount), 0)
            ).where(
                Order.vendor_id == vendor_id,
                Order.status != OrderStatus.CANCELLED,
            )
            counts_stmt = select(
                func.count(Order.id),
                func.count(distinct(Order.customer_id)),
            ).where(Order.vendor_id == vendor_id)

            revenue = (await self.session.execute(revenue_stmt)).scalar_one()
            order_count, customer_count = (await self.session.execute(counts_stmt)).one()

            return {
                "revenue": Decimal(revenue),
                "orders": order_count,
                "customers": customer_count,
            }
        except SQLAlchemyError as e:
            logger.error("Failed to compute order totals", vendor_id=str(vendor_id), error=str(e))
            raise RepositoryError(
                "Failed to load dashboard", vendor_id=str(vendor_id)
            ) from e

    async def count_products(self, vendor_id: uuid.UUID) -> int:
        try:
            result = await self.session.execute(
                select(func.count(Product.id)).where(Product.vendor_id == vendor_id)
            )
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error("Failed to count products", vendor_id=str(vendor_id), error=str(e))
            raise RepositoryError(
                "Failed to load dashboard", vendor_id=str(vendor_id)
            ) from e

    async def get_monthly_sales(
        self, vendor_id: uuid.UUID, since: datetime
    ) -> dict[tuple[int, int], Decimal]:
        """Non-cancelled sales since ``since`` keyed by (year, month)."""
        month = utc_month(Order.order_date).label("month")
        try:
            result = await self.session.execute(
                select(month, func.sum(Order.total_amount))
                .where(
                    Order.vendor_id == vendor_id,
                    Order.status != OrderStatus.CANCELLED,
                    Order.order_date >= since,
                )
                .group_by(month)
            )
            return {
                (row_month.year, row_month.month): Decimal(total or 0)
                for row_month, total in result.all()
            }
        except SQLAlchemyError as e:
            logger.error("Failed to compute monthly sales", vendor_id=str(vendor_id), error=str(e))
            raise RepositoryError(
                "Failed to load dashboard", vendor_id=str(vendor_id)
            ) from e

    async def get_low_stock_products(
        self, vendor_id: uuid.UUID, threshold: int, limit: int = 3
    ) -> Sequence[Product]:
        try:
            result = await self.session.execute(
                select(Product)
                .where(Product.vendor_id == vendor_id, Product.stock <= threshold)
                .order_by(Product.stock.asc(), Product.name)
                .limit(limit)
            )
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch low stock products", vendor_id=str(vendor_id), error=str(e))
            raise RepositoryError(
                "Failed to load dashboard", vendor_id=str(vendor_id)
            ) from e
