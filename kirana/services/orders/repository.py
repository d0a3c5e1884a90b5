"""
Order data access repository.

Async queries for creating orders with their line items, vendor- and
customer-scoped listing, and the guarded status update used by the order
lifecycle. Low-level SQLAlchemy failures are logged with full detail and
re-raised as RepositoryError with a fixed message.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from kirana.core.errors import DuplicateKeyError, RepositoryError
from kirana.core.logging import get_logger
from kirana.database.models.order import Order, OrderItem
from kirana.services.orders.enums import OrderStatus

logger = get_logger(__name__)


class OrderRepository:
    """
    Repository for order data access operations.

    All methods run inside the caller's session; nothing here commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_order_by_id(self, order_id: uuid.UUID) -> Optional[Order]:
        """
        Get order by ID with its line items and delivery loaded.

        Returns:
            Order if found, None otherwise

        Raises:
            RepositoryError: If query fails
        """
        try:
            stmt = (
                select(Order)
                .where(Order.id == order_id)
                .options(selectinload(Order.items), selectinload(Order.delivery))
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(stmt)
            order = result.scalar_one_or_none()

            logger.debug("Order lookup", order_id=str(order_id), found=order is not None)
            return order

        except SQLAlchemyError as e:
            logger.error("Failed to fetch order", order_id=str(order_id), error=str(e))
            raise RepositoryError(
                "Failed to fetch order",
                order_id=str(order_id),
            ) from e

    async def list_vendor_orders(
        self,
        vendor_id: uuid.UUID,
        status: Optional[OrderStatus] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Order], int]:
        """
        Get a vendor's orders, newest first.

        Returns:
            Tuple of (orders, total_count)

        Raises:
            RepositoryError: If query fails
        """
        conditions = [Order.vendor_id == vendor_id]
        if status:
            conditions.append(Order.status == status)
        return await self._list_orders(conditions, skip, limit, vendor_id=str(vendor_id))

    async def list_customer_orders(
        self,
        customer_id: uuid.UUID,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Order], int]:
        """Get a customer's orders, newest first, as (orders, total_count)."""
        conditions = [Order.customer_id == customer_id]
        return await self._list_orders(
            conditions, skip, limit, customer_id=str(customer_id)
        )

    async def _list_orders(
        self,
        conditions: list,
        skip: int,
        limit: int,
        **log_context: Any,
    ) -> tuple[Sequence[Order], int]:
        try:
            stmt = (
                select(Order)
                .where(and_(*conditions))
                .options(selectinload(Order.items))
                .order_by(Order.created_at.desc())
                .offset(skip)
                .limit(limit)
            )
            count_stmt = select(func.count()).select_from(Order).where(and_(*conditions))

            result = await self.session.execute(stmt)
            count_result = await self.session.execute(count_stmt)

            orders = result.scalars().all()
            total_count = count_result.scalar_one()

            logger.debug(
                "Orders fetched",
                count=len(orders),
                total=total_count,
                skip=skip,
                limit=limit,
                **log_context,
            )
            return orders, total_count

        except SQLAlchemyError as e:
            logger.error("Failed to fetch orders", error=str(e), **log_context)
            raise RepositoryError("Failed to fetch orders", **log_context) from e

    async def create_order_with_items(
        self,
        order_number: str,
        customer_id: uuid.UUID,
        customer_name: str,
        vendor_id: uuid.UUID,
        delivery_address: dict[str, Any],
        items: Sequence[dict[str, Any]],
        order_date: Optional[datetime] = None,
    ) -> Order:
        """
        Create a Pending order together with its line items.

        Args:
            items: Line dicts with product_id, name, quantity, price, unit

        Returns:
            Created order with items attached

        Raises:
            DuplicateKeyError: If the order number collides
            RepositoryError: If the insert fails
        """
        total_amount = sum(
            (Decimal(item["price"]) * item["quantity"] for item in items),
            Decimal("0.00"),
        )

        try:
            order = Order(
                order_number=order_number,
                customer_id=customer_id,
                customer_name=customer_name,
                vendor_id=vendor_id,
                delivery_address=delivery_address,
                total_amount=total_amount,
                status=OrderStatus.PENDING,
                items=[
                    OrderItem(
                        product_id=item["product_id"],
                        name=item["name"],
                        quantity=item["quantity"],
                        price=Decimal(item["price"]),
                        unit=item["unit"],
                    )
                    for item in items
                ],
            )
            if order_date is not None:
                order.order_date = order_date

            self.session.add(order)
            await self.session.flush()

            logger.info(
                "Order created",
                order_id=str(order.id),
                order_number=order_number,
                vendor_id=str(vendor_id),
                item_count=len(items),
                total_amount=float(total_amount),
            )
            return order

        except IntegrityError as e:
            await self.session.rollback()
            logger.error(
                "Order creation failed - integrity error",
                order_number=order_number,
                error=str(e),
            )
            raise DuplicateKeyError(
                f"Order {order_number} already exists",
                order_number=order_number,
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Order creation failed - database error",
                order_number=order_number,
                error=str(e),
            )
            raise RepositoryError(
                "Failed to create order",
                order_number=order_number,
            ) from e

    async def update_order_status(
        self,
        order_id: uuid.UUID,
        vendor_id: uuid.UUID,
        expected_status: OrderStatus,
        new_status: OrderStatus,
    ) -> bool:
        """
        Guarded status update matching id, owning vendor, and current status.

        Returns:
            True if exactly one row changed, False if nothing matched (the
            order moved on concurrently or does not belong to the vendor)

        Raises:
            RepositoryError: If the update fails
        """
        try:
            stmt = (
                update(Order)
                .where(
                    Order.id == order_id,
                    Order.vendor_id == vendor_id,
                    Order.status == expected_status,
                )
                .values(status=new_status, updated_at=func.now())
                .returning(Order.id)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            updated = result.scalar_one_or_none() is not None

            logger.info(
                "Order status update executed",
                order_id=str(order_id),
                from_status=expected_status.value,
                to_status=new_status.value,
                matched=updated,
            )
            return updated

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to update order status",
                order_id=str(order_id),
                error=str(e),
            )
            raise RepositoryError(
                "Failed to update order status",
                order_id=str(order_id),
            ) from e
