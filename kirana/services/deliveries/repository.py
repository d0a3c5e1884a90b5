"""
Delivery data access repository.

Deliveries are only mutated through ``apply_change``, a guarded UPDATE
that matches the delivery id, its vendor, and the status the change was
planned against.
"""

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import DuplicateKeyError, RepositoryError
from kirana.core.logging import get_logger
from kirana.database.models.customer import Customer
from kirana.database.models.delivery import Delivery
from kirana.database.models.order import Order
from kirana.services.deliveries.enums import DeliveryStatus

logger = get_logger(__name__)


class DeliveryRepository:
    """Repository for delivery data access operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, delivery_id: uuid.UUID) -> Optional[Delivery]:
        try:
            stmt = (
                select(Delivery)
                .where(Delivery.id == delivery_id)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch delivery", delivery_id=str(delivery_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to fetch delivery", delivery_id=str(delivery_id)
            ) from e

    async def list_vendor_deliveries(
        self,
        vendor_id: uuid.UUID,
        status: Optional[DeliveryStatus] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Delivery], int]:
        """
        Get a vendor's deliveries, newest first, with agents loaded.

        Returns:
            Tuple of (deliveries, total_count)
        """
        conditions = [Delivery.vendor_id == vendor_id]
        if status:
            conditions.append(Delivery.status == status)

        try:
            stmt = (
                select(Delivery)
                .where(and_(*conditions))
                .order_by(Delivery.created_at.desc())
                .offset(skip)
                .limit(limit)
            )
            count_stmt = (
                select(func.count()).select_from(Delivery).where(and_(*conditions))
            )
            result = await self.session.execute(stmt)
            count_result = await self.session.execute(count_stmt)

            deliveries = result.scalars().all()
            total_count = count_result.scalar_one()

            logger.debug(
                "Deliveries fetched",
                vendor_id=str(vendor_id),
                count=len(deliveries),
                total=total_count,
            )
            return deliveries, total_count

        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch deliveries", vendor_id=str(vendor_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to fetch deliveries", vendor_id=str(vendor_id)
            ) from e

    async def list_open_for_agent(self, agent_id: uuid.UUID) -> Sequence[Delivery]:
        """Get and lock the agent's deliveries that are not yet Delivered or Cancelled."""
        try:
            stmt = (
                select(Delivery)
                .where(
                    Delivery.delivery_agent_id == agent_id,
                    Delivery.status.notin_(
                        [DeliveryStatus.DELIVERED, DeliveryStatus.CANCELLED]
                    ),
                )
                .with_for_update()
            )
            result = await self.session.execute(stmt)
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch agent deliveries", agent_id=str(agent_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to fetch agent deliveries", agent_id=str(agent_id)
            ) from e

    async def create_for_order(self, order: Order) -> Delivery:
        """
        Create the Pending Assignment delivery for an order.

        Customer name, phone, address and order value are snapshotted from
        the order and the customer record.

        Raises:
            DuplicateKeyError: If the order already has a delivery
            RepositoryError: If the insert fails
        """
        try:
            customer_phone = await self.session.scalar(
                select(Customer.phone).where(Customer.id == order.customer_id)
            )

            delivery = Delivery(
                order_id=order.id,
                customer_id=order.customer_id,
                vendor_id=order.vendor_id,
                customer_name=order.customer_name,
                customer_phone=customer_phone,
                customer_address=order.delivery_address,
                order_value=order.total_amount,
                status=DeliveryStatus.PENDING_ASSIGNMENT,
                delivery_agent_id=None,
            )
            self.session.add(delivery)
            await self.session.flush()

            logger.info(
                "Delivery created",
                delivery_id=str(delivery.id),
                order_id=str(order.id),
                vendor_id=str(order.vendor_id),
            )
            return delivery

        except IntegrityError as e:
            await self.session.rollback()
            logger.error(
                "Delivery creation failed - integrity error",
                order_id=str(order.id),
                error=str(e),
            )
            raise DuplicateKeyError(
                "Delivery already exists for order", order_id=str(order.id)
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Delivery creation failed - database error",
                order_id=str(order.id),
                error=str(e),
            )
            raise RepositoryError(
                "Failed to create delivery", order_id=str(order.id)
            ) from e

    async def apply_change(
        self,
        delivery_id: uuid.UUID,
        vendor_id: uuid.UUID,
        expected_status: DeliveryStatus,
        values: dict[str, Any],
    ) -> bool:
        """
        Write planned column values if the delivery is still in ``expected_status``.

        Returns:
            True if the row was updated, False if it no longer matched
        """
        try:
            stmt = (
                update(Delivery)
                .where(
                    Delivery.id == delivery_id,
                    Delivery.vendor_id == vendor_id,
                    Delivery.status == expected_status,
                )
                .values(**values, updated_at=func.now())
                .returning(Delivery.id)
                .execution_options(synchronize_session=False)
            )
            result = await self.session.execute(stmt)
            updated = result.scalar_one_or_none() is not None

            logger.info(
                "Delivery update executed",
                delivery_id=str(delivery_id),
                from_status=expected_status.value,
                to_status=values["status"].value,
                matched=updated,
            )
            return updated

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to update delivery", delivery_id=str(delivery_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to update delivery", delivery_id=str(delivery_id)
            ) from e
