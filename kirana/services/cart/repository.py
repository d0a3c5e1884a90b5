"""Cart data access repository."""

import uuid
from typing import Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import RepositoryError
from kirana.core.logging import get_logger
from kirana.database.models.cart import CartItem

logger = get_logger(__name__)


class CartRepository:
    """Repository for a customer's cart lines."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_items(self, customer_id: uuid.UUID) -> Sequence[CartItem]:
        try:
            result = await self.session.execute(
                select(CartItem)
                .where(CartItem.customer_id == customer_id)
                .order_by(CartItem.created_at)
                .execution_options(populate_existing=True)
            )
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch cart", customer_id=str(customer_id), error=str(e))
            raise RepositoryError("Failed to fetch cart", customer_id=str(customer_id)) from e

    async def get_item(
        self, customer_id: uuid.UUID, product_id: uuid.UUID
    ) -> Optional[CartItem]:
        try:
            result = await self.session.execute(
                select(CartItem).where(
                    CartItem.customer_id == customer_id,
                    CartItem.product_id == product_id,
                )
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch cart item",
                customer_id=str(customer_id),
                product_id=str(product_id),
                error=str(e),
            )
            raise RepositoryError("Failed to fetch cart item") from e

    async def save_item(
        self, customer_id: uuid.UUID, product_id: uuid.UUID, quantity: int
    ) -> CartItem:
        """Insert the line or overwrite its quantity."""
        try:
            item = await self.get_item(customer_id, product_id)
            if item is None:
                item = CartItem(
                    customer_id=customer_id, product_id=product_id, quantity=quantity
                )
                self.session.add(item)
            else:
                item.quantity = quantity
            await self.session.flush()
            await self.session.refresh(item)

            logger.debug(
                "Cart item saved",
                customer_id=str(customer_id),
                product_id=str(product_id),
                quantity=quantity,
            )
            return item

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to save cart item",
                customer_id=str(customer_id),
                product_id=str(product_id),
                error=str(e),
            )
            raise RepositoryError("Failed to save cart item") from e

    async def remove_item(self, customer_id: uuid.UUID, product_id: uuid.UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(CartItem)
                .where(
                    CartItem.customer_id == customer_id,
                    CartItem.product_id == product_id,
                )
                .returning(CartItem.id)
                .execution_options(synchronize_session=False)
            )
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to remove cart item",
                customer_id=str(customer_id),
                product_id=str(product_id),
                error=str(e),
            )
            raise RepositoryError("Failed to remove cart item") from e

    async def clear(self, customer_id: uuid.UUID) -> int:
        try:
            result = await self.session.execute(
                delete(CartItem)
                .where(CartItem.customer_id == customer_id)
                .execution_options(synchronize_session=False)
            )
            logger.debug("Cart cleared", customer_id=str(customer_id), removed=result.rowcount)
            return result.rowcount
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to clear cart", customer_id=str(customer_id), error=str(e))
            raise RepositoryError("Failed to clear cart", customer_id=str(customer_id)) from e
