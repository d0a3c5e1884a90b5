"""
Shopping cart service.

A cart is the set of CartItem rows owned by one customer. Line prices are
read from the live product, so totals always reflect the current catalog.
"""

import uuid
from decimal import Decimal
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import NotFoundError, ValidationError, parse_identifier
from kirana.core.logging import get_logger
from kirana.database.models.cart import CartItem
from kirana.services.cart.repository import CartRepository
from kirana.services.catalog.repository import ProductRepository

logger = get_logger(__name__)


def format_cart(items: Sequence[CartItem]) -> dict[str, Any]:
    lines = []
    total = Decimal("0.00")
    for item in items:
        product = item.product
        line_total = product.price * item.quantity
        total += line_total
        lines.append(
            {
                "product_id": str(item.product_id),
                "vendor_id": str(product.vendor_id),
                "name": product.name,
                "price": float(product.price),
                "unit": product.unit,
                "quantity": item.quantity,
                "line_total": float(line_total),
                "is_available": product.is_available,
            }
        )
    return {
        "items": lines,
        "item_count": sum(item.quantity for item in items),
        "total": float(total),
    }


class CartService:
    """Customer cart operations."""

    def __init__(self, session: AsyncSession):
        self.repository = CartRepository(session)
        self.product_repository = ProductRepository(session)

    async def get_cart(self, customer_id: uuid.UUID) -> dict[str, Any]:
        items = await self.repository.list_items(customer_id)
        return format_cart(items)

    async def add_item(
        self, customer_id: uuid.UUID, product_id: Any, quantity: int = 1
    ) -> dict[str, Any]:
        """
        Add a product, incrementing the quantity when it is already in the cart.

        Raises:
            ValidationError: If quantity is not positive
            NotFoundError: If the product does not exist or is unavailable
        """
        product_uuid = parse_identifier(product_id, "product id")
        if quantity <= 0:
            raise ValidationError("Quantity must be positive", quantity=quantity)

        product = await self.product_repository.get_by_id(product_uuid)
        if not product or not product.is_available:
            raise NotFoundError("Product not found", product_id=str(product_uuid))

        existing = await self.repository.get_item(customer_id, product_uuid)
        new_quantity = quantity + (existing.quantity if existing else 0)
        await self.repository.save_item(customer_id, product_uuid, new_quantity)

        logger.info(
            "Product added to cart",
            customer_id=str(customer_id),
            product_id=str(product_uuid),
            quantity=new_quantity,
        )
        return await self.get_cart(customer_id)

    async def set_quantity(
        self, customer_id: uuid.UUID, product_id: Any, quantity: int
    ) -> dict[str, Any]:
        """Set a line's quantity; zero or less removes the line."""
        product_uuid = parse_identifier(product_id, "product id")

        if quantity <= 0:
            await self.repository.remove_item(customer_id, product_uuid)
            return await self.get_cart(customer_id)

        existing = await self.repository.get_item(customer_id, product_uuid)
        if not existing:
            raise NotFoundError("Item not in cart", product_id=str(product_uuid))

        await self.repository.save_item(customer_id, product_uuid, quantity)
        return await self.get_cart(customer_id)

    async def remove_item(self, customer_id: uuid.UUID, product_id: Any) -> dict[str, Any]:
        product_uuid = parse_identifier(product_id, "product id")
        removed = await self.repository.remove_item(customer_id, product_uuid)
        if not removed:
            raise NotFoundError("Item not in cart", product_id=str(product_uuid))
        return await self.get_cart(customer_id)

    async def clear_cart(self, customer_id: uuid.UUID) -> dict[str, Any]:
        await self.repository.clear(customer_id)
        return format_cart([])
