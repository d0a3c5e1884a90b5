"""
Checkout service: turns a cart (or an explicit item list) into orders.

Lines are grouped by vendor so every order belongs to exactly one vendor.
Products are row-locked while stock is checked and decremented, and every
order of one checkout is written in the same transaction.
"""

import uuid
from collections import OrderedDict
from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    parse_identifier,
)
from kirana.core.logging import get_logger, log_performance
from kirana.services.auth.repository import AccountRepository
from kirana.services.cart.repository import CartRepository
from kirana.services.catalog.repository import ProductRepository
from kirana.services.orders.repository import OrderRepository
from kirana.services.orders.service import format_order_detail, generate_order_number

logger = get_logger(__name__)

ADDRESS_FIELDS = ("street", "city", "postal_code")


def _validate_address(address: Optional[dict[str, Any]]) -> dict[str, Any]:
    address = address or {}
    missing = [
        f"delivery_address.{field}"
        for field in ADDRESS_FIELDS
        if not str(address.get(field) or "").strip()
    ]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            missing_fields=missing,
        )
    return {field: str(address[field]).strip() for field in ADDRESS_FIELDS}


def _merge_lines(items: Sequence[dict[str, Any]]) -> "OrderedDict[uuid.UUID, int]":
    """Collapse repeated products and validate quantities."""
    merged: "OrderedDict[uuid.UUID, int]" = OrderedDict()
    for item in items:
        product_id = parse_identifier(item.get("product_id"), "product id")
        try:
            quantity = int(item.get("quantity", 1))
        except (TypeError, ValueError) as e:
            raise ValidationError(
                "Quantity must be an integer", product_id=str(product_id)
            ) from e
        if quantity <= 0:
            raise ValidationError(
                "Quantity must be positive", product_id=str(product_id), quantity=quantity
            )
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


class CheckoutService:
    """Customer checkout and order history."""

    def __init__(self, session: AsyncSession):
        self.order_repository = OrderRepository(session)
        self.product_repository = ProductRepository(session)
        self.cart_repository = CartRepository(session)
        self.account_repository = AccountRepository(session)

    async def place_orders(
        self,
        customer_id: uuid.UUID,
        delivery_address: Optional[dict[str, Any]],
        items: Optional[Sequence[dict[str, Any]]] = None,
    ) -> dict[str, Any]:
        """
        Place one Pending order per vendor.

        Args:
            customer_id: Customer checking out
            delivery_address: Address with street, city and postal_code
            items: Explicit ``{product_id, quantity}`` lines; the cart is used
                (and cleared on success) when omitted

        Returns:
            Created orders and their combined total

        Raises:
            ValidationError: Empty checkout, bad address, unavailable product,
                or insufficient stock
            NotFoundError: If the customer account does not exist
        """
        address = _validate_address(delivery_address)

        from_cart = items is None
        if from_cart:
            cart_items = await self.cart_repository.list_items(customer_id)
            items = [
                {"product_id": item.product_id, "quantity": item.quantity}
                for item in cart_items
            ]
        if not items:
            raise ValidationError("Cannot place an order with no items")

        customer = await self.account_repository.get_customer(customer_id)
        if not customer:
            raise NotFoundError("Customer not found", customer_id=str(customer_id))

        lines = _merge_lines(items)

        with log_performance(logger, "checkout.place_orders", customer_id=str(customer_id)):
            products = await self.product_repository.get_many_for_update(list(lines))

            by_vendor: "OrderedDict[uuid.UUID, list[dict[str, Any]]]" = OrderedDict()
            for product_id, quantity in lines.items():
                product = products.get(product_id)
                if not product or not product.is_available:
                    raise ValidationError(
                        f"Product {product_id} is not available",
                        product_id=str(product_id),
                    )
                if product.stock < quantity:
                    raise ValidationError(
                        f"Insufficient stock for {product.name}",
                        product_id=str(product_id),
                        requested=quantity,
                        available=product.stock,
                    )
                by_vendor.setdefault(product.vendor_id, []).append(
                    {
                        "product_id": product.id,
                        "name": product.name,
                        "quantity": quantity,
                        "price": product.price,
                        "unit": product.unit,
                    }
                )

            orders = []
            for vendor_id, vendor_lines in by_vendor.items():
                for line in vendor_lines:
                    decremented = await self.product_repository.decrement_stock(
                        line["product_id"], line["quantity"]
                    )
                    if not decremented:
                        raise ConflictError(
                            f"Stock for {line['name']} changed, reload and retry",
                            product_id=str(line["product_id"]),
                        )

                order = await self.order_repository.create_order_with_items(
                    order_number=generate_order_number(),
                    customer_id=customer_id,
                    customer_name=customer.name,
                    vendor_id=vendor_id,
                    delivery_address=address,
                    items=vendor_lines,
                )
                orders.append(order)

            if from_cart:
                await self.cart_repository.clear(customer_id)

        logger.info(
            "Checkout completed",
            customer_id=str(customer_id),
            order_count=len(orders),
            from_cart=from_cart,
        )
        return {
            "orders": [format_order_detail(order) for order in orders],
            "total": float(sum(order.total_amount for order in orders)),
        }

    async def list_orders(
        self, customer_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> dict[str, Any]:
        orders, total = await self.order_repository.list_customer_orders(
            customer_id, skip=skip, limit=limit
        )
        return {
            "orders": [format_order_detail(order) for order in orders],
            "total": total,
            "skip": skip,
            "limit": limit,
        }

    async def get_order(self, order_id: Any, customer_id: uuid.UUID) -> dict[str, Any]:
        order_uuid = parse_identifier(order_id, "order id")
        order = await self.order_repository.get_order_by_id(order_uuid)
        if not order:
            raise NotFoundError("Order not found", order_id=str(order_uuid))
        if order.customer_id != customer_id:
            raise ForbiddenError(
                "Order belongs to another customer", order_id=str(order_uuid)
            )
        return format_order_detail(order)
