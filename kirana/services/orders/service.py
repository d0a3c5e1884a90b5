"""
Order service for the vendor side of the order lifecycle.

Implements status updates as an explicit sequence: identifier parsing,
lookup, ownership check, transition, guarded write. Entering Preparing
opens the order's delivery in the same transaction.
"""

import secrets
import uuid
from datetime import datetime, timezone
from typing import Any, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    parse_identifier,
)
from kirana.core.logging import get_logger
from kirana.database.models.order import Order
from kirana.services.deliveries.repository import DeliveryRepository
from kirana.services.orders.enums import OrderStatus
from kirana.services.orders.repository import OrderRepository
from kirana.services.orders.state_machine import transition_order_status

logger = get_logger(__name__)


def generate_order_number(now: Optional[datetime] = None) -> str:
    """Build an order number of the form ORD-YYYYMMDD-XXXXXX."""
    now = now or datetime.now(timezone.utc)
    return f"ORD-{now.strftime('%Y%m%d')}-{secrets.token_hex(3).upper()}"


def parse_order_status(value: Union[OrderStatus, str]) -> OrderStatus:
    """Parse a requested order status, raising ValidationError for unknown values."""
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus.from_string(value)
    except ValueError as e:
        raise ValidationError(str(e), status=str(value)) from e


def format_vendor_order(order: Order) -> dict[str, Any]:
    """Row shape of the vendor order table."""
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer": order.customer_name,
        "date": order.order_date.isoformat() if order.order_date else None,
        "items": order.item_count,
        "total": float(order.total_amount),
        "status": order.status.value,
    }


def format_order_detail(order: Order) -> dict[str, Any]:
    """Full order representation including line items."""
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "customer_name": order.customer_name,
        "vendor_id": str(order.vendor_id),
        "status": order.status.value,
        "order_date": order.order_date.isoformat() if order.order_date else None,
        "delivery_address": order.delivery_address,
        "total_amount": float(order.total_amount),
        "items": [
            {
                "product_id": str(item.product_id) if item.product_id else None,
                "name": item.name,
                "quantity": item.quantity,
                "price": float(item.price),
                "unit": item.unit,
                "line_total": float(item.line_total),
            }
            for item in order.items
        ],
    }


class OrderService:
    """
    Vendor-facing order operations.

    Attributes:
        repository: Order repository for data access
        delivery_repository: Used to open the delivery when preparation starts
    """

    def __init__(self, session: AsyncSession):
        self.repository = OrderRepository(session)
        self.delivery_repository = DeliveryRepository(session)

    async def update_order_status(
        self,
        order_id: Any,
        new_status: Union[OrderStatus, str],
        vendor_id: uuid.UUID,
    ) -> dict[str, Any]:
        """
        Move a vendor's order to a new status.

        Args:
            order_id: Order identifier as supplied by the client
            new_status: Requested status
            vendor_id: Vendor performing the update

        Returns:
            Updated vendor order row

        Raises:
            InvalidIdentifierError: If order_id is malformed
            ValidationError: If new_status is unknown
            NotFoundError: If the order does not exist
            ForbiddenError: If the order belongs to another vendor
            InvalidTransitionError: If the transition is not allowed
            ConflictError: If the order changed between read and write
        """
        order_uuid = parse_identifier(order_id, "order id")
        target = parse_order_status(new_status)

        order = await self.repository.get_order_by_id(order_uuid)
        if not order:
            raise NotFoundError("Order not found", order_id=str(order_uuid))

        if order.vendor_id != vendor_id:
            logger.warning(
                "Order status update by non-owner",
                order_id=str(order_uuid),
                vendor_id=str(vendor_id),
            )
            raise ForbiddenError(
                "Order belongs to another vendor", order_id=str(order_uuid)
            )

        current = order.status
        target = transition_order_status(current, target)

        updated = await self.repository.update_order_status(
            order_id=order_uuid,
            vendor_id=vendor_id,
            expected_status=current,
            new_status=target,
        )
        if not updated:
            raise ConflictError(
                "Order was modified concurrently, reload and retry",
                order_id=str(order_uuid),
                expected_status=current.value,
            )

        if target == OrderStatus.PREPARING and order.delivery is None:
            await self.delivery_repository.create_for_order(order)

        order = await self.repository.get_order_by_id(order_uuid)

        logger.info(
            "Order status updated",
            order_id=str(order_uuid),
            vendor_id=str(vendor_id),
            from_status=current.value,
            to_status=target.value,
        )
        return format_vendor_order(order)

    async def list_vendor_orders(
        self,
        vendor_id: uuid.UUID,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> dict[str, Any]:
        """List a vendor's orders, optionally filtered by status."""
        status_filter = parse_order_status(status) if status else None

        orders, total = await self.repository.list_vendor_orders(
            vendor_id=vendor_id,
            status=status_filter,
            skip=skip,
            limit=limit,
        )
        return {
            "orders": [format_vendor_order(order) for order in orders],
            "total": total,
            "skip": skip,
            "limit": limit,
        }

    async def get_vendor_order(self, order_id: Any, vendor_id: uuid.UUID) -> dict[str, Any]:
        """Fetch one of the vendor's orders with its line items."""
        order_uuid = parse_identifier(order_id, "order id")
        order = await self.repository.get_order_by_id(order_uuid)
        if not order:
            raise NotFoundError("Order not found", order_id=str(order_uuid))
        if order.vendor_id != vendor_id:
            raise ForbiddenError(
                "Order belongs to another vendor", order_id=str(order_uuid)
            )
        return format_order_detail(order)
