"""
Order model for customer purchases and their line items.

An order belongs to exactly one vendor; a checkout spanning several vendors
produces one order per vendor. Line items capture the product name, unit and
price at order time so later catalog edits never rewrite history. Orders are
never deleted.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kirana.database.base import BaseModel
from kirana.services.orders.enums import OrderStatus

if TYPE_CHECKING:
    from kirana.database.models.delivery import Delivery


def enum_values(enum_cls) -> list[str]:
    """Persist enum display values (e.g. "Out for Delivery") instead of names."""
    return [member.value for member in enum_cls]


class Order(BaseModel):
    """
    Customer order placed with a single vendor.

    Attributes:
        order_number: Human-readable identifier (ORD-YYYYMMDD-XXXXXX)
        customer_id: Customer who placed the order
        customer_name: Customer name captured at checkout
        vendor_id: Vendor fulfilling the order
        total_amount: Sum of line price x quantity
        status: Current order status
        order_date: When the order was placed
        delivery_address: Address snapshot {street, city, postal_code}
    """

    __tablename__ = "orders"

    order_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        index=True,
        comment="Human-readable order number",
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)

    vendor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    total_amount: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
    )

    status: Mapped[OrderStatus] = mapped_column(
        SQLEnum(
            OrderStatus,
            name="order_status",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
        default=OrderStatus.PENDING,
        index=True,
    )

    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    delivery_address: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        comment="Delivery address snapshot",
    )

    items: Mapped[list["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    delivery: Mapped[Optional["Delivery"]] = relationship(
        "Delivery",
        back_populates="order",
        uselist=False,
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
        Index("ix_orders_vendor_created", "vendor_id", "created_at"),
        Index("ix_orders_customer_created", "customer_id", "created_at"),
    )

    @property
    def item_count(self) -> int:
        return len(self.items)


class OrderItem(BaseModel):
    """Order line with the product details captured at checkout."""

    __tablename__ = "order_items"

    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    product_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="SET NULL"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
        comment="Unit price at order time",
    )

    unit: Mapped[str] = mapped_column(String(50), nullable=False)

    order: Mapped[Order] = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity
