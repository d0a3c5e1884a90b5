"""
Delivery model: the fulfillment record paired 1:1 with an order.

A delivery is created when its order enters Preparing. Its status and
delivery agent only change through the delivery state machine, which keeps
the agent reference consistent with the status; the table-level check
constraint backs that up.
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
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kirana.database.base import BaseModel
from kirana.database.models.order import enum_values
from kirana.services.deliveries.enums import DeliveryStatus

if TYPE_CHECKING:
    from kirana.database.models.delivery_agent import DeliveryAgent
    from kirana.database.models.order import Order


class Delivery(BaseModel):
    """
    Delivery of one order by one of the vendor's agents.

    Attributes:
        order_id: Order being delivered (unique)
        customer_id: Recipient
        vendor_id: Vendor that owns the delivery
        customer_address: Address snapshot copied from the order
        order_value: Order total at the time the delivery was created
        status: Current delivery status
        delivery_agent_id: Assigned agent; NULL while unassigned
        actual_pickup_time: Stamped when the delivery first goes out
        actual_delivery_time: Stamped when the delivery is delivered
    """

    __tablename__ = "deliveries"

    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    vendor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("vendors.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    customer_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    customer_address: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)

    order_value: Mapped[Decimal] = mapped_column(
        Numeric(precision=10, scale=2),
        nullable=False,
    )

    status: Mapped[DeliveryStatus] = mapped_column(
        SQLEnum(
            DeliveryStatus,
            name="delivery_status",
            values_callable=enum_values,
            create_constraint=True,
        ),
        nullable=False,
        default=DeliveryStatus.PENDING_ASSIGNMENT,
        index=True,
    )

    delivery_agent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("delivery_agents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    scheduled_pickup_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    actual_pickup_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    scheduled_delivery_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    estimated_delivery_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    actual_delivery_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    delivery_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    order: Mapped["Order"] = relationship("Order", back_populates="delivery")

    agent: Mapped[Optional["DeliveryAgent"]] = relationship(
        "DeliveryAgent",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "delivery_agent_id IS NOT NULL "
            "OR status NOT IN ('Assigned', 'Out for Delivery')",
            name="ck_deliveries_agent_required",
        ),
        Index("ix_deliveries_vendor_created", "vendor_id", "created_at"),
    )
