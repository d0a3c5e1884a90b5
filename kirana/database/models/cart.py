"""Cart line model: one product and quantity in a customer's cart."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kirana.database.base import BaseModel

if TYPE_CHECKING:
    from kirana.database.models.product import Product


class CartItem(BaseModel):
    __tablename__ = "cart_items"

    customer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    product_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    product: Mapped["Product"] = relationship("Product", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("customer_id", "product_id", name="uq_cart_items_customer_product"),
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
    )
