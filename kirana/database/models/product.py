"""Product model for vendor catalogs."""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from kirana.database.base import BaseModel


class Product(BaseModel):
    """
    Grocery product listed by a vendor.

    Attributes:
        vendor_id: Owning vendor
        price: Current unit price; orders capture it at checkout time
        unit: Selling unit (kg, litre, pack, ...)
        stock: Units on hand, decremented at checkout
        is_available: Hidden from the storefront when False
    """

    __tablename__ = "products"

    vendor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("vendors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal] = mapped_column(Numeric(precision=10, scale=2), nullable=False)

    unit: Mapped[str] = mapped_column(String(50), nullable=False)

    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    tags: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        Index("ix_products_vendor_stock", "vendor_id", "stock"),
    )
