"""Vendor-managed product categories."""

import uuid

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from kirana.database.base import BaseModel


class ProductCategory(BaseModel):
    """
    A vendor's inventory category.

    Products join a category by name (``Product.category``) within the
    same vendor; color, bg_color and icon are display hints for the
    dashboard.
    """

    __tablename__ = "product_categories"

    vendor_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("vendors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    color: Mapped[str] = mapped_column(
        String(50), nullable=False, default="text-blue-500"
    )

    bg_color: Mapped[str] = mapped_column(
        String(50), nullable=False, default="bg-blue-50"
    )

    icon: Mapped[str] = mapped_column(
        String(50), nullable=False, default="ShoppingBasket"
    )

    subcategories: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)

    __table_args__ = (
        UniqueConstraint("vendor_id", "name", name="uq_product_categories_vendor_name"),
    )
