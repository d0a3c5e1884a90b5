"""
Catalog and inventory services.

CatalogService serves the public storefront; InventoryService lets a vendor
manage its own products.
"""

import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
    parse_identifier,
)
from kirana.core.logging import get_logger
from kirana.database.models.product import Product
from kirana.services.catalog.repository import ProductRepository

logger = get_logger(__name__)

REQUIRED_PRODUCT_FIELDS = ("name", "category", "price", "unit")
UPDATABLE_PRODUCT_FIELDS = (
    "name",
    "description",
    "price",
    "unit",
    "category",
    "stock",
    "image_url",
    "is_available",
    "tags",
)

# Column limits: Numeric(10, 2) and a 32-bit Integer
MAX_PRICE = Decimal("99999999.99")
MAX_STOCK = 2_147_483_647


def format_product(product: Product) -> dict[str, Any]:
    return {
        "id": str(product.id),
        "vendor_id": str(product.vendor_id),
        "name": product.name,
        "description": product.description,
        "price": float(product.price),
        "unit": product.unit,
        "category": product.category,
        "stock": product.stock,
        "image_url": product.image_url,
        "is_available": product.is_available,
        "tags": list(product.tags or []),
    }


def _clean_product_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Keep known fields and coerce price/stock, raising ValidationError on bad values."""
    fields = {key: value for key, value in data.items() if key in UPDATABLE_PRODUCT_FIELDS}

    if "price" in fields:
        try:
            price = Decimal(str(fields["price"]))
        except (InvalidOperation, ValueError) as e:
            raise ValidationError("Price must be a number", price=str(fields["price"])) from e
        if not price.is_finite():
            raise ValidationError("Price must be a number", price=str(fields["price"]))
        if price < 0:
            raise ValidationError("Price cannot be negative", price=str(price))
        price = price.quantize(Decimal("0.01"))
        if price > MAX_PRICE:
            raise ValidationError(f"Price cannot exceed {MAX_PRICE}", price=str(price))
        fields["price"] = price

    if "stock" in fields:
        try:
            stock = int(fields["stock"])
        except (TypeError, ValueError) as e:
            raise ValidationError("Stock must be an integer", stock=str(fields["stock"])) from e
        if stock < 0:
            raise ValidationError("Stock cannot be negative", stock=stock)
        if stock > MAX_STOCK:
            raise ValidationError(f"Stock cannot exceed {MAX_STOCK}", stock=stock)
        fields["stock"] = stock

    for key in ("name", "category", "unit"):
        if key in fields:
            if not str(fields[key] or "").strip():
                raise ValidationError(f"{key} cannot be empty", field=key)
            fields[key] = str(fields[key]).strip()

    return fields


class CatalogService:
    """Public product browsing."""

    def __init__(self, session: AsyncSession):
        self.repository = ProductRepository(session)

    async def list_products(
        self,
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> dict[str, Any]:
        products, total = await self.repository.list_available(
            category=category, skip=skip, limit=limit
        )
        return {
            "products": [format_product(p) for p in products],
            "total": total,
            "skip": skip,
            "limit": limit,
        }

    async def get_product(self, product_id: Any) -> dict[str, Any]:
        product_uuid = parse_identifier(product_id, "product id")
        product = await self.repository.get_by_id(product_uuid)
        if not product or not product.is_available:
            raise NotFoundError("Product not found", product_id=str(product_uuid))
        return format_product(product)

    async def list_categories(self) -> list[str]:
        return await self.repository.list_categories()


class InventoryService:
    """Vendor inventory management."""

    def __init__(self, session: AsyncSession):
        self.repository = ProductRepository(session)

    async def _get_owned_product(
        self, product_id: uuid.UUID, vendor_id: uuid.UUID
    ) -> Product:
        product = await self.repository.get_by_id(product_id)
        if not product:
            raise NotFoundError("Product not found", product_id=str(product_id))
        if product.vendor_id != vendor_id:
            raise ForbiddenError(
                "Product belongs to another vendor", product_id=str(product_id)
            )
        return product

    async def list_inventory(
        self, vendor_id: uuid.UUID, skip: int = 0, limit: int = 20
    ) -> dict[str, Any]:
        products, total = await self.repository.list_by_vendor(
            vendor_id, skip=skip, limit=limit
        )
        return {
            "products": [format_product(p) for p in products],
            "total": total,
            "skip": skip,
            "limit": limit,
        }

    async def create_product(
        self, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Add a product to the vendor's inventory.

        Raises:
            ValidationError: If a required field is missing or a value is invalid
        """
        missing = [
            field
            for field in REQUIRED_PRODUCT_FIELDS
            if data.get(field) is None or str(data.get(field)).strip() == ""
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        fields = _clean_product_fields(data)
        fields.setdefault("stock", 0)

        product = await self.repository.create(vendor_id, **fields)
        return format_product(product)

    async def update_product(
        self, product_id: Any, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        product_uuid = parse_identifier(product_id, "product id")
        fields = _clean_product_fields(data)

        product = await self._get_owned_product(product_uuid, vendor_id)
        product = await self.repository.update(product, **fields)
        return format_product(product)

    async def delete_product(self, product_id: Any, vendor_id: uuid.UUID) -> dict[str, Any]:
        """Delete a product; cart lines go with it and order lines keep their snapshot."""
        product_uuid = parse_identifier(product_id, "product id")
        await self._get_owned_product(product_uuid, vendor_id)

        await self.repository.delete(product_uuid, vendor_id)
        logger.info(
            "Product deleted", product_id=str(product_uuid), vendor_id=str(vendor_id)
        )
        return {"id": str(product_uuid), "deleted": True}
