"""
Vendor product category management.

Categories are vendor-owned records. Products join one by carrying its
name in ``Product.category``, so a rename is applied to the vendor's
products in the same transaction, and deleting a category leaves the
products' labels alone.
"""

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import (
    ForbiddenError,
    NotFoundError,
    ValidationError,
    parse_identifier,
)
from kirana.core.logging import get_logger
from kirana.database.models.category import ProductCategory
from kirana.services.catalog.repository import ProductRepository
from kirana.services.catalog.service import InventoryService, format_product
from kirana.services.categories.repository import CategoryRepository

logger = get_logger(__name__)

CATEGORY_DEFAULTS: dict[str, Any] = {
    "color": "text-blue-500",
    "bg_color": "bg-blue-50",
    "icon": "ShoppingBasket",
}
STYLE_FIELDS = ("color", "bg_color", "icon")
MAX_NAME_LENGTH = 100


def format_category(category: ProductCategory, product_count: int = 0) -> dict[str, Any]:
    return {
        "id": str(category.id),
        "vendor_id": str(category.vendor_id),
        "name": category.name,
        "color": category.color,
        "bg_color": category.bg_color,
        "icon": category.icon,
        "subcategories": list(category.subcategories or []),
        "product_count": product_count,
    }


def _clean_name(value: Any) -> str:
    name = str(value or "").strip()
    if not name:
        raise ValidationError("Category name is required", field="name")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Category name cannot exceed {MAX_NAME_LENGTH} characters", field="name"
        )
    return name


def _clean_subcategories(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError("Subcategories must be a list", field="subcategories")
    cleaned = [str(item).strip() for item in value]
    if any(not item for item in cleaned):
        raise ValidationError("Subcategory names cannot be empty", field="subcategories")
    return list(dict.fromkeys(cleaned))


class CategoryService:
    """Category CRUD and per-category product access for a vendor."""

    def __init__(self, session: AsyncSession):
        self.repository = CategoryRepository(session)
        self.product_repository = ProductRepository(session)
        self.inventory_service = InventoryService(session)

    async def _get_owned_category(
        self, category_id: uuid.UUID, vendor_id: uuid.UUID
    ) -> ProductCategory:
        category = await self.repository.get_by_id(category_id)
        if not category:
            raise NotFoundError("Category not found", category_id=str(category_id))
        if category.vendor_id != vendor_id:
            raise ForbiddenError(
                "Category belongs to another vendor", category_id=str(category_id)
            )
        return category

    async def list_categories(self, vendor_id: uuid.UUID) -> list[dict[str, Any]]:
        categories = await self.repository.list_by_vendor(vendor_id)
        counts = await self.product_repository.count_by_category(vendor_id)
        return [format_category(c, counts.get(c.name, 0)) for c in categories]

    async def create_category(
        self, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Create a category with display defaults filled in.

        Raises:
            ValidationError: If the name is blank
            DuplicateKeyError: If the vendor already has a category with this name
        """
        fields: dict[str, Any] = {"name": _clean_name(data.get("name"))}
        for key in STYLE_FIELDS:
            fields[key] = str(data.get(key) or "").strip() or CATEGORY_DEFAULTS[key]
        fields["subcategories"] = _clean_subcategories(data.get("subcategories") or [])

        category = await self.repository.create(vendor_id, **fields)
        return format_category(category)

    async def update_category(
        self, category_id: Any, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """
        Update the provided fields. A rename carries the vendor's products along.

        Raises:
            DuplicateKeyError: If the new name is taken by another category
        """
        category_uuid = parse_identifier(category_id, "category id")

        changes: dict[str, Any] = {}
        if data.get("name") is not None:
            changes["name"] = _clean_name(data["name"])
        for key in STYLE_FIELDS:
            if data.get(key) is not None:
                changes[key] = str(data[key]).strip() or CATEGORY_DEFAULTS[key]
        if data.get("subcategories") is not None:
            changes["subcategories"] = _clean_subcategories(data["subcategories"])

        category = await self._get_owned_category(category_uuid, vendor_id)
        old_name = category.name
        category = await self.repository.update(category, **changes)

        if changes.get("name", old_name) != old_name:
            await self.product_repository.rename_category(vendor_id, old_name, category.name)

        counts = await self.product_repository.count_by_category(vendor_id)
        return format_category(category, counts.get(category.name, 0))

    async def delete_category(
        self, category_id: Any, vendor_id: uuid.UUID
    ) -> dict[str, Any]:
        category_uuid = parse_identifier(category_id, "category id")
        await self._get_owned_category(category_uuid, vendor_id)

        await self.repository.delete(category_uuid, vendor_id)
        logger.info(
            "Category deleted", category_id=str(category_uuid), vendor_id=str(vendor_id)
        )
        return {"id": str(category_uuid), "deleted": True}

    async def list_category_products(
        self, category_id: Any, vendor_id: uuid.UUID
    ) -> list[dict[str, Any]]:
        category_uuid = parse_identifier(category_id, "category id")
        category = await self._get_owned_category(category_uuid, vendor_id)

        products = await self.product_repository.list_by_vendor_category(
            vendor_id, category.name
        )
        return [format_product(p) for p in products]

    async def add_product(
        self, category_id: Any, vendor_id: uuid.UUID, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Create an inventory product filed under this category."""
        category_uuid = parse_identifier(category_id, "category id")
        category = await self._get_owned_category(category_uuid, vendor_id)

        return await self.inventory_service.create_product(
            vendor_id, {**data, "category": category.name}
        )
