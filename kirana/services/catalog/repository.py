"""
Product data access repository.

Serves both the public catalog (available products only) and vendor
inventory management (all of the vendor's products).
"""

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import RepositoryError
from kirana.core.logging import get_logger
from kirana.database.models.product import Product

logger = get_logger(__name__)


class ProductRepository:
    """Repository for product data access operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        try:
            result = await self.session.execute(
                select(Product).where(Product.id == product_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch product", product_id=str(product_id), error=str(e))
            raise RepositoryError(
                "Failed to fetch product", product_id=str(product_id)
            ) from e

    async def get_many_for_update(
        self, product_ids: Sequence[uuid.UUID]
    ) -> dict[uuid.UUID, Product]:
        """Load and row-lock products by id, keyed by id."""
        if not product_ids:
            return {}
        try:
            result = await self.session.execute(
                select(Product)
                .where(Product.id.in_(product_ids))
                .order_by(Product.id)
                .with_for_update()
            )
            return {product.id: product for product in result.scalars().all()}
        except SQLAlchemyError as e:
            logger.error("Failed to lock products", count=len(product_ids), error=str(e))
            raise RepositoryError("Failed to fetch products") from e

    async def list_available(
        self,
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Product], int]:
        """Available products for the storefront, newest first."""
        conditions = [Product.is_available.is_(True)]
        if category:
            conditions.append(func.lower(Product.category) == category.lower())
        return await self._list(conditions, skip, limit, category=category)

    async def list_by_vendor(
        self,
        vendor_id: uuid.UUID,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[Sequence[Product], int]:
        conditions = [Product.vendor_id == vendor_id]
        return await self._list(conditions, skip, limit, vendor_id=str(vendor_id))

    async def _list(
        self, conditions: list, skip: int, limit: int, **log_context: Any
    ) -> tuple[Sequence[Product], int]:
        try:
            stmt = (
                select(Product)
                .where(and_(*conditions))
                .order_by(Product.created_at.desc())
                .offset(skip)
                .limit(limit)
            )
            count_stmt = select(func.count()).select_from(Product).where(and_(*conditions))

            result = await self.session.execute(stmt)
            count_result = await self.session.execute(count_stmt)

            products = result.scalars().all()
            total = count_result.scalar_one()

            logger.debug("Products fetched", count=len(products), total=total, **log_context)
            return products, total

        except SQLAlchemyError as e:
            logger.error("Failed to fetch products", error=str(e), **log_context)
            raise RepositoryError("Failed to fetch products", **log_context) from e

    async def list_categories(self) -> list[str]:
        try:
            result = await self.session.execute(
                select(Product.category)
                .where(Product.is_available.is_(True))
                .distinct()
                .order_by(Product.category)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Failed to fetch categories", error=str(e))
            raise RepositoryError("Failed to fetch categories") from e

    async def list_by_vendor_category(
        self, vendor_id: uuid.UUID, category: str
    ) -> Sequence[Product]:
        try:
            result = await self.session.execute(
                select(Product)
                .where(Product.vendor_id == vendor_id, Product.category == category)
                .order_by(Product.name)
            )
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch category products",
                vendor_id=str(vendor_id),
                category=category,
                error=str(e),
            )
            raise RepositoryError(
                "Failed to fetch products", vendor_id=str(vendor_id)
            ) from e

    async def count_by_category(self, vendor_id: uuid.UUID) -> dict[str, int]:
        """Number of the vendor's products per category name."""
        try:
            result = await self.session.execute(
                select(Product.category, func.count(Product.id))
                .where(Product.vendor_id == vendor_id)
                .group_by(Product.category)
            )
            return {category: count for category, count in result.all()}
        except SQLAlchemyError as e:
            logger.error(
                "Failed to count products by category",
                vendor_id=str(vendor_id),
                error=str(e),
            )
            raise RepositoryError(
                "Failed to fetch categories", vendor_id=str(vendor_id)
            ) from e

    async def rename_category(
        self, vendor_id: uuid.UUID, old_name: str, new_name: str
    ) -> int:
        """Move the vendor's products from one category name to another."""
        try:
            result = await self.session.execute(
                update(Product)
                .where(Product.vendor_id == vendor_id, Product.category == old_name)
                .values(category=new_name, updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            logger.info(
                "Products recategorised",
                vendor_id=str(vendor_id),
                old_name=old_name,
                new_name=new_name,
                count=result.rowcount,
            )
            return result.rowcount
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to rename product category", vendor_id=str(vendor_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to update products", vendor_id=str(vendor_id)
            ) from e

    async def create(self, vendor_id: uuid.UUID, **fields: Any) -> Product:
        try:
            product = Product(vendor_id=vendor_id, **fields)
            self.session.add(product)
            await self.session.flush()

            logger.info(
                "Product created",
                product_id=str(product.id),
                vendor_id=str(vendor_id),
            )
            return product

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Product creation failed", vendor_id=str(vendor_id), error=str(e))
            raise RepositoryError(
                "Failed to create product", vendor_id=str(vendor_id)
            ) from e

    async def update(self, product: Product, **fields: Any) -> Product:
        try:
            for key, value in fields.items():
                setattr(product, key, value)
            await self.session.flush()
            await self.session.refresh(product)

            logger.info("Product updated", product_id=str(product.id), fields=sorted(fields))
            return product

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to update product", product_id=str(product.id), error=str(e))
            raise RepositoryError(
                "Failed to update product", product_id=str(product.id)
            ) from e

    async def decrement_stock(self, product_id: uuid.UUID, quantity: int) -> bool:
        """Take ``quantity`` units out of stock if enough remain."""
        try:
            result = await self.session.execute(
                update(Product)
                .where(Product.id == product_id, Product.stock >= quantity)
                .values(stock=Product.stock - quantity, updated_at=func.now())
                .returning(Product.id)
                .execution_options(synchronize_session=False)
            )
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to decrement stock", product_id=str(product_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to update stock", product_id=str(product_id)
            ) from e

    async def delete(self, product_id: uuid.UUID, vendor_id: uuid.UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(Product)
                .where(Product.id == product_id, Product.vendor_id == vendor_id)
                .returning(Product.id)
                .execution_options(synchronize_session=False)
            )
            deleted = result.scalar_one_or_none() is not None
            logger.info(
                "Product delete executed", product_id=str(product_id), deleted=deleted
            )
            return deleted
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Failed to delete product", product_id=str(product_id), error=str(e))
            raise RepositoryError(
                "Failed to delete product", product_id=str(product_id)
            ) from e
