"""Product category data access repository."""

import uuid
from typing import Any, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import DuplicateKeyError, RepositoryError
from kirana.core.logging import get_logger
from kirana.database.models.category import ProductCategory

logger = get_logger(__name__)


class CategoryRepository:
    """Repository for vendor product categories."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, category_id: uuid.UUID) -> Optional[ProductCategory]:
        try:
            result = await self.session.execute(
                select(ProductCategory).where(ProductCategory.id == category_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch category", category_id=str(category_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to fetch category", category_id=str(category_id)
            ) from e

    async def list_by_vendor(self, vendor_id: uuid.UUID) -> Sequence[ProductCategory]:
        try:
            result = await self.session.execute(
                select(ProductCategory)
                .where(ProductCategory.vendor_id == vendor_id)
                .order_by(ProductCategory.name)
            )
            return result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch categories", vendor_id=str(vendor_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to fetch categories", vendor_id=str(vendor_id)
            ) from e

    async def create(self, vendor_id: uuid.UUID, **fields: Any) -> ProductCategory:
        """
        Insert a category.

        Raises:
            DuplicateKeyError: If the vendor already has a category with this name
            RepositoryError: If the insert fails
        """
        try:
            category = ProductCategory(vendor_id=vendor_id, **fields)
            self.session.add(category)
            await self.session.flush()

            logger.info(
                "Category created",
                category_id=str(category.id),
                vendor_id=str(vendor_id),
            )
            return category

        except IntegrityError as e:
            await self.session.rollback()
            name = fields.get("name")
            logger.warning(
                "Category creation failed - duplicate name",
                vendor_id=str(vendor_id),
                name=name,
            )
            raise DuplicateKeyError(
                f"Category {name} already exists", vendor_id=str(vendor_id), name=name
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Category creation failed", vendor_id=str(vendor_id), error=str(e))
            raise RepositoryError(
                "Failed to create category", vendor_id=str(vendor_id)
            ) from e

    async def update(self, category: ProductCategory, **fields: Any) -> ProductCategory:
        try:
            for key, value in fields.items():
                setattr(category, key, value)
            await self.session.flush()
            await self.session.refresh(category)

            logger.info(
                "Category updated", category_id=str(category.id), fields=sorted(fields)
            )
            return category

        except IntegrityError as e:
            await self.session.rollback()
            name = fields.get("name")
            raise DuplicateKeyError(
                f"Category {name} already exists", category_id=str(category.id), name=name
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to update category", category_id=str(category.id), error=str(e)
            )
            raise RepositoryError(
                "Failed to update category", category_id=str(category.id)
            ) from e

    async def delete(self, category_id: uuid.UUID, vendor_id: uuid.UUID) -> bool:
        try:
            result = await self.session.execute(
                delete(ProductCategory)
                .where(
                    ProductCategory.id == category_id,
                    ProductCategory.vendor_id == vendor_id,
                )
                .returning(ProductCategory.id)
                .execution_options(synchronize_session=False)
            )
            deleted = result.scalar_one_or_none() is not None
            logger.info(
                "Category delete executed", category_id=str(category_id), deleted=deleted
            )
            return deleted
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to delete category", category_id=str(category_id), error=str(e)
            )
            raise RepositoryError(
                "Failed to delete category", category_id=str(category_id)
            ) from e
