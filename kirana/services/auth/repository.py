"""
Account data access for vendors and customers.

Vendors and customers live in separate tables; the role decides which one
a lookup goes to.
"""

import uuid
from typing import Any, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.errors import DuplicateKeyError, RepositoryError
from kirana.core.logging import get_logger
from kirana.core.roles import AccountRole
from kirana.database.models.customer import Customer
from kirana.database.models.vendor import Vendor

logger = get_logger(__name__)

Account = Union[Vendor, Customer]

_MODELS = {
    AccountRole.VENDOR: Vendor,
    AccountRole.CUSTOMER: Customer,
}


class AccountRepository:
    """Repository for vendor and customer accounts."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, role: AccountRole, email: str) -> Optional[Account]:
        model = _MODELS[role]
        try:
            result = await self.session.execute(
                select(model).where(func.lower(model.email) == email.strip().lower())
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Failed to fetch account", role=role.value, error=str(e))
            raise RepositoryError("Failed to fetch account", role=role.value) from e

    async def get_by_id(self, role: AccountRole, account_id: uuid.UUID) -> Optional[Account]:
        model = _MODELS[role]
        try:
            result = await self.session.execute(
                select(model).where(model.id == account_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(
                "Failed to fetch account",
                role=role.value,
                account_id=str(account_id),
                error=str(e),
            )
            raise RepositoryError(
                "Failed to fetch account", account_id=str(account_id)
            ) from e

    async def get_vendor(self, vendor_id: uuid.UUID) -> Optional[Vendor]:
        return await self.get_by_id(AccountRole.VENDOR, vendor_id)

    async def get_customer(self, customer_id: uuid.UUID) -> Optional[Customer]:
        return await self.get_by_id(AccountRole.CUSTOMER, customer_id)

    async def create(self, role: AccountRole, **fields: Any) -> Account:
        """
        Insert a vendor or customer account.

        Raises:
            DuplicateKeyError: If the email is already registered for the role
            RepositoryError: If the insert fails
        """
        model = _MODELS[role]
        try:
            account = model(**fields)
            self.session.add(account)
            await self.session.flush()

            logger.info("Account created", role=role.value, account_id=str(account.id))
            return account

        except IntegrityError as e:
            await self.session.rollback()
            email = fields.get("email")
            logger.warning("Account creation failed - duplicate email", role=role.value)
            raise DuplicateKeyError(
                f"Account with email {email} already exists",
                role=role.value,
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Account creation failed", role=role.value, error=str(e))
            raise RepositoryError("Failed to create account", role=role.value) from e

    async def update_account(self, account: Account, **fields: Any) -> Account:
        """
        Apply profile changes to a loaded vendor or customer.

        Raises:
            DuplicateKeyError: If a unique column collides with another account
            RepositoryError: If the update fails
        """
        try:
            for key, value in fields.items():
                setattr(account, key, value)
            await self.session.flush()
            await self.session.refresh(account)

            logger.info(
                "Account updated",
                account_id=str(account.id),
                table=account.__tablename__,
                fields=sorted(fields),
            )
            return account

        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateKeyError(
                "Account update conflicts with an existing account",
                account_id=str(account.id),
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to update account", account_id=str(account.id), error=str(e)
            )
            raise RepositoryError(
                "Failed to update account", account_id=str(account.id)
            ) from e

    async def save_vendor_settings(
        self, vendor: Vendor, fields: dict[str, Any], store_settings: dict[str, Any]
    ) -> Vendor:
        """Write vendor profile columns and the store_settings document."""
        try:
            for key, value in fields.items():
                setattr(vendor, key, value)
            vendor.store_settings = store_settings
            await self.session.flush()
            await self.session.refresh(vendor)

            logger.info(
                "Vendor settings saved",
                vendor_id=str(vendor.id),
                fields=sorted(fields),
            )
            return vendor

        except IntegrityError as e:
            await self.session.rollback()
            raise DuplicateKeyError(
                f"Account with email {fields.get('email')} already exists",
                vendor_id=str(vendor.id),
            ) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                "Failed to save vendor settings", vendor_id=str(vendor.id), error=str(e)
            )
            raise RepositoryError(
                "Failed to save vendor settings", vendor_id=str(vendor.id)
            ) from e
