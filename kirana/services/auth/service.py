"""
Authentication service for vendor and customer accounts.

Sign-up hashes the password with bcrypt and stores the account in the
table matching its role; sign-in verifies the password and issues a JWT
access token carrying the account id and role.
"""

from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.config import get_settings
from kirana.core.errors import (
    AuthenticationError,
    DuplicateKeyError,
    ValidationError,
)
from kirana.core.logging import get_logger
from kirana.core.roles import AccountRole
from kirana.core.security import create_access_token, hash_password, verify_password
from kirana.database.models.vendor import Vendor
from kirana.services.auth.repository import Account, AccountRepository

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 8


def _parse_role(value: Any) -> AccountRole:
    if isinstance(value, AccountRole):
        return value
    try:
        return AccountRole.from_string(value)
    except ValueError as e:
        raise ValidationError(str(e), role=str(value)) from e


def format_account(account: Account, role: AccountRole) -> dict[str, Any]:
    name = account.business_name if isinstance(account, Vendor) else account.name
    return {
        "id": str(account.id),
        "role": role.value,
        "name": name,
        "email": account.email,
    }


class AuthService:
    """Account registration and sign-in."""

    def __init__(self, session: AsyncSession):
        self.repository = AccountRepository(session)
        self.logger = logger.bind(service="auth")

    async def signup(
        self,
        role: Any,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
    ) -> dict[str, Any]:
        """
        Register a vendor or customer account.

        Raises:
            ValidationError: If a field is missing or the password is too short
            DuplicateKeyError: If the email is already registered for the role
        """
        account_role = _parse_role(role)

        missing = [
            field
            for field, value in (("name", name), ("email", email), ("password", password))
            if not (value or "").strip()
        ]
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )

        email = email.strip().lower()
        self.logger.info("Account registration started", role=account_role.value)

        existing = await self.repository.get_by_email(account_role, email)
        if existing:
            raise DuplicateKeyError(
                f"Account with email {email} already exists", role=account_role.value
            )

        fields: dict[str, Any] = {
            "email": email,
            "password_hash": hash_password(password),
            "phone": phone,
            "is_active": True,
        }
        if account_role == AccountRole.VENDOR:
            fields["business_name"] = name.strip()
        else:
            fields["name"] = name.strip()

        account = await self.repository.create(account_role, **fields)

        self.logger.info(
            "Account registered",
            role=account_role.value,
            account_id=str(account.id),
        )
        return format_account(account, account_role)

    async def signin(self, email: str, password: str, role: Any) -> dict[str, Any]:
        """
        Verify credentials and issue an access token.

        Raises:
            AuthenticationError: If the email, password, or account state is wrong
        """
        settings = get_settings()
        account_role = _parse_role(role)

        account = await self.repository.get_by_email(account_role, email or "")
        if (
            not account
            or not account.is_active
            or not verify_password(password, account.password_hash)
        ):
            self.logger.warning("Sign-in failed", role=account_role.value)
            raise AuthenticationError("Invalid credentials", role=account_role.value)

        token = create_access_token(
            {"sub": str(account.id), "role": account_role.value}
        )

        self.logger.info(
            "Sign-in successful",
            role=account_role.value,
            account_id=str(account.id),
        )
        return {
            "access_token": token,
            "token_type": "bearer",
            "expires_in": settings.jwt_access_token_expire_minutes * 60,
            "account": format_account(account, account_role),
        }
