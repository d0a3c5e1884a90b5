"""
FastAPI dependencies for authentication and authorization.

Protected handlers receive an explicit RequestContext built from the bearer
token instead of reading ambient state. Vendor- and customer-only routes use
the VendorContext and CustomerContext aliases.
"""

from dataclasses import dataclass
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from kirana.core.logging import get_logger, set_account_id
from kirana.core.roles import AccountRole
from kirana.core.security import TokenError, decode_token
from kirana.database.connection import get_db

logger = get_logger(__name__)

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Authenticated caller of a request."""

    account_id: UUID
    role: AccountRole


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_request_context(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
) -> RequestContext:
    """
    Validate the bearer token and build the request context.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired
    """
    if credentials is None:
        logger.warning("Authentication failed: No credentials provided")
        raise _credentials_exception()

    try:
        payload = decode_token(credentials.credentials)
    except TokenError as e:
        logger.warning("Authentication failed: token rejected", code=e.code)
        if e.code == "TOKEN_EXPIRED":
            raise _credentials_exception("Token has expired")
        raise _credentials_exception()

    try:
        account_id = UUID(str(payload.get("sub")))
        role = AccountRole.from_string(payload.get("role"))
    except ValueError:
        logger.warning("Authentication failed: malformed token claims")
        raise _credentials_exception()

    set_account_id(str(account_id))
    return RequestContext(account_id=account_id, role=role)


def require_role(role: AccountRole):
    """
    Build a dependency that only admits callers with ``role``.

    Returns:
        Dependency function returning the RequestContext
    """

    async def role_checker(
        context: Annotated[RequestContext, Depends(get_request_context)],
    ) -> RequestContext:
        if context.role != role:
            logger.warning(
                "Authorization failed: wrong role",
                account_id=str(context.account_id),
                role=context.role.value,
                required_role=role.value,
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires a {role.value} account",
            )
        return context

    return role_checker


require_vendor = require_role(AccountRole.VENDOR)
require_customer = require_role(AccountRole.CUSTOMER)

VendorContext = Annotated[RequestContext, Depends(require_vendor)]
CustomerContext = Annotated[RequestContext, Depends(require_customer)]
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
