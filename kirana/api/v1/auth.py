"""
Authentication endpoints for vendors and customers.

Both endpoints are rate limited per client address.
"""

from fastapi import APIRouter, Request, status

from kirana.api.deps import DatabaseSession
from kirana.api.errors import to_http_exception
from kirana.api.rate_limit import limiter
from kirana.core.config import get_settings
from kirana.core.errors import KiranaError
from kirana.core.logging import get_logger
from kirana.schemas.auth import (
    AccountResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
)
from kirana.services.auth.service import AuthService

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/signup",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a vendor or customer account",
)
@limiter.limit(settings.auth_rate_limit)
async def signup(
    request: Request,
    payload: SignupRequest,
    db: DatabaseSession,
) -> AccountResponse:
    """
    Register a new account.

    Raises:
        HTTPException: 400 for invalid input, 409 if the email is taken
    """
    logger.info("Signup attempt", role=payload.role.value)

    try:
        service = AuthService(db)
        account = await service.signup(
            role=payload.role,
            name=payload.name,
            email=payload.email,
            password=payload.password,
            phone=payload.phone,
        )
        return AccountResponse(**account)
    except KiranaError as e:
        raise to_http_exception(e)


@router.post(
    "/signin",
    response_model=TokenResponse,
    summary="Sign in and receive an access token",
)
@limiter.limit(settings.auth_rate_limit)
async def signin(
    request: Request,
    payload: SigninRequest,
    db: DatabaseSession,
) -> TokenResponse:
    """
    Authenticate with email and password.

    Raises:
        HTTPException: 401 for invalid credentials
    """
    try:
        service = AuthService(db)
        result = await service.signin(
            email=payload.email,
            password=payload.password,
            role=payload.role,
        )
        return TokenResponse(**result)
    except KiranaError as e:
        raise to_http_exception(e)
