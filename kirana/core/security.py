"""
Security utilities for password hashing and JWT token management.

Passwords are hashed with bcrypt through passlib; access tokens are signed
JWTs carrying the account id (``sub``) and its role (``vendor``/``customer``).
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from kirana.core.config import get_settings
from kirana.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=12,
)

TOKEN_TYPE_ACCESS = "access"


class SecurityError(Exception):
    """Base exception for security-related errors."""

    def __init__(self, message: str, code: str, **context):
        super().__init__(message)
        self.code = code
        self.context = context


class TokenError(SecurityError):
    """Exception raised for token-related errors."""
    pass


class PasswordError(SecurityError):
    """Exception raised for password-related errors."""
    pass


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    Raises:
        PasswordError: If the password is empty
    """
    if not password:
        logger.error("Attempted to hash empty password")
        raise PasswordError("Password cannot be empty", code="EMPTY_PASSWORD")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a bcrypt hash.

    Empty inputs and malformed hashes verify as False rather than raising.
    """
    if not plain_password or not hashed_password:
        logger.warning(
            "Password verification attempted with empty values",
            has_plain=bool(plain_password),
            has_hashed=bool(hashed_password),
        )
        return False

    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError as e:
        logger.warning("Password hash could not be parsed", error=str(e))
        return False


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode; must include ``sub`` and ``role``
        expires_delta: Optional custom lifetime

    Returns:
        Encoded JWT string

    Raises:
        TokenError: If required claims are missing
    """
    if not data.get("sub") or not data.get("role"):
        raise TokenError(
            "Token subject and role are required",
            code="TOKEN_CLAIMS_MISSING",
            claims=list(data.keys()),
        )

    now = datetime.now(timezone.utc)
    expire = now + (
        expires_delta
        or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    )

    to_encode = data.copy()
    to_encode.update({"exp": expire, "iat": now, "type": TOKEN_TYPE_ACCESS})

    token = jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)

    logger.info(
        "Access token created",
        subject=data.get("sub"),
        role=data.get("role"),
        expires_at=expire.isoformat(),
    )
    return token


def decode_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Raises:
        TokenError: If token is empty, expired, malformed, or not an access token
    """
    if not token:
        logger.warning("Attempted to decode empty token")
        raise TokenError("Token cannot be empty", code="EMPTY_TOKEN")

    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except ExpiredSignatureError as e:
        logger.warning("Token has expired")
        raise TokenError("Token has expired", code="TOKEN_EXPIRED") from e
    except JWTError as e:
        logger.warning("Invalid token", error=str(e), error_type=type(e).__name__)
        raise TokenError("Invalid token", code="TOKEN_INVALID") from e

    if payload.get("type") != TOKEN_TYPE_ACCESS:
        raise TokenError("Invalid token type", code="TOKEN_INVALID")

    return payload


def get_security_headers() -> Dict[str, str]:
    """
    Security headers added to every response.

    HSTS is only sent in production, where the API is served over TLS.
    """
    headers = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    }
    if settings.is_production:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return headers
