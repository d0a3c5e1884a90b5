"""
Domain error taxonomy shared by repositories, services, and routers.

Every error carries a human-readable message plus structured ``context``
that is logged but never returned to the client verbatim.
"""

from typing import Any
from uuid import UUID


class KiranaError(Exception):
    """Base exception for marketplace domain errors."""

    code = "KIRANA_ERROR"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context


class InvalidIdentifierError(KiranaError):
    """Raised when an identifier is not a well-formed UUID."""

    code = "INVALID_IDENTIFIER"


class ValidationError(KiranaError):
    """Raised when a create/update payload fails business validation."""

    code = "VALIDATION_ERROR"


class InvalidTransitionError(KiranaError):
    """Raised when a status change is not permitted from the current status."""

    code = "INVALID_TRANSITION"

    def __init__(
        self,
        message: str,
        current_status: Any,
        target_status: Any,
        **context: Any,
    ):
        super().__init__(
            message,
            current_status=getattr(current_status, "value", current_status),
            target_status=getattr(target_status, "value", target_status),
            **context,
        )
        self.current_status = current_status
        self.target_status = target_status


class AuthenticationError(KiranaError):
    """Raised when credentials do not match an active account."""

    code = "INVALID_CREDENTIALS"


class ForbiddenError(KiranaError):
    """Raised when a resource exists but belongs to another account."""

    code = "FORBIDDEN"


class NotFoundError(KiranaError):
    """Raised when a resource does not exist."""

    code = "NOT_FOUND"


class DuplicateKeyError(KiranaError):
    """Raised when a unique constraint would be violated."""

    code = "DUPLICATE_KEY"


class ConflictError(KiranaError):
    """Raised when a guarded update lost a race or a resource is still in use."""

    code = "CONFLICT"


class RepositoryError(KiranaError):
    """Raised when the database layer fails unexpectedly."""

    code = "DATABASE_ERROR"


def parse_identifier(value: Any, field: str = "id") -> UUID:
    """
    Parse a client-supplied identifier into a UUID.

    Runs before any database call so malformed ids never reach a query.

    Raises:
        InvalidIdentifierError: If the value is not a UUID
    """
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidIdentifierError(
            f"Invalid {field} format",
            field=field,
            value=str(value),
        ) from e
