"""Conversion of domain errors into HTTP responses."""

from fastapi import HTTPException, status

from kirana.core.errors import (
    AuthenticationError,
    ConflictError,
    DuplicateKeyError,
    ForbiddenError,
    InvalidIdentifierError,
    InvalidTransitionError,
    KiranaError,
    NotFoundError,
    RepositoryError,
    ValidationError,
)
from kirana.core.logging import get_logger

logger = get_logger(__name__)

STATUS_BY_ERROR: dict[type[KiranaError], int] = {
    InvalidIdentifierError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidTransitionError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateKeyError: status.HTTP_409_CONFLICT,
    ConflictError: status.HTTP_409_CONFLICT,
    RepositoryError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(error: KiranaError) -> HTTPException:
    """
    Map a domain error to an HTTPException with ``{"error", "message"}`` detail.

    Repository failures keep their fixed message; the underlying cause is
    only logged.
    """
    status_code = next(
        (
            code
            for error_type, code in STATUS_BY_ERROR.items()
            if isinstance(error, error_type)
        ),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )

    if status_code >= 500:
        logger.error(
            "Request failed - internal error",
            error_code=error.code,
            error=error.message,
            **error.context,
        )
    else:
        logger.info(
            "Request rejected",
            error_code=error.code,
            status_code=status_code,
            error=error.message,
        )

    headers = (
        {"WWW-Authenticate": "Bearer"}
        if status_code == status.HTTP_401_UNAUTHORIZED
        else None
    )
    return HTTPException(
        status_code=status_code,
        detail={"error": error.code, "message": error.message},
        headers=headers,
    )
