"""Mapping of service errors to HTTP responses"""

import logging

from fastapi import HTTPException, status

from library_service.core.errors import (
    AuthenticationError,
    EntityNotFoundError,
    InvalidOperationError,
    LibraryServiceError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger("library-service.api.errors")

ERROR_STATUS_CODES = {
    EntityNotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidOperationError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    PermissionDeniedError: status.HTTP_403_FORBIDDEN,
}


def http_error(error: LibraryServiceError) -> HTTPException:
    """
    Convert a service error to an HTTPException.

    The response detail is ``error.to_dict()``. Errors without a mapping
    (infrastructure failures) become 500 with a generic message.
    """
    for error_cls, status_code in ERROR_STATUS_CODES.items():
        if isinstance(error, error_cls):
            logger.info(f"{error.error_code}: {error.message}")
            headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
            return HTTPException(status_code=status_code, detail=error.to_dict(), headers=headers)

    logger.error(f"Unhandled service error: {error}", exc_info=error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error_code": error.error_code,
            "message": "Internal server error",
            "details": {},
        },
    )


def set_paging_headers(response, total_count: int, page_number: int, page_size: int) -> None:
    """Expose paging metadata as X-Total-Count / X-Page-Number / X-Page-Size"""
    response.headers["X-Total-Count"] = str(total_count)
    response.headers["X-Page-Number"] = str(page_number)
    response.headers["X-Page-Size"] = str(page_size)
