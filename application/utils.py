"""Helpers shared by the REST routers.

Classes:
    - ApiError: HTTPException carrying a machine-readable error code

Functions:
    - parse_note_id: Validate a note id path parameter
    - to_http_exception: Map a domain exception to an ApiError
"""

import logging
from uuid import UUID

from domain.exceptions import (
    NoteAccessDeniedError,
    NoteAlreadySharedError,
    NoteNotFoundError,
    NoteStorageError,
    SelfShareError,
    UserDirectoryError,
    UserNotFoundError,
)
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

# Order matters: SelfShareError is also a ValueError
_ERROR_MAP = (
    (UserNotFoundError, status.HTTP_404_NOT_FOUND, "IDENTITY_NOT_FOUND"),
    (NoteNotFoundError, status.HTTP_404_NOT_FOUND, "NOTE_NOT_FOUND"),
    (NoteAccessDeniedError, status.HTTP_403_FORBIDDEN, "FORBIDDEN"),
    (NoteAlreadySharedError, status.HTTP_409_CONFLICT, "ALREADY_SHARED"),
    (SelfShareError, status.HTTP_400_BAD_REQUEST, "SELF_SHARE"),
    (NoteStorageError, status.HTTP_503_SERVICE_UNAVAILABLE, "STORAGE_ERROR"),
    (UserDirectoryError, status.HTTP_502_BAD_GATEWAY, "DIRECTORY_UNAVAILABLE"),
    (ValueError, status.HTTP_400_BAD_REQUEST, "INVALID_INPUT"),
)


class ApiError(HTTPException):
    """HTTPException rendered as an ErrorResponse with an error code."""

    def __init__(self, status_code: int, detail: str, error_code: str):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code


def parse_note_id(note_id: str) -> UUID:
    """Parse a note id path parameter.

    Raises:
        ApiError: 400 if the id is not a valid UUID.
    """
    try:
        return UUID(note_id)
    except ValueError as e:
        raise ApiError(
            status.HTTP_400_BAD_REQUEST, "Invalid note ID format", "INVALID_INPUT"
        ) from e


def to_http_exception(error: Exception) -> ApiError:
    """Map a domain exception to an ApiError.

    Args:
        error (Exception): Exception raised by a domain service.

    Returns:
        ApiError: Exception to raise from the router.

    Example:
        >>> to_http_exception(NoteAlreadySharedError("already shared")).status_code
        409
    """
    for error_class, status_code, error_code in _ERROR_MAP:
        if isinstance(error, error_class):
            return ApiError(status_code, str(error), error_code)

    logger.error(f"Unexpected error: {error}")
    return ApiError(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", "INTERNAL_ERROR"
    )
