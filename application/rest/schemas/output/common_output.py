"""Common output schemas for API responses.

This module contains shared Pydantic models for common API responses
like error messages and status information.
"""

from typing import Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Schema for error responses across all endpoints.

    Attributes:
        detail (str): Detailed error message.
        error_code (str, optional): Specific error code for categorization.

    Example:
        >>> error_response = ErrorResponse(
        ...     detail="This note is already shared with bob@example.com",
        ...     error_code="ALREADY_SHARED"
        ... )
    """

    detail: str
    error_code: Optional[str] = None


class HealthResponse(BaseModel):
    """Health of the service and its database.

    Attributes:
        status (str): "healthy" or "unhealthy".
        service (str): Service name identifier.
        database (str): "ok" or "unreachable".
    """

    status: str
    service: str
    database: str
