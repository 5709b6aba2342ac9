"""Share input schemas for API requests.

This module contains Pydantic models for note sharing-related API requests.
"""

from pydantic import BaseModel, Field, field_validator


class ShareRequest(BaseModel):
    """Schema for sharing a note with another registered user.

    Attributes:
        email (str): Email address of the user to share the note with.

    Example:
        >>> share_data = ShareRequest(email="bob@example.com")
    """

    email: str = Field(min_length=3, max_length=320)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Strip the email and require an address-like value."""
        v = v.strip()
        if "@" not in v:
            raise ValueError("A valid email address is required")
        return v
