"""Share output schemas for API responses.

This module contains Pydantic models for share-related API responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel

if TYPE_CHECKING:
    from domain.entities.note_share import NoteShare


class ShareResponse(BaseModel):
    """Schema for share data in API responses.

    Attributes:
        id (str): UUID string identifier of the share.
        note_id (str): UUID string of the shared note.
        shared_by_user_id (str): Keycloak UUID of the user who shared the note.
        shared_with_user_id (str): Keycloak UUID of the user who received the share.
        shared_with_email (str, optional): Email of the recipient, if it resolved.
        created_at (datetime): Timestamp when the share was created.
    """

    id: str
    note_id: str
    shared_by_user_id: str
    shared_with_user_id: str
    shared_with_email: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_entity(
        cls, share: NoteShare, shared_with_email: Optional[str]
    ) -> ShareResponse:
        """Create ShareResponse from a NoteShare entity and the recipient email."""
        return cls(
            id=str(share.id),
            note_id=str(share.note_id),
            shared_by_user_id=share.shared_by_user_id,
            shared_with_user_id=share.shared_with_user_id,
            shared_with_email=shared_with_email,
            created_at=share.created_at,
        )


class NoteSharesResponse(BaseModel):
    """Schema for note shares list API responses.

    Attributes:
        note_id (str): UUID string of the note.
        shares (List[ShareResponse]): List of shares for the note.
    """

    note_id: str
    shares: List[ShareResponse]
