"""Note output schemas for API responses.

This module contains Pydantic models for note-related API responses,
including single notes, pagination info, and note lists.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel

if TYPE_CHECKING:
    from domain.entities.note import Note
    from domain.entities.search import NoteListResult, PaginationMetadata


class NoteResponse(BaseModel):
    """Schema for note data in API responses.

    Attributes:
        id (str): UUID string identifier of the note.
        title (str, optional): The title of the note.
        content (str, optional): The markdown content of the note.
        owner_id (str): Keycloak UUID of the note owner.
        owner_email (str): Email of the note owner.
        shared_with_ids (List[str]): Users the note is shared with.
        is_owner (bool): Whether the caller owns the note.
        created_at (datetime): Timestamp when the note was created.
    """

    id: str
    title: Optional[str] = None
    content: Optional[str] = None
    owner_id: str
    owner_email: str
    shared_with_ids: List[str]
    is_owner: bool
    created_at: datetime

    @classmethod
    def from_entity(cls, note: Note, viewer_id: str) -> NoteResponse:
        """Create NoteResponse from Note domain entity.

        Args:
            note: The domain Note entity to convert
            viewer_id: Id of the user the response is for

        Returns:
            NoteResponse: The converted note response schema
        """
        return cls(
            id=str(note.id),
            title=note.title,
            content=note.content,
            owner_id=note.owner_id,
            owner_email=note.owner_email,
            shared_with_ids=list(note.shared_with_ids),
            is_owner=note.is_owned_by(viewer_id),
            created_at=note.created_at,
        )


class PaginationInfo(BaseModel):
    """Schema for pagination metadata in API responses.

    Attributes:
        current_page (int): Current page number (1-indexed).
        total_pages (int): Total number of pages available.
        total_notes (int): Total number of notes across all pages.
        notes_per_page (int): Number of notes per page.
        has_next (bool): Whether there is a next page available.
        has_previous (bool): Whether there is a previous page available.
    """

    current_page: int
    total_pages: int
    total_notes: int
    notes_per_page: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_entity(cls, pagination_metadata: PaginationMetadata) -> PaginationInfo:
        """Convert domain PaginationMetadata to API response PaginationInfo."""
        return cls(
            current_page=pagination_metadata.current_page,
            total_pages=pagination_metadata.total_pages,
            total_notes=pagination_metadata.total_notes,
            notes_per_page=pagination_metadata.notes_per_page,
            has_next=pagination_metadata.has_next,
            has_previous=pagination_metadata.has_previous,
        )


class NotesListResponse(BaseModel):
    """Schema for paginated notes list API responses.

    Attributes:
        notes (List[NoteResponse]): List of notes for the current page.
        pagination (PaginationInfo): Pagination metadata.
    """

    notes: List[NoteResponse]
    pagination: PaginationInfo

    @classmethod
    def from_entity(cls, result: NoteListResult) -> NotesListResponse:
        """Convert domain NoteListResult to API response NotesListResponse."""
        viewer_id = result.criteria.user_id
        return cls(
            notes=[NoteResponse.from_entity(note, viewer_id) for note in result.notes],
            pagination=PaginationInfo.from_entity(result.pagination),
        )
