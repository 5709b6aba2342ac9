"""Note converters for transforming domain entities into API responses.

This module contains converter functions for transforming note and share
objects from the domain layer (entities) to the API layer (Pydantic).
"""

from typing import List, Optional, Tuple
from uuid import UUID

from domain.entities.note import Note
from domain.entities.note_share import NoteShare
from domain.entities.search import NoteListResult

from application.rest.schemas.output.note_output import NoteResponse, NotesListResponse
from application.rest.schemas.output.share_output import (
    NoteSharesResponse,
    ShareResponse,
)


class NoteConverter:
    """Converter class for note transformations between layers.

    Example:
        >>> response = NoteConverter.entity_to_response(note, viewer_id="user-1")
        >>> response.is_owner
        True
    """

    @staticmethod
    def entity_to_response(note: Note, viewer_id: str) -> NoteResponse:
        """Convert a Note entity to the response seen by ``viewer_id``."""
        return NoteResponse.from_entity(note, viewer_id)

    @staticmethod
    def list_result_to_response(result: NoteListResult) -> NotesListResponse:
        """Convert a listing result to a paginated response."""
        return NotesListResponse.from_entity(result)

    @staticmethod
    def shares_to_response(
        note_id: UUID, shares: List[Tuple[NoteShare, Optional[str]]]
    ) -> NoteSharesResponse:
        """Convert (share, email) pairs to the shares response of a note."""
        return NoteSharesResponse(
            note_id=str(note_id),
            shares=[ShareResponse.from_entity(share, email) for share, email in shares],
        )
