"""Listing and search domain entities for the notes service.

This module contains the domain entities used when a user lists the notes
visible to them: which scope to show, what to search for, and how the
result is paginated.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from domain.entities.note import Note


class NoteScope(Enum):
    """Enumeration for the client-visible note collections."""

    ALL = "all"
    MY_NOTES = "my-notes"
    SHARED_WITH_ME = "shared-with-me"


@dataclass
class NoteListCriteria:
    """Domain entity representing a request to list visible notes.

    Attributes:
        user_id: Id of the user listing notes
        query: Case-insensitive text filter over title and content (optional)
        scope: Which collection to show (all, my-notes, shared-with-me)
        page: Page number for pagination (1-based)
        limit: Number of results per page
    """

    user_id: str
    query: Optional[str] = None
    scope: NoteScope = NoteScope.ALL
    page: int = 1
    limit: int = 15

    def __post_init__(self):
        """Validate listing criteria after initialization."""
        if self.page < 1:
            raise ValueError("Page number must be at least 1")
        if self.limit < 1 or self.limit > 100:
            raise ValueError("Limit must be between 1 and 100")
        if self.query is not None:
            self.query = self.query.strip() or None

    @property
    def offset(self) -> int:
        """Calculate the offset of the first note on the requested page."""
        return (self.page - 1) * self.limit

    def has_text_search(self) -> bool:
        """Check if this criteria includes a text filter."""
        return self.query is not None


@dataclass
class PaginationMetadata:
    """Domain entity representing pagination information for note listings.

    Attributes:
        current_page: Current page number
        total_pages: Total number of pages
        total_notes: Total number of notes found
        notes_per_page: Number of notes per page
        has_next: Whether there is a next page
        has_previous: Whether there is a previous page
    """

    current_page: int
    total_pages: int
    total_notes: int
    notes_per_page: int
    has_next: bool
    has_previous: bool

    @classmethod
    def calculate(
        cls, current_page: int, total_notes: int, notes_per_page: int
    ) -> "PaginationMetadata":
        """Calculate pagination metadata from basic parameters.

        Args:
            current_page: The current page number (1-based)
            total_notes: Total number of notes found
            notes_per_page: Number of notes per page

        Returns:
            PaginationMetadata: Calculated pagination information
        """
        total_pages = (
            (total_notes + notes_per_page - 1) // notes_per_page
            if total_notes > 0
            else 1
        )

        return cls(
            current_page=current_page,
            total_pages=total_pages,
            total_notes=total_notes,
            notes_per_page=notes_per_page,
            has_next=current_page < total_pages,
            has_previous=current_page > 1,
        )


@dataclass
class NoteListResult:
    """Domain entity representing one page of a note listing.

    Attributes:
        notes: Notes on the requested page, newest first
        pagination: Pagination metadata for the whole filtered set
        criteria: The criteria that produced these results
    """

    notes: List["Note"]
    pagination: PaginationMetadata
    criteria: NoteListCriteria

    def __post_init__(self):
        """Validate the result page after initialization."""
        if len(self.notes) > self.pagination.notes_per_page:
            raise ValueError("Number of notes exceeds page limit")
