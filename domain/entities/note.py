"""Note domain entity for the notes service.

This module contains the core Note domain entity representing
a note and its share set following Domain-Driven Design principles.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

UNTITLED_NOTE = "Untitled Note"


def _clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass
class Note:
    """Domain entity representing a note in the notes system.

    A note belongs to exactly one owner and can be read by every user whose
    id is in its share set.

    Attributes:
        id (UUID): Unique identifier for the note.
        owner_id (str): Identity provider id of the user who created the note.
        owner_email (str): Owner's email at creation time, kept for display.
        title (Optional[str]): Title of the note.
        content (Optional[str]): Markdown content of the note.
        shared_with_ids (List[str]): Ids of the users the note is shared with.
        created_at (datetime): Timestamp when the note was created.
    """

    id: UUID
    owner_id: str
    owner_email: str
    title: Optional[str]
    content: Optional[str]
    created_at: datetime
    shared_with_ids: List[str] = field(default_factory=list)

    @classmethod
    def create_new(
        cls,
        owner_id: str,
        owner_email: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> "Note":
        """Factory method to create a new note with an empty share set.

        Args:
            owner_id (str): Id of the note owner.
            owner_email (str): Email of the note owner.
            title (Optional[str]): Title of the note.
            content (Optional[str]): Content of the note.

        Returns:
            Note: New note instance with generated UUID and timestamp.

        Raises:
            ValueError: If the owner id or owner email is empty.
        """
        if not owner_id or not owner_id.strip():
            raise ValueError("Note owner id cannot be empty")
        if not owner_email or not owner_email.strip():
            raise ValueError("Note owner email cannot be empty")

        return cls(
            id=uuid4(),
            owner_id=owner_id.strip(),
            owner_email=owner_email.strip(),
            title=_clean_text(title),
            content=_clean_text(content),
            created_at=datetime.utcnow(),
            shared_with_ids=[],
        )

    @property
    def display_title(self) -> str:
        """Title used in notifications and listings."""
        return self.title or UNTITLED_NOTE

    def is_owned_by(self, user_id: str) -> bool:
        """Check if the note is owned by the specified user.

        Args:
            user_id (str): Id of the user to check ownership for.

        Returns:
            bool: True if the user owns the note, False otherwise.
        """
        return self.owner_id == user_id

    def is_shared_with(self, user_id: str) -> bool:
        """Check if the note's share set contains the specified user."""
        return user_id in self.shared_with_ids

    def matches_text_search(self, query: Optional[str]) -> bool:
        """Check if the note matches a text search query.

        The match is a case-insensitive substring test against the title
        and the content. An empty query matches every note.

        Args:
            query (Optional[str]): The search query string.

        Returns:
            bool: True if the note matches the query, False otherwise.
        """
        if not query or not query.strip():
            return True

        query_lower = query.lower().strip()
        return any(
            query_lower in text.lower()
            for text in (self.title, self.content)
            if text
        )
