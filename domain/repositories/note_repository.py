"""Note repository interface for the notes service.

This module defines the repository interface for note persistence
following Domain-Driven Design principles.

The repository is a thin, non-authorizing boundary: it never checks who is
asking. Ownership and visibility rules are applied by the domain services
through the access policy before any mutating call reaches it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

if TYPE_CHECKING:
    from domain.entities.note import Note
    from domain.entities.note_share import NoteShare
    from sqlalchemy.orm import Session


class NoteRepository(ABC):
    """Abstract repository interface for note operations.

    This interface defines the contract for note repositories,
    allowing different implementations while keeping the domain layer
    independent of infrastructure concerns.
    """

    @abstractmethod
    async def list_visible(self, db_session: Session, user_id: str) -> List[Note]:
        """List every note the user owns or that is shared with them.

        Args:
            db_session (Session): SQLAlchemy database session for this operation
            user_id (str): Id of the user

        Returns:
            List[Note]: Visible notes ordered by creation time, newest first
        """
        pass

    @abstractmethod
    async def create_note(self, db_session: Session, note: Note) -> Note:
        """Insert a new note with an empty share set.

        Args:
            db_session (Session): SQLAlchemy database session for this operation
            note (Note): Domain Note entity to create

        Returns:
            Note: The persisted note
        """
        pass

    @abstractmethod
    async def get_note_by_id(
        self, db_session: Session, note_id: UUID
    ) -> Optional[Note]:
        """Get a note by ID without any access filtering.

        Args:
            db_session (Session): SQLAlchemy database session for this operation
            note_id (UUID): UUID of the note to retrieve

        Returns:
            Optional[Note]: Note if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete_note(self, db_session: Session, note_id: UUID) -> bool:
        """Hard delete a note and its shares.

        Args:
            db_session (Session): SQLAlchemy database session for this operation
            note_id (UUID): UUID of the note to delete

        Returns:
            bool: True if the note was deleted, False if it did not exist
        """
        pass

    @abstractmethod
    async def append_share(
        self,
        db_session: Session,
        note_id: UUID,
        shared_by_user_id: str,
        shared_with_user_id: str,
    ) -> Note:
        """Atomically add a user to the note's share set.

        Args:
            db_session (Session): SQLAlchemy database session for this operation
            note_id (UUID): UUID of the note to share
            shared_by_user_id (str): Id of the user granting access
            shared_with_user_id (str): Id of the user receiving access

        Returns:
            Note: The note as stored after the append

        Raises:
            NoteAlreadySharedError: If the user is already in the share set
            NoteNotFoundError: If the note no longer exists
        """
        pass

    @abstractmethod
    async def get_note_shares(
        self, db_session: Session, note_id: UUID
    ) -> List[NoteShare]:
        """Get all shares of a note, oldest first.

        Args:
            db_session (Session): SQLAlchemy database session for this operation
            note_id (UUID): UUID of the note

        Returns:
            List[NoteShare]: Shares of the note
        """
        pass
