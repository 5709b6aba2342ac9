"""Note domain service for the notes service.

This module contains the NoteService that orchestrates note creation,
retrieval, deletion and listing following Domain-Driven Design principles.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional
from uuid import UUID

from domain.entities.note import Note
from domain.entities.search import (
    NoteListCriteria,
    NoteListResult,
    NoteScope,
    PaginationMetadata,
)
from domain.exceptions import (
    NoteAccessDeniedError,
    NoteNotFoundError,
    NoteStorageError,
)
from domain.services.access_policy import AccessPolicy
from sqlalchemy.exc import SQLAlchemyError

if TYPE_CHECKING:
    from domain.repositories.note_repository import NoteRepository
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class NoteService:
    """Domain service for handling note operations.

    This service encapsulates the business logic for note management.
    Every operation takes the acting user explicitly and checks it against
    the access policy before touching the repository.
    """

    def __init__(self, note_repository: "NoteRepository"):
        """Initialize the note service with dependencies.

        Args:
            note_repository: Repository for performing note operations
        """
        self._note_repository = note_repository

    async def create_note(
        self,
        db_session: "Session",
        owner_id: str,
        owner_email: str,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        """Create a new note owned by the given user.

        Args:
            db_session: Database session for this operation
            owner_id: Id of the note owner
            owner_email: Email of the note owner
            title: Note title
            content: Note content

        Returns:
            Note: Created note with an empty share set

        Raises:
            ValueError: If owner data is invalid
            NoteStorageError: If the store fails
        """
        logger.info(f"Creating note for user {owner_id}")

        note = Note.create_new(
            owner_id=owner_id, owner_email=owner_email, title=title, content=content
        )

        try:
            created_note = await self._note_repository.create_note(db_session, note)
        except SQLAlchemyError as e:
            logger.error(f"Failed to create note: {str(e)}")
            raise NoteStorageError("Failed to create note") from e

        logger.info(f"Successfully created note {created_note.id}")
        return created_note

    async def get_note(
        self, db_session: "Session", note_id: UUID, user_id: str
    ) -> Note:
        """Get a note by ID with access control.

        Args:
            db_session: Database session for this operation
            note_id: UUID of the note to retrieve
            user_id: Id of the user requesting the note

        Returns:
            Note: Retrieved note

        Raises:
            NoteNotFoundError: If note not found or user doesn't have access
            NoteStorageError: If the store fails
        """
        note = await self._load_note(db_session, note_id)

        if not note or not AccessPolicy.is_visible(user_id, note):
            raise NoteNotFoundError(f"Note {note_id} not found")

        return note

    async def delete_note(
        self, db_session: "Session", note_id: UUID, actor_id: str
    ) -> None:
        """Delete a note after verifying the actor owns it.

        Args:
            db_session: Database session for this operation
            note_id: UUID of the note to delete
            actor_id: Id of the user attempting deletion

        Raises:
            NoteNotFoundError: If note not found
            NoteAccessDeniedError: If the actor is not the owner
            NoteStorageError: If the store fails
        """
        logger.info(f"Deleting note {note_id} for user {actor_id}")

        note = await self._load_note(db_session, note_id)

        if not note:
            raise NoteNotFoundError(f"Note {note_id} not found")

        if not AccessPolicy.can_delete(actor_id, note):
            logger.warning(f"User {actor_id} may not delete note {note_id}")
            raise NoteAccessDeniedError("Only the note owner can delete the note")

        try:
            deleted = await self._note_repository.delete_note(db_session, note_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete note {note_id}: {str(e)}")
            raise NoteStorageError("Failed to delete note") from e

        if not deleted:
            raise NoteNotFoundError(f"Note {note_id} not found")

        logger.info(f"Successfully deleted note {note_id}")

    async def list_notes(
        self, db_session: "Session", criteria: NoteListCriteria
    ) -> NoteListResult:
        """List the notes visible to a user.

        The visible set is fetched once from the store, then narrowed to the
        requested scope, filtered by the text query and paginated.

        Args:
            db_session: Database session for this operation
            criteria: Who is listing, what to show and which page

        Returns:
            NoteListResult: Requested page and pagination metadata

        Raises:
            NoteStorageError: If the store fails
        """
        try:
            visible = await self._note_repository.list_visible(
                db_session, criteria.user_id
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list notes: {str(e)}")
            raise NoteStorageError("Failed to retrieve notes") from e

        in_scope = self.filter_scope(visible, criteria.user_id, criteria.scope)
        if criteria.has_text_search():
            matching = self.filter_notes(in_scope, criteria.query)
        else:
            matching = in_scope

        pagination = PaginationMetadata.calculate(
            current_page=criteria.page,
            total_notes=len(matching),
            notes_per_page=criteria.limit,
        )
        page = matching[criteria.offset : criteria.offset + criteria.limit]

        logger.info(
            f"Retrieved {len(page)} of {len(matching)} {criteria.scope.value} "
            f"notes for user {criteria.user_id}"
        )
        return NoteListResult(notes=page, pagination=pagination, criteria=criteria)

    @staticmethod
    def filter_scope(
        notes: Iterable[Note], user_id: str, scope: NoteScope
    ) -> List[Note]:
        """Narrow visible notes to owned or shared-with-me ones."""
        if scope is NoteScope.MY_NOTES:
            return [note for note in notes if note.is_owned_by(user_id)]
        if scope is NoteScope.SHARED_WITH_ME:
            return [
                note
                for note in notes
                if not note.is_owned_by(user_id) and note.is_shared_with(user_id)
            ]
        return [note for note in notes if AccessPolicy.is_visible(user_id, note)]

    @staticmethod
    def filter_notes(notes: Iterable[Note], query: Optional[str]) -> List[Note]:
        """Apply the case-insensitive title/content filter, keeping order.

        Example:
            >>> [n.title for n in NoteService.filter_notes(notes, "plan")]
            ['Plan']
        """
        return [note for note in notes if note.matches_text_search(query)]

    async def _load_note(self, db_session: "Session", note_id: UUID) -> Optional[Note]:
        try:
            return await self._note_repository.get_note_by_id(db_session, note_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get note {note_id}: {str(e)}")
            raise NoteStorageError("Failed to retrieve note") from e
