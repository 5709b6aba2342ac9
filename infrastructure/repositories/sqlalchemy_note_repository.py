"""SQLAlchemy implementation of the note repository.

This module contains the concrete implementation of the NoteRepository
using SQLAlchemy for database operations.
"""

from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from domain.entities.note import Note
from domain.entities.note_share import NoteShare
from domain.exceptions import NoteAlreadySharedError, NoteNotFoundError
from domain.repositories.note_repository import NoteRepository
from infrastructure.models.note_orm import NoteORM
from infrastructure.models.note_share_orm import NoteShareORM
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class SQLAlchemyNoteRepository(NoteRepository):
    """SQLAlchemy implementation of the note repository.

    NOTE: This repository does not store the session internally.
    Each method receives a fresh session to ensure proper transaction management
    and avoid session leaks. It performs no authorization; callers check the
    access policy first.
    """

    async def list_visible(self, db_session: Session, user_id: str) -> List[Note]:
        """List every note owned by or shared with the user, newest first.

        Args:
            db_session (Session): Database session.
            user_id (str): Id of the user.

        Returns:
            List[Note]: Visible notes with their share sets.
        """
        shared_note_ids = select(NoteShareORM.note_id).where(
            NoteShareORM.shared_with_user_id == user_id
        )
        note_orms = (
            db_session.query(NoteORM)
            .filter(
                or_(
                    NoteORM.owner_id == user_id,
                    NoteORM.id.in_(shared_note_ids),
                )
            )
            .order_by(NoteORM.created_at.desc())
            .all()
        )

        logger.info(f"Found {len(note_orms)} notes visible to user {user_id}")
        return [self._orm_to_domain_entity(note_orm) for note_orm in note_orms]

    async def create_note(self, db_session: Session, note: Note) -> Note:
        """Create a new note in the repository.

        Args:
            db_session (Session): SQLAlchemy database session for this operation
            note (Note): Domain Note entity to create

        Returns:
            Note: Created note as persisted
        """
        try:
            db_note = NoteORM(
                id=note.id,
                title=note.title,
                content=note.content,
                owner_id=note.owner_id,
                owner_email=note.owner_email,
                created_at=note.created_at,
            )

            db_session.add(db_note)
            db_session.commit()
            db_session.refresh(db_note)

            return self._orm_to_domain_entity(db_note)

        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to create note: {str(e)}")
            raise

    async def get_note_by_id(
        self, db_session: Session, note_id: UUID
    ) -> Optional[Note]:
        """Get a note by ID.

        Args:
            db_session (Session): Database session.
            note_id (UUID): The ID of the note to retrieve.

        Returns:
            Optional[Note]: The note if found, None otherwise.
        """
        note_orm = db_session.get(NoteORM, note_id)

        if not note_orm:
            logger.info(f"Note {note_id} not found")
            return None

        return self._orm_to_domain_entity(note_orm)

    async def delete_note(self, db_session: Session, note_id: UUID) -> bool:
        """Hard delete a note together with its shares.

        Args:
            db_session (Session): Database session.
            note_id (UUID): The ID of the note to delete.

        Returns:
            bool: True if the note was deleted, False if not found.
        """
        try:
            db_note = db_session.get(NoteORM, note_id)

            if not db_note:
                return False

            db_session.delete(db_note)
            db_session.commit()
            return True

        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to delete note {note_id}: {str(e)}")
            raise

    async def append_share(
        self,
        db_session: Session,
        note_id: UUID,
        shared_by_user_id: str,
        shared_with_user_id: str,
    ) -> Note:
        """Add a user to the note's share set with a single INSERT.

        The unique constraint on (note_id, shared_with_user_id) rejects a
        duplicate grant even when two requests race past the service's own
        duplicate check.

        Args:
            db_session (Session): Database session.
            note_id (UUID): The ID of the note to share.
            shared_by_user_id (str): Id of the owner granting access.
            shared_with_user_id (str): Id of the user receiving access.

        Returns:
            Note: The note re-read after the commit.

        Raises:
            NoteAlreadySharedError: If the share already exists.
            NoteNotFoundError: If the note does not exist.
        """
        db_share = NoteShareORM(
            note_id=note_id,
            shared_by_user_id=shared_by_user_id,
            shared_with_user_id=shared_with_user_id,
        )

        try:
            db_session.add(db_share)
            db_session.commit()
        except IntegrityError as e:
            db_session.rollback()
            if self._share_exists(db_session, note_id, shared_with_user_id):
                logger.warning(
                    f"Note {note_id} already shared with user {shared_with_user_id}"
                )
                raise NoteAlreadySharedError(
                    f"Note {note_id} already shared with user {shared_with_user_id}"
                ) from e
            if db_session.get(NoteORM, note_id) is None:
                raise NoteNotFoundError(f"Note {note_id} not found") from e
            raise
        except Exception as e:
            db_session.rollback()
            logger.error(f"Failed to share note {note_id}: {str(e)}")
            raise

        db_note = db_session.get(NoteORM, note_id)
        if not db_note:
            raise NoteNotFoundError(f"Note {note_id} not found")

        return self._orm_to_domain_entity(db_note)

    async def get_note_shares(
        self, db_session: Session, note_id: UUID
    ) -> List[NoteShare]:
        """Get all shares of a note, oldest first.

        Args:
            db_session (Session): Database session.
            note_id (UUID): The ID of the note.

        Returns:
            List[NoteShare]: The note's shares.
        """
        share_orms = (
            db_session.query(NoteShareORM)
            .filter(NoteShareORM.note_id == note_id)
            .order_by(NoteShareORM.created_at)
            .all()
        )
        return [self._share_orm_to_domain_entity(share) for share in share_orms]

    def _share_exists(
        self, db_session: Session, note_id: UUID, shared_with_user_id: str
    ) -> bool:
        return (
            db_session.query(NoteShareORM.id)
            .filter(
                NoteShareORM.note_id == note_id,
                NoteShareORM.shared_with_user_id == shared_with_user_id,
            )
            .first()
            is not None
        )

    def _orm_to_domain_entity(self, note_orm: NoteORM) -> Note:
        """Convert ORM model to domain entity.

        Args:
            note_orm (NoteORM): The ORM model to convert.

        Returns:
            Note: The domain entity, including its share set.
        """
        return Note(
            id=note_orm.id,
            owner_id=note_orm.owner_id,
            owner_email=note_orm.owner_email,
            title=note_orm.title,
            content=note_orm.content,
            created_at=note_orm.created_at,
            shared_with_ids=list(note_orm.shared_with_ids),
        )

    def _share_orm_to_domain_entity(self, share_orm: NoteShareORM) -> NoteShare:
        return NoteShare(
            id=share_orm.id,
            note_id=share_orm.note_id,
            shared_by_user_id=share_orm.shared_by_user_id,
            shared_with_user_id=share_orm.shared_with_user_id,
            created_at=share_orm.created_at,
        )
