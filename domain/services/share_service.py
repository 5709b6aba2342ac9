"""Share domain service for the notes service.

This module contains the ShareService that coordinates sharing a note with
another registered user:

    1. Resolve the target email to a user id.
    2. Load the note.
    3. Check that the actor owns it.
    4. Reject sharing with the owner and duplicate grants.
    5. Append the user id to the note's share set.
    6. Notify the recipient, best effort.

Steps 1-5 decide the outcome of the operation. Step 6 runs only after the
share is persisted and its failures are logged, never raised.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, List, Optional, Tuple
from uuid import UUID

from domain.entities.note import Note
from domain.entities.note_share import NoteShare
from domain.entities.user import normalize_email
from domain.exceptions import (
    InvalidShareRequestError,
    NoteAccessDeniedError,
    NoteAlreadySharedError,
    NoteNotFoundError,
    NoteStorageError,
    NotificationError,
    SelfShareError,
    UserDirectoryError,
    UserNotFoundError,
)
from domain.services.access_policy import AccessPolicy
from domain.services.share_notifier import ShareNotification
from sqlalchemy.exc import SQLAlchemyError

if TYPE_CHECKING:
    from domain.repositories.note_repository import NoteRepository
    from domain.repositories.user_repository import UserRepository
    from domain.services.share_notifier import ShareNotifier
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

DEFAULT_SENDER_NAME = "A user"


class ShareService:
    """Domain service for sharing notes with other users.

    Attributes:
        _note_repository (NoteRepository): Note persistence.
        _user_repository (UserRepository): Email to user id resolution.
        _notifier (ShareNotifier): Sender of share notifications.
        _notification_timeout (float): Seconds to wait for the notifier.
    """

    def __init__(
        self,
        note_repository: "NoteRepository",
        user_repository: "UserRepository",
        notifier: "ShareNotifier",
        notification_timeout: float = 5.0,
    ):
        self._note_repository = note_repository
        self._user_repository = user_repository
        self._notifier = notifier
        self._notification_timeout = notification_timeout

    async def share_note(
        self,
        db_session: "Session",
        note_id: UUID,
        actor_id: str,
        target_email: str,
    ) -> Note:
        """Share a note with the user registered under ``target_email``.

        Args:
            db_session: Database session for this operation
            note_id: UUID of the note to share
            actor_id: Id of the user performing the share
            target_email: Email of the user to share with

        Returns:
            Note: The note with its updated share set

        Raises:
            InvalidShareRequestError: If the email is empty
            UserNotFoundError: If no user is registered with that email
            UserDirectoryError: If the user directory cannot be queried
            NoteNotFoundError: If the note does not exist
            NoteAccessDeniedError: If the actor does not own the note
            SelfShareError: If the email belongs to the owner
            NoteAlreadySharedError: If the note is already shared with that user
            NoteStorageError: If the store fails
        """
        if not target_email or not target_email.strip():
            raise InvalidShareRequestError("An email is required to share a note")

        recipient_email = normalize_email(target_email)
        logger.info(f"User {actor_id} sharing note {note_id} with {recipient_email}")

        try:
            target_user_id = await self._user_repository.get_user_id_by_email(
                recipient_email
            )
        except UserNotFoundError:
            logger.warning(f"No registered user for email {recipient_email}")
            raise

        note = await self._load_note(db_session, note_id)

        if not note:
            raise NoteNotFoundError(f"Note {note_id} not found")

        if not AccessPolicy.can_share(actor_id, note):
            logger.warning(f"User {actor_id} may not share note {note_id}")
            raise NoteAccessDeniedError("Only the note owner can share the note")

        if note.is_owned_by(target_user_id):
            raise SelfShareError("You cannot share a note with yourself")

        if note.is_shared_with(target_user_id):
            raise NoteAlreadySharedError(
                f"This note is already shared with {recipient_email}"
            )

        try:
            updated_note = await self._note_repository.append_share(
                db_session, note_id, actor_id, target_user_id
            )
        except NoteAlreadySharedError as e:
            # Lost the race against a concurrent share with the same target.
            raise NoteAlreadySharedError(
                f"This note is already shared with {recipient_email}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Failed to share note {note_id}: {str(e)}")
            raise NoteStorageError("Failed to share note") from e

        logger.info(f"Successfully shared note {note_id} with user {target_user_id}")

        await self._notify(
            ShareNotification(
                recipient_email=recipient_email,
                note_title=updated_note.display_title,
                from_display_name=updated_note.owner_email or DEFAULT_SENDER_NAME,
            )
        )
        return updated_note

    async def get_note_shares(
        self, db_session: "Session", note_id: UUID, actor_id: str
    ) -> List[Tuple[NoteShare, Optional[str]]]:
        """List who a note is shared with, together with their emails.

        Emails are looked up best effort; a share whose user cannot be
        resolved is returned with ``None``.

        Args:
            db_session: Database session for this operation
            note_id: UUID of the note
            actor_id: Id of the user asking (must be the owner)

        Returns:
            List of (share, email) pairs, oldest share first

        Raises:
            NoteNotFoundError: If the note does not exist
            NoteAccessDeniedError: If the actor does not own the note
            NoteStorageError: If the store fails
        """
        note = await self._load_note(db_session, note_id)

        if not note:
            raise NoteNotFoundError(f"Note {note_id} not found")

        if not AccessPolicy.can_view_shares(actor_id, note):
            raise NoteAccessDeniedError(
                "Only the note owner can view who the note is shared with"
            )

        try:
            shares = await self._note_repository.get_note_shares(db_session, note_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get shares of note {note_id}: {str(e)}")
            raise NoteStorageError("Failed to retrieve note shares") from e

        emails = {}
        if shares:
            try:
                emails = await self._user_repository.get_user_emails_by_ids(
                    [share.shared_with_user_id for share in shares]
                )
            except UserDirectoryError as e:
                logger.warning(f"Could not resolve share emails of note {note_id}: {e}")

        result = [(share, emails.get(share.shared_with_user_id)) for share in shares]

        logger.info(f"Retrieved {len(result)} shares for note {note_id}")
        return result

    async def _notify(self, notification: ShareNotification) -> None:
        try:
            await asyncio.wait_for(
                self._notifier.send(notification), timeout=self._notification_timeout
            )
        except NotificationError as e:
            logger.error(f"Share notification failed: {e}")
        except asyncio.TimeoutError:
            logger.error(
                f"Share notification to {notification.recipient_email} timed out "
                f"after {self._notification_timeout}s"
            )
        except Exception as e:
            logger.error(f"Error sending share notification: {e}")

    async def _load_note(self, db_session: "Session", note_id: UUID) -> Optional[Note]:
        try:
            return await self._note_repository.get_note_by_id(db_session, note_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to get note {note_id}: {str(e)}")
            raise NoteStorageError("Failed to retrieve note") from e
