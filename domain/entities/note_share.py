"""NoteShare domain entity.

A share grants one user read access to one note. The share set of a note
is the set of ``shared_with_user_id`` values over its shares.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class NoteShare:
    """Immutable record of a read grant.

    Attributes:
        id (UUID): Unique identifier of the share.
        note_id (UUID): The shared note.
        shared_by_user_id (str): Owner who granted access.
        shared_with_user_id (str): User who received access.
        created_at (datetime): When the grant was made.
    """

    id: UUID
    note_id: UUID
    shared_by_user_id: str
    shared_with_user_id: str
    created_at: datetime
