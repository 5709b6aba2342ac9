"""Access policy for notes.

Pure predicates deciding who may see, delete and share a note. They do no
I/O so every service can run them on the note it just loaded, before any
mutating repository call.

Rules:
    - A note is visible to its owner and to every user in its share set.
    - Only the owner may delete a note, extend its share set or list its shares.
"""

from domain.entities.note import Note


class AccessPolicy:
    """Side-effect-free authorization checks for notes.

    Example:
        >>> AccessPolicy.can_delete("user-1", note)
        True
    """

    @staticmethod
    def is_visible(user_id: str, note: Note) -> bool:
        """Return True if the user owns the note or it is shared with them."""
        return note.is_owned_by(user_id) or note.is_shared_with(user_id)

    @staticmethod
    def can_delete(actor_id: str, note: Note) -> bool:
        """Return True if the actor may delete the note."""
        return note.is_owned_by(actor_id)

    @staticmethod
    def can_share(actor_id: str, note: Note) -> bool:
        """Return True if the actor may add users to the note's share set."""
        return note.is_owned_by(actor_id)

    @staticmethod
    def can_view_shares(actor_id: str, note: Note) -> bool:
        """Return True if the actor may list who the note is shared with."""
        return note.is_owned_by(actor_id)
