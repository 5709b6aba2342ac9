"""Domain exceptions for the notes service.

This module collects the error taxonomy shared by the domain services and
the repository implementations, so that infrastructure code can raise the
same errors the services and routers understand.

Classes:
    - NoteError: Base class for note-related failures.
    - NoteNotFoundError: The note does not exist (or is not visible).
    - NoteAccessDeniedError: The actor is not allowed to perform the action.
    - NoteAlreadySharedError: The target user already has access.
    - SelfShareError: The owner tried to share a note with themselves.
    - InvalidShareRequestError: The share request has no recipient email.
    - NoteStorageError: The backing store failed.
    - UserNotFoundError: No registered user has the given email or id.
    - UserDirectoryError: The user directory could not be queried.
    - NotificationError: A share notification could not be delivered.
"""


class NoteError(Exception):
    """Base exception for note-related errors."""

    pass


class NoteNotFoundError(NoteError):
    """Exception raised when a note is not found."""

    pass


class NoteAccessDeniedError(NoteError):
    """Exception raised when user doesn't have access to a note."""

    pass


class NoteAlreadySharedError(NoteError):
    """Exception raised when a note is already shared with the target user."""

    pass


class SelfShareError(NoteError, ValueError):
    """Exception raised when the owner tries to share a note with themselves."""

    pass


class InvalidShareRequestError(NoteError, ValueError):
    """Exception raised when a share request is missing the recipient email."""

    pass


class NoteStorageError(NoteError):
    """Exception raised when the note store fails."""

    pass


class UserNotFoundError(Exception):
    """Exception raised when no user matches an email or id."""

    pass


class UserDirectoryError(Exception):
    """Exception raised when the user directory is unreachable or misbehaves."""

    pass


class NotificationError(Exception):
    """Exception raised when a share notification is not accepted."""

    pass
