"""User domain entity.

Users are created and owned by the external identity provider. This service
only looks them up.
"""

from dataclasses import dataclass


def normalize_email(email: str) -> str:
    """Return the lookup key for an email address.

    Email matching is case-insensitive, so every lookup uses the stripped,
    lower-cased form.

    Example:
        >>> normalize_email("  Bob@Example.COM ")
        'bob@example.com'
    """
    return email.strip().lower()


@dataclass(frozen=True)
class User:
    """A registered user as seen by this service.

    Attributes:
        id (str): Stable identity provider id.
        email (str): Email address of the user.
    """

    id: str
    email: str
