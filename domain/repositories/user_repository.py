"""User repository interface for the notes service.

Users live in the external identity provider. This interface is the
read-only lookup contract the domain services rely on to turn an email
into a user id and back.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class UserRepository(ABC):
    """Abstract read-only directory of registered users."""

    @abstractmethod
    async def get_user_id_by_email(self, email: str) -> str:
        """Resolve an email address to a user id.

        Matching is case-insensitive.

        Args:
            email (str): Email address to look up.

        Returns:
            str: Id of the user registered with that email.

        Raises:
            UserNotFoundError: If no user has that email.
            UserDirectoryError: If the directory cannot be queried.
        """
        pass

    @abstractmethod
    async def get_user_email_by_id(self, user_id: str) -> str:
        """Get the email address of a user.

        Args:
            user_id (str): Id of the user.

        Returns:
            str: Email address of the user.

        Raises:
            UserNotFoundError: If no user has that id.
            UserDirectoryError: If the directory cannot be queried.
        """
        pass

    @abstractmethod
    async def get_user_emails_by_ids(
        self, user_ids: List[str]
    ) -> Dict[str, Optional[str]]:
        """Get the email addresses of several users in one directory session.

        Users the directory does not know, or that have no email, map to
        ``None``.

        Raises:
            UserDirectoryError: If the directory cannot be queried.
        """
        pass

