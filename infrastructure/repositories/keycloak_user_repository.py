"""Keycloak implementation of the user repository.

Resolves emails to user ids (and back) through the Keycloak admin API.
Email matching is case-insensitive: the lookup key is normalised before the
request and the results are compared again on our side, so the outcome does
not depend on how the realm stores or compares emails.
"""

import logging
from typing import Dict, List, Optional

import httpx
from domain.entities.user import normalize_email
from domain.exceptions import UserDirectoryError, UserNotFoundError
from domain.repositories.user_repository import UserRepository
from utils import keycloak
from utils.config import KEYCLOAK_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class KeycloakUserRepository(UserRepository):
    """User directory backed by a Keycloak realm.

    Example:
        >>> repository = KeycloakUserRepository()
        >>> await repository.get_user_id_by_email("Bob@Example.com")
        "keycloak-user-uuid"
    """

    def __init__(
        self,
        timeout: float = KEYCLOAK_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the repository.

        Args:
            timeout (float): Per-request timeout in seconds.
            transport (Optional[httpx.AsyncBaseTransport]): Custom transport,
                e.g. ``httpx.MockTransport`` in tests.
        """
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def get_user_id_by_email(self, email: str) -> str:
        lookup_email = normalize_email(email)

        async with self._client() as client:
            admin_token = await keycloak.get_admin_token(client)
            users = await keycloak.find_users_by_email(
                client, admin_token, lookup_email
            )

        for user in users:
            if normalize_email(user.get("email") or "") == lookup_email:
                if not user.get("id"):
                    logger.error(f"Keycloak user for {lookup_email} has no id")
                    raise UserDirectoryError("User directory is unavailable")
                return user["id"]

        logger.warning(f"User not found for email: {lookup_email}")
        raise UserNotFoundError(f"No registered user with email {lookup_email}")

    async def get_user_email_by_id(self, user_id: str) -> str:
        async with self._client() as client:
            admin_token = await keycloak.get_admin_token(client)
            user = await keycloak.get_user_by_id(client, admin_token, user_id)

        email = user.get("email")
        if not email:
            raise UserNotFoundError(f"User {user_id} has no email")
        return email

    async def get_user_emails_by_ids(
        self, user_ids: List[str]
    ) -> Dict[str, Optional[str]]:
        emails = {}
        async with self._client() as client:
            admin_token = await keycloak.get_admin_token(client)
            for user_id in dict.fromkeys(user_ids):
                try:
                    user = await keycloak.get_user_by_id(client, admin_token, user_id)
                except UserNotFoundError:
                    logger.warning(f"User {user_id} no longer exists in the directory")
                    emails[user_id] = None
                    continue
                emails[user_id] = user.get("email") or None
        return emails

