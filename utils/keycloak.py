"""Keycloak admin API helpers for user lookup.

This module provides functions to interact with the Keycloak admin REST API
for user lookup, including fetching users by ID or email.

Functions:
    - get_admin_token: Obtain an admin access token from the master realm
    - find_users_by_email: Search the realm's users by exact email
    - get_user_by_id: Fetch a single user representation

Architecture:
    Every function takes the ``httpx.AsyncClient`` to use, so callers control
    timeouts, connection reuse and (in tests) the transport. Failures raise
    UserDirectoryError; an unknown user id raises UserNotFoundError.
"""

import logging
from typing import List

import httpx
from domain.exceptions import UserDirectoryError, UserNotFoundError

from .config import (
    KEYCLOAK_ADMIN_CLIENT_ID,
    KEYCLOAK_ADMIN_PASSWORD,
    KEYCLOAK_ADMIN_USERNAME,
    KEYCLOAK_REALM,
    KEYCLOAK_URL,
)

logger = logging.getLogger(__name__)


def _read_json(response: httpx.Response, what: str):
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Keycloak returned a non-JSON body for {what}: {e}")
        raise UserDirectoryError("User directory is unavailable") from e


async def get_admin_token(client: httpx.AsyncClient) -> str:
    """Get an admin access token from Keycloak.

    Args:
        client (httpx.AsyncClient): HTTP client to use.

    Returns:
        str: Bearer token for the admin API.

    Raises:
        UserDirectoryError: If Keycloak is unreachable or refuses the credentials.
    """
    admin_token_url = f"{KEYCLOAK_URL}/realms/master/protocol/openid-connect/token"
    admin_token_data = {
        "grant_type": "password",
        "client_id": KEYCLOAK_ADMIN_CLIENT_ID,
        "username": KEYCLOAK_ADMIN_USERNAME,
        "password": KEYCLOAK_ADMIN_PASSWORD,
    }

    try:
        response = await client.post(admin_token_url, data=admin_token_data)
    except httpx.HTTPError as e:
        logger.error(f"Failed to reach Keycloak for admin token: {e}")
        raise UserDirectoryError("User directory is unavailable") from e

    if response.status_code != 200:
        logger.error(f"Failed to get admin token: {response.status_code}")
        raise UserDirectoryError("User directory is unavailable")

    token = _read_json(response, "admin token")
    if not isinstance(token, dict) or not token.get("access_token"):
        logger.error("Keycloak token response has no access_token")
        raise UserDirectoryError("User directory is unavailable")
    return token["access_token"]


async def find_users_by_email(
    client: httpx.AsyncClient, admin_token: str, email: str
) -> List[dict]:
    """Search users of the realm by exact email.

    Args:
        client (httpx.AsyncClient): HTTP client to use.
        admin_token (str): Token from get_admin_token.
        email (str): Email address to search for.

    Returns:
        List[dict]: Keycloak user representations, possibly empty.

    Raises:
        UserDirectoryError: If the search fails.

    Example:
        >>> users = await find_users_by_email(client, token, "bob@example.com")
        >>> users[0]["id"]
        "keycloak-user-uuid"
    """
    search_url = f"{KEYCLOAK_URL}/admin/realms/{KEYCLOAK_REALM}/users"
    headers = {"Authorization": f"Bearer {admin_token}"}
    params = {"email": email, "exact": "true"}

    try:
        response = await client.get(search_url, headers=headers, params=params)
    except httpx.HTTPError as e:
        logger.error(f"Error searching user by email {email}: {e}")
        raise UserDirectoryError("User directory is unavailable") from e

    if response.status_code != 200:
        logger.error(f"Failed to search user by email: {response.status_code}")
        raise UserDirectoryError("User directory is unavailable")

    users = _read_json(response, "user search")
    if not isinstance(users, list) or not all(isinstance(u, dict) for u in users):
        logger.error("Keycloak user search did not return a list of users")
        raise UserDirectoryError("User directory is unavailable")
    return users


async def get_user_by_id(
    client: httpx.AsyncClient, admin_token: str, user_id: str
) -> dict:
    """Get a user representation by ID.

    Args:
        client (httpx.AsyncClient): HTTP client to use.
        admin_token (str): Token from get_admin_token.
        user_id (str): Keycloak user UUID.

    Returns:
        dict: Keycloak user representation.

    Raises:
        UserNotFoundError: If Keycloak has no such user.
        UserDirectoryError: If the lookup fails.
    """
    user_url = f"{KEYCLOAK_URL}/admin/realms/{KEYCLOAK_REALM}/users/{user_id}"
    headers = {"Authorization": f"Bearer {admin_token}"}

    try:
        response = await client.get(user_url, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"Error getting user {user_id}: {e}")
        raise UserDirectoryError("User directory is unavailable") from e

    if response.status_code == 404:
        raise UserNotFoundError(f"User {user_id} not found")
    if response.status_code != 200:
        logger.error(f"Failed to get user data: {response.status_code}")
        raise UserDirectoryError("User directory is unavailable")

    user = _read_json(response, f"user {user_id}")
    if not isinstance(user, dict):
        logger.error(f"Keycloak returned a malformed representation of user {user_id}")
        raise UserDirectoryError("User directory is unavailable")
    return user
