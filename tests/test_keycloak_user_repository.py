import httpx
import pytest
from domain.exceptions import UserDirectoryError, UserNotFoundError
from infrastructure.repositories.keycloak_user_repository import (
    KeycloakUserRepository,
)

DIRECTORY = [
    {"id": "U2", "email": "bob@example.com", "username": "bob"},
    # Stored with mixed case, as some realms keep it.
    {"id": "U3", "email": "Carol@Example.com", "username": "carol"},
]


def keycloak_handler(token_status=200, search_status=200):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("/protocol/openid-connect/token"):
            if token_status != 200:
                return httpx.Response(token_status, json={"error": "invalid_grant"})
            return httpx.Response(200, json={"access_token": "admin-token"})

        assert request.headers["Authorization"] == "Bearer admin-token"

        if request.url.path.endswith("/users"):
            if search_status != 200:
                return httpx.Response(search_status)
            email = request.url.params["email"]
            assert request.url.params["exact"] == "true"
            return httpx.Response(
                200, json=[u for u in DIRECTORY if u["email"].lower() == email]
            )

        user_id = request.url.path.rsplit("/", 1)[-1]
        for user in DIRECTORY:
            if user["id"] == user_id:
                return httpx.Response(200, json=user)
        return httpx.Response(404, json={"error": "User not found"})

    return handler, seen


def repository(handler):
    return KeycloakUserRepository(transport=httpx.MockTransport(handler))


async def test_resolves_email_to_user_id():
    handler, seen = keycloak_handler()

    assert await repository(handler).get_user_id_by_email("bob@example.com") == "U2"
    assert seen[0].method == "POST"


@pytest.mark.parametrize(
    "email, expected",
    [
        ("BOB@example.com", "U2"),
        ("  Bob@Example.COM ", "U2"),
        ("carol@example.com", "U3"),
        ("CAROL@EXAMPLE.COM", "U3"),
    ],
)
async def test_email_matching_is_case_insensitive(email, expected):
    handler, seen = keycloak_handler()

    assert await repository(handler).get_user_id_by_email(email) == expected
    # The directory is always queried with the normalised address.
    assert seen[-1].url.params["email"] == email.strip().lower()


async def test_unknown_email_is_not_found():
    handler, _ = keycloak_handler()

    with pytest.raises(UserNotFoundError):
        await repository(handler).get_user_id_by_email("nobody@example.com")


async def test_rejected_admin_credentials_are_a_directory_error():
    handler, _ = keycloak_handler(token_status=401)

    with pytest.raises(UserDirectoryError):
        await repository(handler).get_user_id_by_email("bob@example.com")


async def test_failed_search_is_a_directory_error_not_a_missing_user():
    handler, _ = keycloak_handler(search_status=500)

    with pytest.raises(UserDirectoryError):
        await repository(handler).get_user_id_by_email("bob@example.com")


async def test_unreachable_directory_is_a_directory_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UserDirectoryError):
        await repository(handler).get_user_id_by_email("bob@example.com")


async def test_get_user_email_by_id():
    handler, _ = keycloak_handler()
    repo = repository(handler)

    assert await repo.get_user_email_by_id("U3") == "Carol@Example.com"
    with pytest.raises(UserNotFoundError):
        await repo.get_user_email_by_id("missing")


def token_then(search_response):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/protocol/openid-connect/token"):
            return httpx.Response(200, json={"access_token": "admin-token"})
        return search_response

    return handler


@pytest.mark.parametrize(
    "search_response",
    [
        httpx.Response(200, text="<html>Service Temporarily Unavailable</html>"),
        httpx.Response(200, json={"error": "unexpected"}),
        httpx.Response(200, json=["not-a-user"]),
    ],
)
async def test_malformed_search_response_is_a_directory_error(search_response):
    with pytest.raises(UserDirectoryError):
        await repository(token_then(search_response)).get_user_id_by_email(
            "bob@example.com"
        )


async def test_search_result_without_id_is_a_directory_error():
    handler = token_then(httpx.Response(200, json=[{"email": "bob@example.com"}]))

    with pytest.raises(UserDirectoryError):
        await repository(handler).get_user_id_by_email("bob@example.com")


@pytest.mark.parametrize(
    "token_response",
    [
        httpx.Response(200, json={"error": "weird"}),
        httpx.Response(200, text="not json"),
    ],
)
async def test_token_response_without_access_token_is_a_directory_error(
    token_response,
):
    def handler(request):
        return token_response

    with pytest.raises(UserDirectoryError):
        await repository(handler).get_user_id_by_email("bob@example.com")


async def test_malformed_user_representation_is_a_directory_error():
    handler = token_then(httpx.Response(200, text="<html></html>"))

    with pytest.raises(UserDirectoryError):
        await repository(handler).get_user_email_by_id("U2")


async def test_batch_email_lookup_uses_one_admin_token():
    handler, seen = keycloak_handler()

    emails = await repository(handler).get_user_emails_by_ids(
        ["U2", "U3", "missing", "U2"]
    )

    assert emails == {"U2": "bob@example.com", "U3": "Carol@Example.com", "missing": None}
    token_requests = [r for r in seen if r.url.path.endswith("/token")]
    assert len(token_requests) == 1
    # Duplicate ids are looked up once.
    assert len(seen) == 4
