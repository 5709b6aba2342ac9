import uuid

import httpx
from conftest import ALICE_ID, BOB_ID, CAROL_ID, headers_for
from infrastructure.repositories.keycloak_user_repository import (
    KeycloakUserRepository,
)
from main import app
from sqlalchemy.exc import OperationalError
from utils.dependencies import get_db, get_user_repository

ALICE = headers_for(ALICE_ID, "alice@example.com")
BOB = headers_for(BOB_ID, "bob@example.com")
CAROL = headers_for(CAROL_ID, "carol@example.com")


def create_note(client, headers=ALICE, **body):
    body = body or {"title": "Plan", "content": "# Q1 goals"}
    response = client.post("/notes", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "service": "notes-service",
        "database": "ok",
    }


def test_health_reports_unreachable_database(client):
    class BrokenSession:
        def execute(self, statement):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    app.dependency_overrides[get_db] = lambda: BrokenSession()

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"
    assert response.json()["database"] == "unreachable"


def test_create_note(client):
    note = create_note(client)

    assert note["title"] == "Plan"
    assert note["content"] == "# Q1 goals"
    assert note["owner_id"] == ALICE_ID
    assert note["owner_email"] == "alice@example.com"
    assert note["shared_with_ids"] == []
    assert note["is_owner"] is True
    uuid.UUID(note["id"])


def test_create_note_without_email_header_uses_directory(client, user_repository):
    note = create_note(client, headers=headers_for(BOB_ID), title="From directory")

    assert note["owner_email"] == "bob@example.com"


def test_create_note_title_too_long(client):
    response = client.post("/notes", json={"title": "x" * 256}, headers=ALICE)

    assert response.status_code == 422


def test_missing_identity_header_is_unauthorized(client):
    assert client.get("/notes").status_code == 401
    assert client.post("/notes", json={"title": "Plan"}).status_code == 401


def test_malformed_note_id(client):
    response = client.get("/notes/not-a-uuid", headers=ALICE)

    assert response.status_code == 400
    assert response.json()["error_code"] == "INVALID_INPUT"


def test_share_then_recipient_sees_note(client, notifier):
    note = create_note(client)

    response = client.post(
        f"/notes/{note['id']}/share", json={"email": "bob@example.com"}, headers=ALICE
    )

    assert response.status_code == 201
    assert response.json()["shared_with_ids"] == [BOB_ID]

    bob_view = client.get(f"/notes/{note['id']}", headers=BOB)
    assert bob_view.status_code == 200
    assert bob_view.json()["title"] == "Plan"
    assert bob_view.json()["is_owner"] is False

    carol_view = client.get(f"/notes/{note['id']}", headers=CAROL)
    assert carol_view.status_code == 404
    assert carol_view.json()["error_code"] == "NOTE_NOT_FOUND"

    assert [n.recipient_email for n in notifier.sent] == ["bob@example.com"]
    assert notifier.sent[0].note_title == "Plan"


def test_second_share_conflicts(client):
    note = create_note(client)
    share_url = f"/notes/{note['id']}/share"
    client.post(share_url, json={"email": "bob@example.com"}, headers=ALICE)

    response = client.post(share_url, json={"email": "Bob@Example.com"}, headers=ALICE)

    assert response.status_code == 409
    assert response.json()["error_code"] == "ALREADY_SHARED"
    current = client.get(f"/notes/{note['id']}", headers=ALICE).json()
    assert current["shared_with_ids"] == [BOB_ID]


def test_share_with_unknown_email(client):
    note = create_note(client)

    response = client.post(
        f"/notes/{note['id']}/share",
        json={"email": "nobody@example.com"},
        headers=ALICE,
    )

    assert response.status_code == 404
    assert response.json()["error_code"] == "IDENTITY_NOT_FOUND"
    current = client.get(f"/notes/{note['id']}", headers=ALICE).json()
    assert current["shared_with_ids"] == []


def test_share_with_self(client):
    note = create_note(client)

    response = client.post(
        f"/notes/{note['id']}/share",
        json={"email": "alice@example.com"},
        headers=ALICE,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "SELF_SHARE"


def test_share_by_recipient_is_forbidden(client):
    note = create_note(client)
    share_url = f"/notes/{note['id']}/share"
    client.post(share_url, json={"email": "bob@example.com"}, headers=ALICE)

    response = client.post(share_url, json={"email": "carol@example.com"}, headers=BOB)

    assert response.status_code == 403
    assert response.json()["error_code"] == "FORBIDDEN"


def test_share_request_requires_an_email(client):
    note = create_note(client)

    response = client.post(
        f"/notes/{note['id']}/share", json={"email": "bob"}, headers=ALICE
    )

    assert response.status_code == 422


def test_failed_notification_does_not_fail_the_share(client, notifier):
    notifier.fail = True
    note = create_note(client)

    response = client.post(
        f"/notes/{note['id']}/share", json={"email": "bob@example.com"}, headers=ALICE
    )

    assert response.status_code == 201
    assert response.json()["shared_with_ids"] == [BOB_ID]
    assert len(notifier.sent) == 1


def test_delete_by_non_owner_is_forbidden(client):
    note = create_note(client)
    client.post(
        f"/notes/{note['id']}/share", json={"email": "bob@example.com"}, headers=ALICE
    )

    response = client.delete(f"/notes/{note['id']}", headers=BOB)

    assert response.status_code == 403
    assert client.get(f"/notes/{note['id']}", headers=ALICE).status_code == 200


def test_delete_by_owner(client):
    note = create_note(client)
    client.post(
        f"/notes/{note['id']}/share", json={"email": "bob@example.com"}, headers=ALICE
    )

    response = client.delete(f"/notes/{note['id']}", headers=ALICE)

    assert response.status_code == 204
    assert client.get(f"/notes/{note['id']}", headers=ALICE).status_code == 404
    assert client.get(f"/notes/{note['id']}", headers=BOB).status_code == 404
    assert client.get("/notes/shared-with-me", headers=BOB).json()["notes"] == []


def test_delete_unknown_note(client):
    response = client.delete(f"/notes/{uuid.uuid4()}", headers=ALICE)

    assert response.status_code == 404


def test_listing_scopes(client):
    own = create_note(client, title="Alice's own")
    shared = create_note(client, headers=BOB, title="From Bob")
    create_note(client, headers=CAROL, title="Carol's private")
    client.post(
        f"/notes/{shared['id']}/share", json={"email": "alice@example.com"}, headers=BOB
    )

    def titles(path):
        response = client.get(path, headers=ALICE)
        assert response.status_code == 200
        return {note["title"] for note in response.json()["notes"]}

    assert titles("/notes") == {own["title"], shared["title"]}
    assert titles("/notes/my-notes") == {own["title"]}
    assert titles("/notes/shared-with-me") == {shared["title"]}


def test_listing_text_search(client):
    create_note(client, title="Plan", content="# Q1 goals")
    create_note(client, title="Groceries", content="milk, eggs")

    response = client.get("/notes", params={"q": "q1"}, headers=ALICE)

    assert [note["title"] for note in response.json()["notes"]] == ["Plan"]


def test_listing_pagination(client):
    for i in range(3):
        create_note(client, title=f"Note {i}")

    response = client.get("/notes", params={"page": 2, "limit": 2}, headers=ALICE)
    body = response.json()

    assert len(body["notes"]) == 1
    assert body["pagination"]["total_notes"] == 3
    assert body["pagination"]["total_pages"] == 2
    assert body["pagination"]["has_previous"] is True
    assert body["pagination"]["has_next"] is False


def test_listing_rejects_bad_limit(client):
    response = client.get("/notes", params={"limit": 0}, headers=ALICE)

    assert response.status_code == 422


def test_owner_lists_shares(client):
    note = create_note(client)
    share_url = f"/notes/{note['id']}/share"
    client.post(share_url, json={"email": "bob@example.com"}, headers=ALICE)
    client.post(share_url, json={"email": "carol@example.com"}, headers=ALICE)

    response = client.get(f"/notes/{note['id']}/shares", headers=ALICE)

    assert response.status_code == 200
    shares = response.json()["shares"]
    assert [s["shared_with_user_id"] for s in shares] == [BOB_ID, CAROL_ID]
    assert [s["shared_with_email"] for s in shares] == [
        "bob@example.com",
        "carol@example.com",
    ]
    assert client.get(f"/notes/{note['id']}/shares", headers=BOB).status_code == 403


def test_malformed_directory_answer_is_reported_as_directory_unavailable(client):
    def keycloak(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/protocol/openid-connect/token"):
            return httpx.Response(200, json={"access_token": "admin-token"})
        return httpx.Response(200, text="<html>Bad Gateway</html>")

    app.dependency_overrides[get_user_repository] = lambda: KeycloakUserRepository(
        transport=httpx.MockTransport(keycloak)
    )
    note = create_note(client)

    response = client.post(
        f"/notes/{note['id']}/share", json={"email": "bob@example.com"}, headers=ALICE
    )

    assert response.status_code == 502
    assert response.json()["error_code"] == "DIRECTORY_UNAVAILABLE"
    assert client.get(f"/notes/{note['id']}", headers=ALICE).json()["shared_with_ids"] == []
