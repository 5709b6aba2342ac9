import asyncio
import os

# Point the module-level engine at SQLite before the app is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["NOTIFICATION_URL"] = ""

import pytest
from domain.entities.user import normalize_email
from domain.exceptions import NotificationError, UserNotFoundError
from domain.repositories.user_repository import UserRepository
from domain.services.note_service import NoteService
from domain.services.share_notifier import ShareNotifier
from domain.services.share_service import ShareService
from fastapi.testclient import TestClient
from infrastructure.models.base import Base
from infrastructure.repositories.sqlalchemy_note_repository import (
    SQLAlchemyNoteRepository,
)
from main import app
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from utils.dependencies import get_db, get_share_notifier, get_user_repository

ALICE_ID = "U1"
BOB_ID = "U2"
CAROL_ID = "U3"

USERS = {
    "alice@example.com": ALICE_ID,
    "bob@example.com": BOB_ID,
    "carol@example.com": CAROL_ID,
}


class FakeUserRepository(UserRepository):
    """In-memory user directory with case-insensitive email matching."""

    def __init__(self, users):
        self._ids_by_email = {normalize_email(email): uid for email, uid in users.items()}
        self.lookups = []
        self.batch_lookups = []

    async def get_user_id_by_email(self, email: str) -> str:
        self.lookups.append(email)
        # Let other coroutines run, like a real network call would.
        await asyncio.sleep(0)
        try:
            return self._ids_by_email[normalize_email(email)]
        except KeyError:
            raise UserNotFoundError(f"No registered user with email {email}")

    async def get_user_email_by_id(self, user_id: str) -> str:
        for email, uid in self._ids_by_email.items():
            if uid == user_id:
                return email
        raise UserNotFoundError(f"User {user_id} not found")

    async def get_user_emails_by_ids(self, user_ids):
        self.batch_lookups.append(list(user_ids))
        emails_by_id = {uid: email for email, uid in self._ids_by_email.items()}
        return {user_id: emails_by_id.get(user_id) for user_id in user_ids}


class RecordingNotifier(ShareNotifier):
    """Notifier that records notifications, optionally failing."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    async def send(self, notification):
        self.sent.append(notification)
        if self.fail:
            raise NotificationError("Email notification failed with status 500")


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'notes.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def user_repository():
    return FakeUserRepository(USERS)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def note_repository():
    return SQLAlchemyNoteRepository()


@pytest.fixture
def note_service(note_repository):
    return NoteService(note_repository)


@pytest.fixture
def share_service(note_repository, user_repository, notifier):
    return ShareService(
        note_repository=note_repository,
        user_repository=user_repository,
        notifier=notifier,
        notification_timeout=0.5,
    )


@pytest.fixture
def client(session_factory, user_repository, notifier):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_user_repository] = lambda: user_repository
    app.dependency_overrides[get_share_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def headers_for(user_id: str, email: str = None) -> dict:
    headers = {"X-User-ID": user_id}
    if email:
        headers["X-User-Email"] = email
    return headers
