"""Database, identity and service dependencies for the Notes Service.

This module provides dependency injection functions for FastAPI,
including database session management, caller identity and the factories
for the domain services.

Functions:
    - get_db: Database session factory with automatic cleanup
    - get_current_user_id: Extract user ID from request headers
    - get_current_user: Caller id and email, falling back to the directory
    - get_note_service / get_share_service: Domain service factories

Architecture:
    The API gateway authenticates the caller and forwards the identity as
    headers. Every operation receives that identity explicitly; nothing reads
    it from global state.
"""

import logging
from typing import Generator

from domain.entities.user import User
from domain.exceptions import UserDirectoryError, UserNotFoundError
from domain.repositories.user_repository import UserRepository
from domain.services.note_service import NoteService
from domain.services.share_notifier import ShareNotifier
from domain.services.share_service import ShareService
from fastapi import Depends, HTTPException, Request, status
from infrastructure.notifications.http_share_notifier import (
    HttpShareNotifier,
    NullShareNotifier,
)
from infrastructure.repositories.keycloak_user_repository import (
    KeycloakUserRepository,
)
from infrastructure.repositories.sqlalchemy_note_repository import (
    SQLAlchemyNoteRepository,
)
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import (
    DATABASE_URL,
    LOG_LEVEL,
    NOTIFICATION_TIMEOUT_SECONDS,
    NOTIFICATION_TOKEN,
    NOTIFICATION_URL,
)

# Configure logging
logging.basicConfig(level=getattr(logging, LOG_LEVEL))
logger = logging.getLogger(__name__)

# Database setup
engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session with automatic cleanup.

    Yields:
        Session: SQLAlchemy database session that automatically closes after use.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(request: Request) -> str:
    """Extract user ID from request headers.

    Args:
        request (Request): FastAPI request object containing headers.

    Returns:
        str: User ID extracted from X-User-ID header.

    Raises:
        HTTPException: 401 if X-User-ID header is missing.
    """
    user_id = request.headers.get("X-User-ID")
    if not user_id:
        raise HTTPException(status_code=401, detail="User ID not found in headers")
    return user_id


def get_user_repository() -> UserRepository:
    """Create the user directory backed by Keycloak."""
    return KeycloakUserRepository()


def get_share_notifier() -> ShareNotifier:
    """Create the share notifier, or a no-op one when no sender is configured."""
    if not NOTIFICATION_URL:
        return NullShareNotifier()
    return HttpShareNotifier(
        url=NOTIFICATION_URL,
        token=NOTIFICATION_TOKEN,
        timeout=NOTIFICATION_TIMEOUT_SECONDS,
    )


async def get_current_user(
    request: Request,
    user_repository: UserRepository = Depends(get_user_repository),
) -> User:
    """Get the caller's id and email.

    The email comes from the X-User-Email header set by the gateway; when it
    is absent it is looked up in the user directory.

    Raises:
        HTTPException: 401 if the caller cannot be identified.
        HTTPException: 502 if the directory is unavailable.
    """
    user_id = get_current_user_id(request)
    email = request.headers.get("X-User-Email")
    if email and email.strip():
        return User(id=user_id, email=email.strip())

    try:
        email = await user_repository.get_user_email_by_id(user_id)
    except UserNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user"
        ) from e
    except UserDirectoryError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="User directory is unavailable",
        ) from e

    return User(id=user_id, email=email)


def get_note_service() -> NoteService:
    """Create and configure the note service with repository dependency.

    The session is injected per-request in each endpoint method.

    Returns:
        NoteService: Configured domain service ready for use.
    """
    return NoteService(SQLAlchemyNoteRepository())


def get_share_service(
    user_repository: UserRepository = Depends(get_user_repository),
    notifier: ShareNotifier = Depends(get_share_notifier),
) -> ShareService:
    """Create and configure the share service with its collaborators.

    Returns:
        ShareService: Configured domain service ready for use.
    """
    return ShareService(
        note_repository=SQLAlchemyNoteRepository(),
        user_repository=user_repository,
        notifier=notifier,
        notification_timeout=NOTIFICATION_TIMEOUT_SECONDS,
    )
