import logging
from typing import Optional

from application.converters.note_converter import NoteConverter
from application.rest.schemas.input.note_input import NoteCreate
from application.rest.schemas.input.share_input import ShareRequest
from application.rest.schemas.output.common_output import ErrorResponse
from application.rest.schemas.output.note_output import NoteResponse, NotesListResponse
from application.rest.schemas.output.share_output import NoteSharesResponse
from application.utils import parse_note_id, to_http_exception
from domain.entities.search import NoteListCriteria, NoteScope
from domain.entities.user import User
from domain.exceptions import (
    NoteError,
    UserDirectoryError,
    UserNotFoundError,
)
from domain.services.note_service import NoteService
from domain.services.share_service import ShareService
from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session
from utils.dependencies import (
    get_current_user,
    get_current_user_id,
    get_db,
    get_note_service,
    get_share_service,
)

logger = logging.getLogger(__name__)
router = APIRouter()

_UNAUTHORIZED = {
    "model": ErrorResponse,
    "description": "User authentication required.",
    "content": {
        "application/json": {"example": {"detail": "User ID not found in headers"}}
    },
}
_STORAGE_ERROR = {
    "model": ErrorResponse,
    "description": "The note store is unavailable.",
    "content": {
        "application/json": {
            "example": {
                "detail": "Failed to retrieve notes",
                "error_code": "STORAGE_ERROR",
            }
        }
    },
}
_NOTE_NOT_FOUND = {
    "model": ErrorResponse,
    "description": "Note not found.",
    "content": {
        "application/json": {
            "example": {"detail": "Note not found", "error_code": "NOTE_NOT_FOUND"}
        }
    },
}
_INVALID_NOTE_ID = {
    "model": ErrorResponse,
    "description": "Invalid note ID format.",
    "content": {
        "application/json": {
            "example": {"detail": "Invalid note ID format", "error_code": "INVALID_INPUT"}
        }
    },
}

_LIST_RESPONSES = {
    status.HTTP_200_OK: {
        "model": NotesListResponse,
        "description": "Paginated list of notes, newest first.",
    },
    status.HTTP_401_UNAUTHORIZED: _UNAUTHORIZED,
    status.HTTP_503_SERVICE_UNAVAILABLE: _STORAGE_ERROR,
}


async def _list_notes(
    request: Request,
    scope: NoteScope,
    q: Optional[str],
    page: int,
    limit: int,
    db: Session,
    note_service: NoteService,
) -> NotesListResponse:
    user_id = get_current_user_id(request)
    logger.info(
        f"Listing {scope.value} notes for user_id: {user_id}, page: {page}, limit: {limit}"
    )

    try:
        criteria = NoteListCriteria(
            user_id=user_id, query=q, scope=scope, page=page, limit=limit
        )
        result = await note_service.list_notes(db, criteria)
    except (NoteError, ValueError) as e:
        raise to_http_exception(e) from e

    return NoteConverter.list_result_to_response(result)


@router.get(
    path="/notes",
    description="Retrieve every note the current user owns or that is shared with them.",
    response_model=NotesListResponse,
    status_code=status.HTTP_200_OK,
    responses=_LIST_RESPONSES,
)
async def get_notes(
    request: Request,
    q: Optional[str] = Query(default=None, description="Case-insensitive text filter"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=15, ge=1, le=100),
    db: Session = Depends(get_db),
    note_service: NoteService = Depends(get_note_service),
) -> NotesListResponse:
    """Get owned and shared-with-me notes merged, optionally filtered.

    Args:
        request (Request): FastAPI request object containing user headers.
        q (Optional[str]): Substring to look for in title or content.
        page (int): Page number for pagination.
        limit (int): Number of notes per page.
        db (Session): Database session dependency injected by FastAPI.
        note_service (NoteService): Domain service with injected repository.

    Returns:
        NotesListResponse: Paginated list of notes with pagination metadata.

    Example:
        >>> result = await get_notes(request, q="plan")
        >>> print([note.title for note in result.notes])
        ['Plan']
    """
    return await _list_notes(request, NoteScope.ALL, q, page, limit, db, note_service)


@router.get(
    path="/notes/my-notes",
    description="Retrieve the notes owned by the current user.",
    response_model=NotesListResponse,
    status_code=status.HTTP_200_OK,
    responses=_LIST_RESPONSES,
)
async def get_my_notes(
    request: Request,
    q: Optional[str] = Query(default=None, description="Case-insensitive text filter"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=15, ge=1, le=100),
    db: Session = Depends(get_db),
    note_service: NoteService = Depends(get_note_service),
) -> NotesListResponse:
    """Get the current user's own notes, shared or not."""
    return await _list_notes(
        request, NoteScope.MY_NOTES, q, page, limit, db, note_service
    )


@router.get(
    path="/notes/shared-with-me",
    description="Retrieve the notes other users have shared with the current user.",
    response_model=NotesListResponse,
    status_code=status.HTTP_200_OK,
    responses=_LIST_RESPONSES,
)
async def get_notes_shared_with_me(
    request: Request,
    q: Optional[str] = Query(default=None, description="Case-insensitive text filter"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=15, ge=1, le=100),
    db: Session = Depends(get_db),
    note_service: NoteService = Depends(get_note_service),
) -> NotesListResponse:
    """Get notes shared WITH the current user (not owned by them)."""
    return await _list_notes(
        request, NoteScope.SHARED_WITH_ME, q, page, limit, db, note_service
    )


@router.get(
    path="/notes/{note_id}",
    description="Retrieve a specific note. The user must own it or have it shared with them.",
    response_model=NoteResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": NoteResponse,
            "description": "Note details.",
        },
        status.HTTP_400_BAD_REQUEST: _INVALID_NOTE_ID,
        status.HTTP_401_UNAUTHORIZED: _UNAUTHORIZED,
        status.HTTP_404_NOT_FOUND: _NOTE_NOT_FOUND,
        status.HTTP_503_SERVICE_UNAVAILABLE: _STORAGE_ERROR,
    },
)
async def get_note(
    note_id: str,
    request: Request,
    db: Session = Depends(get_db),
    note_service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Get a specific note by ID.

    Notes the caller may not see are reported as not found.

    Raises:
        HTTPException: 400 if the note ID is malformed.
        HTTPException: 401 if user ID not found in headers.
        HTTPException: 404 if note not found or not visible to the user.
    """
    user_id = get_current_user_id(request)
    note_uuid = parse_note_id(note_id)

    try:
        note = await note_service.get_note(db, note_uuid, user_id)
    except NoteError as e:
        raise to_http_exception(e) from e

    return NoteConverter.entity_to_response(note, user_id)


@router.post(
    path="/notes",
    description="Create a new note owned by the current user.",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_201_CREATED: {
            "model": NoteResponse,
            "description": "Note created successfully.",
        },
        status.HTTP_401_UNAUTHORIZED: _UNAUTHORIZED,
        status.HTTP_503_SERVICE_UNAVAILABLE: _STORAGE_ERROR,
    },
)
async def create_note(
    note: NoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    note_service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    """Create a new note with an empty share set.

    Args:
        note (NoteCreate): Note creation data.
        db (Session): Database session dependency injected by FastAPI.
        current_user (User): Caller id and email.
        note_service (NoteService): Domain service with injected repository.

    Returns:
        NoteResponse: Created note details including assigned UUID.

    Example:
        >>> created = await create_note(NoteCreate(title="Plan", content="# Q1 goals"), ...)
        >>> created.shared_with_ids
        []
    """
    try:
        created = await note_service.create_note(
            db,
            owner_id=current_user.id,
            owner_email=current_user.email,
            title=note.title,
            content=note.content,
        )
    except (NoteError, ValueError) as e:
        raise to_http_exception(e) from e

    return NoteConverter.entity_to_response(created, current_user.id)


@router.delete(
    path="/notes/{note_id}",
    description="Permanently delete a note. Only the owner can delete it.",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        status.HTTP_204_NO_CONTENT: {
            "description": "Note deleted successfully.",
        },
        status.HTTP_400_BAD_REQUEST: _INVALID_NOTE_ID,
        status.HTTP_401_UNAUTHORIZED: _UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN: {
            "model": ErrorResponse,
            "description": "User not authorized to delete this note.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Only the note owner can delete the note",
                        "error_code": "FORBIDDEN",
                    }
                }
            },
        },
        status.HTTP_404_NOT_FOUND: _NOTE_NOT_FOUND,
        status.HTTP_503_SERVICE_UNAVAILABLE: _STORAGE_ERROR,
    },
)
async def delete_note(
    note_id: str,
    request: Request,
    db: Session = Depends(get_db),
    note_service: NoteService = Depends(get_note_service),
) -> Response:
    """Delete a note (hard delete, shares included).

    Raises:
        HTTPException: 403 if the caller does not own the note.
        HTTPException: 404 if the note does not exist.
    """
    user_id = get_current_user_id(request)
    note_uuid = parse_note_id(note_id)

    try:
        await note_service.delete_note(db, note_uuid, user_id)
    except NoteError as e:
        raise to_http_exception(e) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    path="/notes/{note_id}/share",
    description="Share a note with a registered user identified by email.",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_201_CREATED: {
            "model": NoteResponse,
            "description": "Note shared; the response carries the updated share set.",
        },
        status.HTTP_400_BAD_REQUEST: {
            "model": ErrorResponse,
            "description": "Invalid note ID or attempt to share with yourself.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "You cannot share a note with yourself",
                        "error_code": "SELF_SHARE",
                    }
                }
            },
        },
        status.HTTP_401_UNAUTHORIZED: _UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN: {
            "model": ErrorResponse,
            "description": "User not authorized to share this note.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Only the note owner can share the note",
                        "error_code": "FORBIDDEN",
                    }
                }
            },
        },
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "Note not found, or no registered user has that email.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "No registered user with email bob@example.com",
                        "error_code": "IDENTITY_NOT_FOUND",
                    }
                }
            },
        },
        status.HTTP_409_CONFLICT: {
            "model": ErrorResponse,
            "description": "Note already shared with that user.",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "This note is already shared with bob@example.com",
                        "error_code": "ALREADY_SHARED",
                    }
                }
            },
        },
        status.HTTP_502_BAD_GATEWAY: {
            "model": ErrorResponse,
            "description": "The user directory is unavailable.",
        },
        status.HTTP_503_SERVICE_UNAVAILABLE: _STORAGE_ERROR,
    },
)
async def share_note(
    note_id: str,
    share_request: ShareRequest,
    request: Request,
    db: Session = Depends(get_db),
    share_service: ShareService = Depends(get_share_service),
) -> NoteResponse:
    """Share a note with another registered user.

    The share is reported as successful once it is stored, whether or not
    the recipient's notification could be delivered.

    Args:
        note_id (str): UUID of the note to share.
        share_request (ShareRequest): Email of the recipient.
        request (Request): FastAPI request object containing user headers.
        db (Session): Database session dependency injected by FastAPI.
        share_service (ShareService): Sharing coordinator.

    Returns:
        NoteResponse: The note with its updated share set.

    Example:
        >>> shared = await share_note("uuid-123", ShareRequest(email="bob@example.com"), ...)
        >>> shared.shared_with_ids
        ['bob-user-id']
    """
    user_id = get_current_user_id(request)
    note_uuid = parse_note_id(note_id)

    try:
        note = await share_service.share_note(
            db, note_uuid, user_id, share_request.email
        )
    except (NoteError, UserNotFoundError, UserDirectoryError) as e:
        raise to_http_exception(e) from e

    return NoteConverter.entity_to_response(note, user_id)


@router.get(
    path="/notes/{note_id}/shares",
    description="List who a note is shared with. Only the note owner can access this information.",
    response_model=NoteSharesResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": NoteSharesResponse,
            "description": "List of all shares for the specified note.",
        },
        status.HTTP_400_BAD_REQUEST: _INVALID_NOTE_ID,
        status.HTTP_401_UNAUTHORIZED: _UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN: {
            "model": ErrorResponse,
            "description": "User not authorized to view shares for this note.",
        },
        status.HTTP_404_NOT_FOUND: _NOTE_NOT_FOUND,
        status.HTTP_503_SERVICE_UNAVAILABLE: _STORAGE_ERROR,
    },
)
async def get_note_shares(
    note_id: str,
    request: Request,
    db: Session = Depends(get_db),
    share_service: ShareService = Depends(get_share_service),
) -> NoteSharesResponse:
    """Get all shares for a specific note with recipient emails.

    Raises:
        HTTPException: 403 if the caller does not own the note.
        HTTPException: 404 if the note does not exist.
    """
    user_id = get_current_user_id(request)
    note_uuid = parse_note_id(note_id)

    try:
        shares = await share_service.get_note_shares(db, note_uuid, user_id)
    except NoteError as e:
        raise to_http_exception(e) from e

    return NoteConverter.shares_to_response(note_uuid, shares)
