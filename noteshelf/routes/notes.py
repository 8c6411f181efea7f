"""
Noteshelf — Notes Route Handlers
==================================

What:  HTTP surface for notes: list, create, read, update, delete, tag summary.
Why:   Maps verbs to NoteRepository calls and shapes the JSON envelopes.
How:   Each handler depends on `require_owner` (listed first, so a missing
       session is reported before any body or query validation) and on a
       request-scoped NoteRepository. Errors are raised, never returned; the
       global handlers in main.py turn them into 400/401/404/500 responses.

Caching:
    Responses are user-specific and mutable, so every one is marked
    `Cache-Control: no-store`.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from noteshelf.auth import require_owner
from noteshelf.database import get_db_session
from noteshelf.exceptions import ValidationError
from noteshelf.schemas.note import (
    ErrorResponse,
    MessageResponse,
    NoteEnvelope,
    NoteInput,
    NoteListResponse,
    NoteQuery,
    TagListResponse,
)
from noteshelf.services.note_repository import NoteRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])

_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "No valid session", "model": ErrorResponse},
    404: {"description": "Note not found", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def _responses(*codes: int) -> dict:
    return {code: _ERRORS[code] for code in codes}


def get_note_repository(db: AsyncSession = Depends(get_db_session)) -> NoteRepository:
    return NoteRepository(db)


def get_note_query(
    search: Optional[str] = Query(default=None, description="Case-insensitive text in title, content or tags"),
    tag: Optional[str] = Query(default=None, description="Only notes carrying this tag"),
    sort: str = Query(default="updatedAt", description="title, createdAt or updatedAt"),
    limit: Optional[int] = Query(default=None, description="Maximum number of notes to return"),
) -> NoteQuery:
    try:
        return NoteQuery(search=search, tag=tag, sort=sort, limit=limit)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else None
        raise ValidationError(message=error["msg"], field=field)


@router.get(
    "/notes",
    response_model=NoteListResponse,
    responses=_responses(400, 401, 500),
    summary="List the caller's notes",
)
async def list_notes(
    response: Response,
    owner_id: str = Depends(require_owner),
    query: NoteQuery = Depends(get_note_query),
    repo: NoteRepository = Depends(get_note_repository),
) -> NoteListResponse:
    notes = await repo.list(owner_id, query)
    response.headers["Cache-Control"] = "no-store"
    return NoteListResponse(notes=notes)


@router.get(
    "/notes/tags",
    response_model=TagListResponse,
    responses=_responses(401, 500),
    summary="List the caller's tags with usage counts",
)
async def list_tags(
    response: Response,
    owner_id: str = Depends(require_owner),
    repo: NoteRepository = Depends(get_note_repository),
) -> TagListResponse:
    tags = await repo.list_tags(owner_id)
    response.headers["Cache-Control"] = "no-store"
    return TagListResponse(tags=tags)


@router.post(
    "/notes",
    response_model=NoteEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses=_responses(400, 401, 500),
    summary="Create a note",
)
async def create_note(
    owner_id: str = Depends(require_owner),
    body: Optional[NoteInput] = None,
    repo: NoteRepository = Depends(get_note_repository),
) -> NoteEnvelope:
    note = await repo.create(owner_id, body or NoteInput())
    return NoteEnvelope(note=note)


@router.get(
    "/notes/{note_id}",
    response_model=NoteEnvelope,
    responses=_responses(401, 404, 500),
    summary="Get one note",
)
async def get_note(
    note_id: str,
    response: Response,
    owner_id: str = Depends(require_owner),
    repo: NoteRepository = Depends(get_note_repository),
) -> NoteEnvelope:
    note = await repo.get_by_id(note_id, owner_id)
    response.headers["Cache-Control"] = "no-store"
    return NoteEnvelope(note=note)


@router.put(
    "/notes/{note_id}",
    response_model=NoteEnvelope,
    responses=_responses(400, 401, 404, 500),
    summary="Replace a note's title, content and tags",
)
async def update_note(
    note_id: str,
    owner_id: str = Depends(require_owner),
    body: Optional[NoteInput] = None,
    repo: NoteRepository = Depends(get_note_repository),
) -> NoteEnvelope:
    note = await repo.update(note_id, owner_id, body or NoteInput())
    return NoteEnvelope(note=note)


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses=_responses(401, 404, 500),
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    owner_id: str = Depends(require_owner),
    repo: NoteRepository = Depends(get_note_repository),
) -> MessageResponse:
    await repo.delete(note_id, owner_id)
    return MessageResponse(message="Note deleted successfully")
