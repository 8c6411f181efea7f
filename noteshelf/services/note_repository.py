"""
Noteshelf — Note Repository (owner-scoped data access)
========================================================

What:  Translates list filters into SQL and performs create/read/update/delete
       restricted to the owning user.
Why:   Every rule about who may see or change a note lives here, not in the
       route handlers.
How:   A stateless object holding only an AsyncSession. All reads and writes
       go through `_owned_by()`, the single ownership predicate, so no code path
       can forget the owner check.
Who:   Constructed per request by `get_note_repository` (routes/notes.py).

Ownership Model:
    A note is visible only to the user who created it. A lookup that misses
    because the id does not exist and one that misses because the note
    belongs to someone else raise the same NotFoundError with the same
    message, so callers cannot probe for other users' note ids.

Transactions:
    Methods flush but never commit. `get_db_session` commits once the
    request succeeds, or rolls everything back when anything raises.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from sqlalchemy import distinct, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from noteshelf.exceptions import DatabaseError, NotFoundError, ValidationError
from noteshelf.models.note import Note, NoteTag, utcnow
from noteshelf.schemas.note import NoteInput, NoteOut, NoteQuery, TagCount

logger = logging.getLogger(__name__)

# The editor serializes an untouched document as an empty paragraph.
_EMPTY_EDITOR_DOCUMENTS = {"<p></p>", "<p><br></p>"}

_LIKE_ESCAPE = "\\"


def normalize_tags(tags: Optional[Sequence[str]]) -> List[str]:
    """Strip and lowercase tags, dropping blanks and repeats but keeping order."""
    normalized: List[str] = []
    for raw in tags or []:
        tag = raw.strip().lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized


def _escape_like(value: str) -> str:
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_id(note_id) -> Optional[uuid.UUID]:
    if isinstance(note_id, uuid.UUID):
        return note_id
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        return None


class NoteRepository:
    """
    Owner-scoped CRUD and query operations for notes.

    Error Handling Strategy:
        ValidationError and NotFoundError are raised directly. Driver and ORM
        failures (SQLAlchemyError) are logged with their cause and re-raised
        as DatabaseError, whose message is safe to show to the client.
    """

    _SORT_ORDERS = {
        "title": (Note.title.asc(),),
        "createdAt": (Note.created_at.desc(),),
        "updatedAt": (Note.updated_at.desc(),),
    }

    def __init__(self, db: AsyncSession):
        self.db = db

    # ── Ownership ─────────────────────────────────────────────────────────

    @staticmethod
    def _owned_by(owner_id: str, note_id: Optional[uuid.UUID] = None) -> List[ColumnElement]:
        criteria: List[ColumnElement] = [Note.owner_id == owner_id]
        if note_id is not None:
            criteria.append(Note.id == note_id)
        return criteria

    async def _get_owned(self, note_id, owner_id: str) -> Note:
        parsed = _parse_id(note_id)
        if parsed is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))

        result = await self.db.execute(
            select(Note).where(*self._owned_by(owner_id, parsed))
        )
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    # ── Validation ────────────────────────────────────────────────────────

    @staticmethod
    def _validate(data: NoteInput) -> None:
        title = (data.title or "").strip()
        content = (data.content or "").strip()
        if not title or not content or content in _EMPTY_EDITOR_DOCUMENTS:
            raise ValidationError(
                message="Title and content are required",
                field="title" if not title else "content",
            )

    # ── Queries ───────────────────────────────────────────────────────────

    async def list(self, owner_id: str, query: Optional[NoteQuery] = None) -> List[NoteOut]:
        """
        List the owner's notes, optionally searched, tag-filtered and truncated.

        Query plan (default sort, no filters):
            SELECT ... FROM notes WHERE owner_id = :owner ORDER BY updated_at DESC
            → idx_notes_owner_updated

        `search` is a case-insensitive substring match on title, content or
        any tag. Wildcard characters in it match literally.
        """
        query = query or NoteQuery()
        logger.debug(
            "Listing notes for %s (search=%r tag=%r sort=%s limit=%s)",
            owner_id, query.search, query.tag, query.sort, query.limit,
        )

        stmt = select(Note).where(*self._owned_by(owner_id))

        if query.search:
            pattern = f"%{_escape_like(query.search)}%"
            stmt = stmt.where(
                or_(
                    Note.title.ilike(pattern, escape=_LIKE_ESCAPE),
                    Note.content.ilike(pattern, escape=_LIKE_ESCAPE),
                    Note.tag_rows.any(NoteTag.name.ilike(pattern, escape=_LIKE_ESCAPE)),
                )
            )

        if query.tag:
            stmt = stmt.where(Note.tag_rows.any(NoteTag.name == query.tag.strip().lower()))

        # id as final tiebreaker keeps pages stable when timestamps collide
        stmt = stmt.order_by(*self._SORT_ORDERS[query.sort], Note.id)

        if query.limit:
            stmt = stmt.limit(query.limit)

        try:
            result = await self.db.execute(stmt)
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for %s: %s", owner_id, e, exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return [NoteOut.model_validate(note) for note in notes]

    async def get_by_id(self, note_id, owner_id: str) -> NoteOut:
        """
        Return one note if it exists and belongs to `owner_id`.

        Raises:
            NotFoundError: Unknown id, malformed id, or someone else's note
            DatabaseError: Query execution failed
        """
        try:
            note = await self._get_owned(note_id, owner_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, e)
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )
        return NoteOut.model_validate(note)

    async def list_tags(self, owner_id: str) -> List[TagCount]:
        """Distinct tags across the owner's notes, with how many notes use each."""
        stmt = (
            select(NoteTag.name, func.count(distinct(NoteTag.note_id)))
            .join(Note, Note.id == NoteTag.note_id)
            .where(*self._owned_by(owner_id))
            .group_by(NoteTag.name)
            .order_by(NoteTag.name)
        )
        try:
            result = await self.db.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Database error listing tags for %s: %s", owner_id, e)
            raise DatabaseError(
                message="Could not retrieve tags. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [TagCount(name=name, count=count) for name, count in rows]

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create(self, owner_id: str, data: NoteInput) -> NoteOut:
        """
        Persist a new note for `owner_id`.

        Both timestamps come from one clock reading, so a fresh note always
        has created_at == updated_at. Validation runs before anything is
        added to the session; a rejected note leaves no trace.
        """
        self._validate(data)

        now = utcnow()
        note = Note(
            id=uuid.uuid4(),
            title=data.title,
            content=data.content,
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        note.tags = normalize_tags(data.tags)

        try:
            self.db.add(note)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating note for %s: %s", owner_id, e, exc_info=True)
            raise DatabaseError(
                message="Could not save the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Note %s created by %s (%d tags)", note.id, owner_id, len(note.tag_rows))
        return NoteOut.model_validate(note)

    async def update(self, note_id, owner_id: str, data: NoteInput) -> NoteOut:
        """
        Replace title, content and tags of an owned note.

        Order of checks: ValidationError, then NotFoundError. id, owner_id
        and created_at are never touched; updated_at moves strictly forward.
        Concurrent updates are last-write-wins.
        """
        self._validate(data)

        try:
            note = await self._get_owned(note_id, owner_id)

            now = utcnow()
            created_at = _as_utc(note.created_at)
            if now <= created_at:
                now = created_at + timedelta(microseconds=1)

            note.title = data.title
            note.content = data.content
            note.tags = normalize_tags(data.tags)
            note.updated_at = now
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, e, exc_info=True)
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": str(note_id)},
            )

        logger.info("Note %s updated by %s", note.id, owner_id)
        return NoteOut.model_validate(note)

    async def delete(self, note_id, owner_id: str) -> None:
        """Remove an owned note and its tags; NotFoundError if there is none."""
        try:
            note = await self._get_owned(note_id, owner_id)
            await self.db.delete(note)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, e, exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": str(note_id)},
            )

        logger.info("Note %s deleted by %s", note_id, owner_id)
