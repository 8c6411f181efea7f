"""
Noteshelf — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the JSON contract of the notes API.
Why:   Automatic serialization and OpenAPI documentation, decoupled from the
       SQLAlchemy models (the tag table, for one, never leaks into the API).
How:   Responses use camelCase keys (`ownerId`, `createdAt`, `updatedAt`),
       the shape the editor client consumes.

Design Decision:
    Request bodies declare every field optional. Missing or blank fields are
    a business-rule failure (400) raised by the repository, not a schema
    failure; this keeps one source of truth for the "title and content are
    required" rule whether the caller is HTTP or Python.
"""

import uuid
from datetime import datetime, timezone
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteInput(CamelModel):
    """
    Body of POST /api/notes and PUT /api/notes/{id}.

    `tags` defaults to an empty list; normalization (lowercase, dedupe)
    happens in the repository.
    """
    title: Optional[str] = Field(
        default=None, max_length=500, description="Note title (required, max 500 chars)"
    )
    content: Optional[str] = Field(default=None, description="Note body as HTML (required)")
    tags: Optional[List[Annotated[str, Field(max_length=100)]]] = Field(
        default=None, description="Tags, in display order (max 100 chars each)"
    )


class NoteQuery(BaseModel):
    """
    Validated query parameters for listing notes.

    sort:
        title      → title ascending
        createdAt  → newest created first
        updatedAt  → most recently edited first (default)

    search and tag:
        A whitespace-only value counts as absent, same as an empty one,
        so `?search=%20` lists every note rather than matching spaces.
    """
    search: Optional[str] = Field(default=None, description="Case-insensitive substring")
    tag: Optional[str] = Field(default=None, description="Only notes carrying this tag")
    sort: str = Field(default="updatedAt", description="title, createdAt or updatedAt")
    limit: Optional[int] = Field(
        default=None, ge=1, le=1000, description="Maximum number of notes (max 1000)"
    )

    @field_validator("sort")
    @classmethod
    def validate_sort(cls, v: str) -> str:
        valid = ("title", "createdAt", "updatedAt")
        if v not in valid:
            raise ValueError(f"Invalid sort '{v}'. Must be one of: {', '.join(valid)}")
        return v

    @field_validator("search", "tag")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        # `?search=` from an empty search box means "no filter"
        if v is None or not v.strip():
            return None
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteOut(CamelModel):
    """Full representation of a note as returned by every endpoint."""
    id: uuid.UUID
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; everything is stored as UTC.
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class NoteEnvelope(BaseModel):
    note: NoteOut


class NoteListResponse(BaseModel):
    notes: List[NoteOut]


class MessageResponse(BaseModel):
    message: str


class TagCount(BaseModel):
    name: str
    count: int = Field(description="Number of the caller's notes carrying this tag")


class TagListResponse(BaseModel):
    tags: List[TagCount]


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Note not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy or unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
