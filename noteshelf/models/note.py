"""
Noteshelf — Note SQLAlchemy Models
====================================

What:  ORM models for the `notes` and `note_tags` tables.
Why:   Maps notes and their ordered tag lists to rows; Alembic reads this
       metadata for migrations.
Who:   Used by NoteRepository for every CRUD and query operation.

Table Design Rationale:
    - UUID primary key: Non-sequential, so note ids cannot be enumerated
    - owner_id: Opaque identifier from the identity provider, indexed because
      every query is scoped by it
    - Tags live in their own table (one row per tag per note, with a position)
      so that tag filtering and tag search run in SQL on every backend while
      the user-chosen order is preserved
    - created_at / updated_at: UTC with timezone, set from the same clock
      reading on insert
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from noteshelf.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A rich-text note owned by exactly one user.

    Lifecycle:
        1. Created on POST with owner_id = session identity
        2. title/content/tags/updated_at replaced on PUT (id and owner never change)
        3. Deleted on DELETE, together with its tag rows

    Query Patterns:
        - List: WHERE owner_id = :owner [AND search/tag] ORDER BY updated_at DESC
          → idx_notes_owner_updated
        - Point lookup: WHERE id = :id AND owner_id = :owner → primary key
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier",
    )

    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Note title (plain text)",
    )

    # HTML produced by the rich-text editor; stored verbatim.
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note body as HTML",
    )

    owner_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Identifier of the owning user",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was last modified (UTC)",
    )

    # selectin: tags are always needed when a note is serialized, and async
    # sessions cannot lazy-load on attribute access.
    tag_rows: Mapped[List["NoteTag"]] = relationship(
        back_populates="note",
        order_by="NoteTag.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_notes_owner_updated", "owner_id", updated_at.desc()),
        Index("idx_notes_owner_created", "owner_id", created_at.desc()),
    )

    @property
    def tags(self) -> List[str]:
        return [row.name for row in self.tag_rows]

    @tags.setter
    def tags(self, names: List[str]) -> None:
        self.tag_rows = [NoteTag(position=i, name=name) for i, name in enumerate(names)]

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, owner_id='{self.owner_id}', "
            f"updated_at='{self.updated_at}')>"
        )


class NoteTag(Base):
    """One tag on one note. `position` keeps the order the user entered."""

    __tablename__ = "note_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    note_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
    )

    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Always lowercase; normalized by the repository before insert.
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    note: Mapped[Note] = relationship(back_populates="tag_rows")

    __table_args__ = (
        Index("idx_note_tags_note", "note_id"),
        Index("idx_note_tags_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<NoteTag(note_id={self.note_id}, name='{self.name}')>"
