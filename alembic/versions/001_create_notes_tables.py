"""Create notes and note_tags tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial schema: owner-scoped notes plus one row per tag per note.
Rollback: downgrade() drops both tables (all notes are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False, comment="Unique identifier"),
        sa.Column("title", sa.String(500), nullable=False, comment="Note title (plain text)"),
        sa.Column("content", sa.Text(), nullable=False, comment="Note body as HTML"),
        sa.Column("owner_id", sa.String(255), nullable=False, comment="Identifier of the owning user"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was last modified (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # Every list query filters by owner and sorts by one of the timestamps
    op.create_index(
        "idx_notes_owner_updated",
        "notes",
        ["owner_id", sa.text("updated_at DESC")],
    )
    op.create_index(
        "idx_notes_owner_created",
        "notes",
        ["owner_id", sa.text("created_at DESC")],
    )

    op.create_table(
        "note_tags",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("note_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("name", sa.String(100), nullable=False),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_note_tags_note", "note_tags", ["note_id"])
    op.create_index("idx_note_tags_name", "note_tags", ["name"])


def downgrade() -> None:
    op.drop_index("idx_note_tags_name", table_name="note_tags")
    op.drop_index("idx_note_tags_note", table_name="note_tags")
    op.drop_table("note_tags")
    op.drop_index("idx_notes_owner_created", table_name="notes")
    op.drop_index("idx_notes_owner_updated", table_name="notes")
    op.drop_table("notes")
