"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  Creates the `notes` table: integer AUTOINCREMENT id, title, content,
       created_at, updated_at, plus an index on updated_at.

Rollback: downgrade() drops the table entirely (all notes are lost).
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
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        # Stored as naive UTC; belilite.models.note.UTCDateTime re-attaches tzinfo
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        # AUTOINCREMENT: deleted ids are never reused
        sqlite_autoincrement=True,
    )

    op.create_index("idx_notes_updated_at", "notes", ["updated_at"])


def downgrade() -> None:
    op.drop_index("idx_notes_updated_at", table_name="notes")
    op.drop_table("notes")
