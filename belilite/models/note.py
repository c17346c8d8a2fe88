"""
BeliLite Backend — Note SQLAlchemy Model
==========================================

What:  ORM model representing the `notes` table in SQLite.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - Integer primary key with AUTOINCREMENT: ids of deleted notes are never
      handed out again within the same database file
    - title: required, no length limit
    - content: optional text, stored as '' when absent
    - created_at / updated_at: UTC with microsecond resolution

    Index on updated_at:
        The list endpoint always orders by updated_at DESC (SQLite scans it backwards).
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from belilite.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime stored as naive UTC.

    SQLite has no timezone type; values go in as UTC and come back with
    tzinfo=UTC attached so the API layer never sees naive datetimes.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return value.replace(tzinfo=timezone.utc)


class Note(Base):
    """
    A titled text record.

    Lifecycle:
        1. Created by NoteService.create_note (created_at == updated_at)
        2. Mutated in place by update_note (title, content, updated_at)
        3. Permanently removed by delete_note
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=True, default="")

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        Index("idx_notes_updated_at", "updated_at"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', updated_at='{self.updated_at}')>"
