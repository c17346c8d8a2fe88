"""
BeliLite Backend — Note Service (Business Logic)
==================================================

What:  Create / read / update / delete operations over the notes table.
Why:   Keeps the one business rule (a note must have a title) and the
       store-error translation out of the route handlers.
Who:   Called by the notes route handlers with a per-request session.

Design Decision:
    NoteService is stateless: it receives the database session for each
    call. Each write is committed inside the call, so a successful return
    means the row is durable and a failure leaves prior state untouched.
    Concurrent updates to the same note are last-write-wins.
"""

import logging
from datetime import timedelta
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from belilite.exceptions import DatabaseError, NotFoundError, ValidationError
from belilite.models.note import Note, utcnow
from belilite.schemas.note import MessageResponse, NoteResponse, serialize_note

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value; no row can hold an id outside it
SQLITE_MIN_ID = -(2**63)
SQLITE_MAX_ID = 2**63 - 1


def _require_title(title: Optional[str]) -> str:
    if not title:
        raise ValidationError(message="Title is required", field="title")
    return title


class NoteService:
    """
    Business logic layer for note operations.

    Error Handling Strategy:
        - Missing title → ValidationError, raised before the store is touched
        - Missing row → NotFoundError
        - Any SQLAlchemyError → rollback, then DatabaseError (original message
          kept in context for logs and non-production responses)
    """

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        All notes, most recently touched first.

        Query plan:
            SELECT * FROM notes ORDER BY updated_at DESC, id DESC
        """
        try:
            result = await db.execute(
                select(Note).order_by(desc(Note.updated_at), desc(Note.id))
            )
            notes = result.scalars().all()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "list notes", e)

        return [serialize_note(note) for note in notes]

    async def get_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: no note with this id (→ 404)
            DatabaseError: query execution failed (→ 500)
        """
        note = await self._load(db, note_id)
        return serialize_note(note)

    async def create_note(
        self,
        db: AsyncSession,
        title: Optional[str],
        content: Optional[str] = None,
    ) -> NoteResponse:
        """
        Insert a new note and return it with its assigned id.

        Both timestamps are set to the same instant, so a fresh note always
        has created_at == updated_at.
        """
        title = _require_title(title)
        now = utcnow()
        note = Note(title=title, content=content or "", created_at=now, updated_at=now)

        try:
            db.add(note)
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "create note", e)

        logger.info("Note %d created", note.id)
        return serialize_note(note)

    async def update_note(
        self,
        db: AsyncSession,
        note_id: int,
        title: Optional[str],
        content: Optional[str] = None,
    ) -> NoteResponse:
        """
        Overwrite title and content of an existing note and refresh updated_at.

        Validation runs before the lookup: an update without a title is a 400
        even when the id does not exist.
        """
        title = _require_title(title)
        note = await self._load(db, note_id)

        now = utcnow()
        # Keep updated_at strictly ahead of created_at even on a coarse clock
        if now <= note.created_at:
            now = note.created_at + timedelta(microseconds=1)

        note.title = title
        note.content = content or ""
        note.updated_at = now

        try:
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "update note", e, note_id=note_id)

        logger.info("Note %d updated", note_id)
        return serialize_note(note)

    async def delete_note(self, db: AsyncSession, note_id: int) -> MessageResponse:
        """Permanently remove a note."""
        note = await self._load(db, note_id)

        try:
            await db.delete(note)
            await db.commit()
        except SQLAlchemyError as e:
            raise await self._store_error(db, "delete note", e, note_id=note_id)

        logger.info("Note %d deleted", note_id)
        return MessageResponse(message="Note deleted successfully")

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, note_id: int) -> Note:
        if not SQLITE_MIN_ID <= note_id <= SQLITE_MAX_ID:
            raise NotFoundError(resource="Note", resource_id=note_id)

        try:
            note = await db.get(Note, note_id)
        except SQLAlchemyError as e:
            raise await self._store_error(db, "fetch note", e, note_id=note_id)

        if note is None:
            raise NotFoundError(resource="Note", resource_id=note_id)
        return note

    async def _store_error(
        self,
        db: AsyncSession,
        operation: str,
        error: SQLAlchemyError,
        note_id: Optional[int] = None,
    ) -> DatabaseError:
        """Roll back and build the DatabaseError the caller should raise."""
        logger.error("Database error during %s: %s", operation, str(error), exc_info=True)
        try:
            await db.rollback()
        except SQLAlchemyError:
            logger.warning("Rollback after failed %s also failed", operation)

        context = {"operation": operation, "original_error": str(error)}
        if note_id is not None:
            context["note_id"] = note_id
        return DatabaseError(context=context)


# ── Singleton Instance ────────────────────────────────────────────────────
# Why singleton: NoteService is stateless; the session is passed per call
note_service = NoteService()
