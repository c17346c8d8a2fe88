"""
BeliLite Backend — Notes Route Handlers
=========================================

What:  CRUD endpoints for notes under /api/notes.
How:   Extracts path parameters and JSON bodies, delegates to NoteService,
       returns JSON. Status codes for failures come from the global
       exception handlers in main.py.

Route Inventory:
    GET    /api/notes         → 200 [Note]
    GET    /api/notes/{id}    → 200 Note | 404
    POST   /api/notes         → 200 Note | 400
    PUT    /api/notes/{id}    → 200 Note | 400 | 404
    DELETE /api/notes/{id}    → 200 {message} | 404
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from belilite.database import get_db_session
from belilite.schemas.note import (
    ErrorResponse,
    MessageResponse,
    NotePayload,
    NoteResponse,
)
from belilite.services.note_service import note_service

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: {"description": "Store error", "model": ErrorResponse}},
    summary="List all notes, most recently updated first",
)
async def list_notes(db: AsyncSession = Depends(get_db_session)) -> List[NoteResponse]:
    return await note_service.list_notes(db)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.post(
    "/notes",
    response_model=NoteResponse,
    responses={
        400: {"description": "Title is required", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Create a note",
)
async def create_note(
    payload: NotePayload,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, title=payload.title, content=payload.content)


@router.put(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Title is required", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Replace a note's title and content",
)
async def update_note(
    note_id: int,
    payload: NotePayload,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(
        db, note_id, title=payload.title, content=payload.content
    )


@router.delete(
    "/notes/{note_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Store error", "model": ErrorResponse},
    },
    summary="Delete a note permanently",
)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await note_service.delete_note(db, note_id)
