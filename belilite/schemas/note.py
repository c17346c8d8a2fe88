"""
BeliLite Backend — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the API contract between browser and backend.
Why:   Automatic parsing, serialization, and OpenAPI doc generation.

Design Decision:
    Schemas are separate from SQLAlchemy models so storage column types never
    leak into the HTTP layer. `serialize_note()` is the one place where a Note
    row becomes its wire representation.

    Request fields are Optional on purpose: a missing title must surface as
    the application's own 400 "Title is required" (raised by NoteService),
    not as a schema error.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from belilite.models.note import Note


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NotePayload(BaseModel):
    """Body of POST /api/notes and PUT /api/notes/{id}."""
    title: Optional[str] = Field(default=None, description="Note title (required, non-empty)")
    content: Optional[str] = Field(default=None, description="Note body; defaults to ''")


class SummarizeRequest(BaseModel):
    """Body of POST /api/summarize."""
    text: Optional[str] = Field(default=None, description="Text to summarize")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    What:  Full representation of a note: {id, title, content, created_at, updated_at}.
    Who:   Returned by every notes endpoint except DELETE.
    """
    id: int = Field(description="Store-assigned note identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note body")
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Acknowledgment body, e.g. {"message": "Note deleted successfully"}."""
    message: str


class SummarizeResponse(BaseModel):
    summary: str = Field(description="2-3 sentence summary from the upstream model")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Title is required",
            "details": {"field": "title"},
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    summarizer: str = Field(description="Summarization credential: configured, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")


# ══════════════════════════════════════════════════════════════════════════
# Serialization
# ══════════════════════════════════════════════════════════════════════════


def serialize_note(note: Note) -> NoteResponse:
    """Map a Note row to its wire representation."""
    return NoteResponse(
        id=note.id,
        title=note.title,
        content=note.content or "",
        created_at=note.created_at,
        updated_at=note.updated_at,
    )
