"""
BeliLite Backend — Application Package Initializer
==================================================

What: A single-user note-taking service with an AI summarization helper.
Who:  Imported by uvicorn (`belilite.main:app`), Alembic, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, upstream calls
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy on SQLite
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
