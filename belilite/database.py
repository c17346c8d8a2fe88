"""
BeliLite Backend — Database Engine and Session Management
===========================================================

What:  Async SQLAlchemy engine lifecycle, session dependency, and ORM base.
Why:   Centralizes all database connection logic in one place.
How:   The engine is created once in the application lifespan (not at import)
       and stored on `app.state`; each request gets its own session through
       the `get_db_session` dependency, which commits on success and rolls
       back on error.
Who:   main.py opens/closes the engine; route handlers depend on sessions.

Why SQLite + aiosqlite:
    The application is single-user and single-process. A file database needs
    no server, is created automatically on first run, and serializes writes
    on its own, so no locking is implemented here.
"""

import logging
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by create_all() on boot and by
    Alembic for migrations.
    """
    pass


# ── Engine Lifecycle ──────────────────────────────────────────────────────

def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create the async engine for the SQLite file.

    The parent directory of the file is created when missing so that
    DB_PATH=/data/notes.db works on a fresh volume.
    """
    db_file = database_url.split(":///", 1)[-1]
    if db_file and db_file != ":memory:":
        Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    return create_async_engine(database_url, echo=echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: attributes stay readable after commit, which
    # lets services serialize a note without another round-trip
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_database(engine: AsyncEngine) -> None:
    """
    Create the notes table if it does not exist yet.

    When:  On every boot, before the first request.
    How:   Base.metadata.create_all() is idempotent (CREATE TABLE IF NOT EXISTS).
    """
    # Import models so they register with Base.metadata
    from belilite.models import note  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Notes table ready")


async def dispose_engine(engine: AsyncEngine) -> None:
    """
    What:  Closes all connections held by the engine.
    When:  Called during application shutdown (lifespan handler).
    Why:   Releases the file handle so in-flight writes are not severed.
    """
    await engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────

async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Takes the session factory the lifespan put on app.state
        2. Yields a session to the route handler
        3. On success: commits (a no-op when the service already committed)
        4. On error: rolls back so no partial write survives
        5. Always: closes the session

    Tests can swap the store by overriding this dependency or by pointing
    the app at a temporary DB_PATH.
    """
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
