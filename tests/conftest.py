"""
BeliLite Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file under tmp_path, so tests never
       share state and never touch ./notes.db. Upstream calls are answered
       by an httpx.MockTransport that records every request.

Fixture Hierarchy (all function-scoped):
    ├── app_settings: Settings pointing at a temp database, fake API key
    ├── db_session: Real AsyncSession on the temp database (tables created)
    ├── mock_db_session: AsyncMock session for store-failure tests
    ├── upstream: Recording stub for the chat-completion endpoint
    ├── app: FastAPI instance built by create_app(app_settings)
    └── test_client: HTTPX AsyncClient running inside the app lifespan
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Keep the developer's environment out of the tests
# Why before app imports: belilite.main builds a module-level app on import
os.environ.pop("XAI_API_KEY", None)
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "development"

from belilite.config import Settings  # noqa: E402
from belilite.database import (  # noqa: E402
    create_engine,
    create_session_factory,
    dispose_engine,
    init_database,
)
from belilite.main import create_app  # noqa: E402
from belilite.services.xai_service import XAIService  # noqa: E402

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "db_path": str(tmp_path / "notes.db"),
        "xai_api_key": "test-key-not-real",
        "xai_api_url": "https://upstream.test/v1/chat/completions",
        "environment": "development",
        "log_level": "WARNING",
        "static_dir": str(PROJECT_ROOT / "public"),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class UpstreamStub:
    """
    Stand-in for the xAI endpoint.

    Usage:
        upstream.respond(200, {"choices": [...]})
        upstream.fail_with(httpx.ConnectError("refused"))
        assert upstream.calls == 1
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._status = 200
        self._json: Optional[Any] = completion("A short summary.")
        self._text: Optional[str] = None
        self._error: Optional[Exception] = None

    @property
    def calls(self) -> int:
        return len(self.requests)

    def respond(self, status: int, json: Optional[Any] = None, text: Optional[str] = None):
        self._status, self._json, self._text, self._error = status, json, text, None

    def fail_with(self, error: Exception):
        self._error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._error is not None:
            raise self._error
        if self._text is not None:
            return httpx.Response(self._status, text=self._text)
        return httpx.Response(self._status, json=self._json)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def completion(content: str) -> Dict[str, Any]:
    """Minimal OpenAI-compatible chat-completion response body."""
    return {
        "id": "cmpl-test",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


# ══════════════════════════════════════════════════════════════════════════
# Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def app_settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def db_session(app_settings):
    """A real session on a fresh temporary database."""
    engine = create_engine(app_settings.database_url)
    await init_database(engine)
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield session
    await dispose_engine(engine)


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = SQLAlchemyError("disk I/O error")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def app(app_settings, upstream):
    application = create_app(app_settings)
    application.state.summarizer = XAIService(app_settings, transport=upstream.transport)
    return application


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    ASGITransport does not send lifespan events, so the lifespan context is
    entered here; that opens (and afterwards closes) the temp database.
    """
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
