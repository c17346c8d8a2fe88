"""
BeliLite Backend — HTTP API Tests
===================================

What:  End-to-end tests through the FastAPI app (routing, JSON bodies,
       status codes, error format) with a temp database and a stub upstream.
How:   HTTPX AsyncClient + ASGITransport inside the app lifespan.
"""

from datetime import datetime
from pathlib import Path

import httpx
import pytest
from sqlalchemy.exc import SQLAlchemyError

from belilite.database import get_db_session
from belilite.main import create_app
from belilite.services.xai_service import XAIService
from conftest import completion, make_settings


def parse_ts(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


class TestNotesApi:

    @pytest.mark.asyncio
    async def test_groceries_scenario(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "Groceries", "content": "milk, eggs"}
        )
        assert response.status_code == 200
        created = response.json()
        assert created["id"] == 1
        assert created["title"] == "Groceries"
        assert created["content"] == "milk, eggs"
        assert set(created) == {"id", "title", "content", "created_at", "updated_at"}

        response = await test_client.put(
            "/api/notes/1", json={"title": "Groceries v2", "content": "milk"}
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "Groceries v2"
        assert updated["content"] == "milk"
        assert updated["created_at"] == created["created_at"]
        assert parse_ts(updated["updated_at"]) > parse_ts(created["updated_at"])

        response = await test_client.delete("/api/notes/1")
        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully"}

        response = await test_client.get("/api/notes/1")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert response.json()["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_create_without_title_is_rejected(self, test_client):
        response = await test_client.post("/api/notes", json={"content": "no title"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "Title is required"

        response = await test_client.get("/api/notes")
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_error_body_separates_code_from_message(self, test_client):
        response = await test_client.delete("/api/notes/5", headers={"X-Request-ID": "req00001"})

        assert response.json() == {
            "error": "not_found",
            "message": "Note not found",
            "request_id": "req00001",
        }

    @pytest.mark.asyncio
    async def test_create_with_empty_title_is_rejected(self, test_client):
        response = await test_client.post("/api/notes", json={"title": "", "content": "x"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_after_create_round_trips_through_store(self, test_client):
        created = (await test_client.post("/api/notes", json={"title": "Round trip"})).json()

        response = await test_client.get(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        fetched = response.json()
        assert fetched == created
        assert fetched["content"] == ""
        assert fetched["created_at"] == fetched["updated_at"]

    @pytest.mark.asyncio
    async def test_list_orders_by_updated_at_desc(self, test_client):
        first = (await test_client.post("/api/notes", json={"title": "first"})).json()
        second = (await test_client.post("/api/notes", json={"title": "second"})).json()

        listed = (await test_client.get("/api/notes")).json()
        assert [n["id"] for n in listed] == [second["id"], first["id"]]

        await test_client.put(f"/api/notes/{first['id']}", json={"title": "first again"})

        listed = (await test_client.get("/api/notes")).json()
        assert [n["id"] for n in listed] == [first["id"], second["id"]]

    @pytest.mark.asyncio
    async def test_update_missing_note_is_404(self, test_client):
        response = await test_client.put("/api/notes/99", json={"title": "ghost"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_without_title_is_400(self, test_client):
        created = (await test_client.post("/api/notes", json={"title": "t"})).json()

        response = await test_client.put(f"/api/notes/{created['id']}", json={"content": "c"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_missing_note_is_404(self, test_client):
        response = await test_client.delete("/api/notes/12345")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_id_beyond_sqlite_integer_is_404(self, test_client):
        huge = "99999999999999999999"

        response = await test_client.get(f"/api/notes/{huge}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

        response = await test_client.put(f"/api/notes/{huge}", json={"title": "ghost"})
        assert response.status_code == 404

        response = await test_client.delete(f"/api/notes/{huge}")
        assert response.status_code == 404

        response = await test_client.get(f"/api/notes/-{huge}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_non_integer_id_is_400(self, test_client):
        response = await test_client.get("/api/notes/abc")
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_malformed_json_body_is_400(self, test_client):
        response = await test_client.post(
            "/api/notes",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_responses_carry_request_id(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

        response = await test_client.get("/api/notes/77", headers={"X-Request-ID": "def67890"})
        assert response.json()["request_id"] == "def67890"


class TestStoreErrors:

    @staticmethod
    def _broken_session():
        class BrokenSession:
            async def execute(self, *args, **kwargs):
                raise SQLAlchemyError("disk I/O error")

            async def rollback(self):
                pass

        async def override():
            yield BrokenSession()

        return override

    @pytest.mark.asyncio
    async def test_store_error_is_500_with_detail_in_development(self, app, test_client):
        app.dependency_overrides[get_db_session] = self._broken_session()

        response = await test_client.get("/api/notes")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert body["details"]["original_error"] == "disk I/O error"

    @pytest.mark.asyncio
    async def test_store_error_hides_detail_in_production(self, tmp_path):
        app = create_app(make_settings(tmp_path, environment="production"))
        app.dependency_overrides[get_db_session] = self._broken_session()

        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/api/notes")

        assert response.status_code == 500
        assert "details" not in response.json()


class TestSummarizeApi:

    @pytest.mark.asyncio
    async def test_summarize_success(self, test_client, upstream):
        upstream.respond(200, completion(" Milk and eggs are needed. "))

        response = await test_client.post("/api/summarize", json={"text": "buy milk and eggs"})

        assert response.status_code == 200
        assert response.json() == {"summary": "Milk and eggs are needed."}
        assert upstream.calls == 1

    @pytest.mark.asyncio
    async def test_blank_text_is_400_without_network(self, test_client, upstream):
        response = await test_client.post("/api/summarize", json={"text": "  "})

        assert response.status_code == 400
        assert response.json()["message"] == "Text is required for summarization"
        assert upstream.calls == 0

    @pytest.mark.asyncio
    async def test_missing_text_is_400(self, test_client, upstream):
        response = await test_client.post("/api/summarize", json={})
        assert response.status_code == 400
        assert upstream.calls == 0

    @pytest.mark.asyncio
    async def test_missing_key_is_500_without_network(self, tmp_path, upstream):
        app_settings = make_settings(tmp_path, xai_api_key=None)
        app = create_app(app_settings)
        app.state.summarizer = XAIService(app_settings, transport=upstream.transport)

        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post("/api/summarize", json={"text": "hello"})

        assert response.status_code == 500
        assert response.json()["error"] == "configuration_error"
        assert upstream.calls == 0

    @pytest.mark.asyncio
    async def test_upstream_unauthorized_is_401(self, test_client, upstream):
        upstream.respond(401, {"error": {"message": "Incorrect API key provided"}})

        response = await test_client.post("/api/summarize", json={"text": "hello"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid xAI API key"

    @pytest.mark.asyncio
    async def test_upstream_rate_limit_is_429(self, test_client, upstream):
        upstream.respond(429, {"error": "slow down"})

        response = await test_client.post("/api/summarize", json={"text": "hello"})

        assert response.status_code == 429
        assert "try again later" in response.json()["message"]
        assert upstream.calls == 1

    @pytest.mark.asyncio
    async def test_upstream_failure_is_500_with_detail(self, test_client, upstream):
        upstream.respond(500, {"error": {"message": "model overloaded"}})

        response = await test_client.post("/api/summarize", json={"text": "hello"})

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Failed to summarize text. Please try again."
        assert body["details"] == {"upstream": "model overloaded"}

    @pytest.mark.asyncio
    async def test_upstream_detail_hidden_in_production(self, tmp_path, upstream):
        app_settings = make_settings(tmp_path, environment="production")
        app = create_app(app_settings)
        app.state.summarizer = XAIService(app_settings, transport=upstream.transport)
        upstream.respond(502, {"error": {"message": "bad gateway"}})

        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.post("/api/summarize", json={"text": "hello"})

        assert response.status_code == 500
        assert "details" not in response.json()


class TestHealthAndClient:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["summarizer"] == "configured"

    @pytest.mark.asyncio
    async def test_index_page_is_served(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "note-form" in response.text

    @pytest.mark.asyncio
    async def test_database_file_created_on_boot(self, app, app_settings, test_client):
        assert Path(app_settings.db_path).exists()
