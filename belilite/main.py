"""
BeliLite Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn imports `belilite.main:app`; tests call create_app(settings).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  /api/notes (CRUD)  /api/summarize  /health         │
    │  /  → static browser client (public/)               │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400  NotFound→404  UpstreamAuth→401     │
    │  UpstreamRateLimit→429  Config/Upstream/DB→500      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Open the SQLite engine and create the notes table if absent
    3. Warn (do not fail) when XAI_API_KEY is missing

    Shutdown:
    1. Dispose the engine so the database file is released cleanly
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from belilite import __version__
from belilite.config import Settings, settings as default_settings
from belilite.database import (
    create_engine,
    create_session_factory,
    dispose_engine,
    init_database,
)
from belilite.exceptions import (
    BeliLiteError,
    ConfigurationError,
    DatabaseError,
    NotFoundError,
    UpstreamAuthError,
    UpstreamError,
    UpstreamRateLimitError,
    ValidationError,
)
from belilite.middleware.logging import RequestLoggingMiddleware
from belilite.middleware.request_id import RequestIDMiddleware, request_id_var
from belilite.routes import health, notes, summarize
from belilite.services.xai_service import XAIService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker / the terminal)
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the store on boot, release it on shutdown.

    The engine is process-scoped state owned by the app (app.state.engine),
    not a module global, so every app instance (and every test) gets its own.
    """
    app_settings: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(app_settings.log_level)
    logger.info("BeliLite starting up (environment=%s)", app_settings.environment)

    engine = create_engine(
        app_settings.database_url,
        echo=app_settings.log_level == "DEBUG",
    )
    await init_database(engine)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Connected to SQLite database: %s", app_settings.db_path)

    if not app_settings.summarizer_configured:
        logger.warning("XAI_API_KEY is not set; POST /api/summarize will return 500")

    logger.info("BeliLite server running at http://%s:%d", app_settings.host, app_settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    await dispose_engine(engine)
    logger.info("Database connection closed.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """
    Build the JSON error body shared by every failure.

    Shape: {"error": <code>, "message": <human text>, "request_id": <id>,
    "details"?: {...}}. Clients of the older Express API that read the human
    text from "error" (e.g. {"error": "Title is required"}) must read
    "message" instead; "error" now carries a stable machine code.
    """
    content: Dict[str, Any] = {
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError, RequestValidationError → 400
        NotFoundError                           → 404
        UpstreamAuthError                       → 401
        UpstreamRateLimitError                  → 429
        UpstreamError                           → 500
        ConfigurationError                      → 500
        DatabaseError                           → 500
        BeliLiteError (base)                    → 500
        Exception (fallback)                    → 500

    Server-side details (upstream messages, SQL errors) are included under
    "details" only when ENVIRONMENT is not "production".
    """
    expose_details = not app_settings.is_production

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), exc.errors())
        return _error_response(
            400,
            "validation_error",
            "Request body or parameters are invalid",
            {"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(UpstreamAuthError)
    async def handle_upstream_auth(request: Request, exc: UpstreamAuthError):
        return _error_response(401, "upstream_unauthorized", exc.message)

    @app.exception_handler(UpstreamRateLimitError)
    async def handle_upstream_rate_limit(request: Request, exc: UpstreamRateLimitError):
        return _error_response(429, "upstream_rate_limited", exc.message)

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        logger.error(
            "[%s] Upstream error: %s | status=%s",
            request_id_var.get(""),
            exc.detail,
            exc.status_code,
        )
        details = {"upstream": exc.detail} if expose_details and exc.detail else None
        return _error_response(500, "upstream_error", exc.message, details)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        logger.error("[%s] Configuration error: %s", request_id_var.get(""), exc.message)
        if expose_details:
            return _error_response(500, "configuration_error", exc.message, exc.context)
        return _error_response(
            500,
            "configuration_error",
            "The server is not configured for this operation.",
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        details = exc.context if expose_details else None
        return _error_response(500, "server_error", exc.message, details)

    @app.exception_handler(BeliLiteError)
    async def handle_app_error(request: Request, exc: BeliLiteError):
        logger.error("[%s] Application error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "server_error", exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        details = {"exception": str(exc)} if expose_details else None
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again.",
            details,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment-loaded
                      singleton. Tests pass their own (temporary DB_PATH,
                      fake API key).
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="BeliLite API",
        description="Simple note-taking API with AI-powered summarization.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.summarizer = XAIService(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app, app_settings)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(summarize.router)
    app.include_router(health.router)

    # Static client last: API routes take precedence over the "/" mount
    static_dir = Path(app_settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning("Static directory %s not found; browser client not served", static_dir)

    return app


# uvicorn expects `belilite.main:app` to be importable
app = create_app()
