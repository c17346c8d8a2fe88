"""
BeliLite Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for each error scenario.
Why:   Services raise these; global handlers in main.py turn them into JSON
       responses with the right status code, so no route needs try/except.
How:   Each exception carries a user-facing message and a context dict.
       The context is logged, and returned to clients only outside production.

Exception Hierarchy:
    BeliLiteError (base)
    ├── ValidationError            → 400 Bad Request
    ├── NotFoundError              → 404 Not Found
    ├── ConfigurationError         → 500 Internal Server Error
    ├── DatabaseError              → 500 Internal Server Error
    └── UpstreamError              → 500 Internal Server Error
        ├── UpstreamAuthError      → 401 Unauthorized
        └── UpstreamRateLimitError → 429 Too Many Requests
"""

from typing import Any, Dict, Optional


class BeliLiteError(Exception):
    """
    Base exception for all BeliLite application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BeliLiteError):
    """
    Raised when client input fails validation.

    When:    Missing note title, empty summarization text, malformed body.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BeliLiteError):
    """
    Raised when a requested resource does not exist.

    When:    GET/PUT/DELETE /api/notes/{id} with an id that has no row.
    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the service layer converts
    None into this exception.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class ConfigurationError(BeliLiteError):
    """
    Raised when a required setting is missing at the moment it is needed.

    When:    POST /api/summarize while XAI_API_KEY is unset.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "The server is not configured for this operation",
        setting: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if setting:
            ctx["setting"] = setting
        super().__init__(message=message, context=ctx)


class DatabaseError(BeliLiteError):
    """
    Raised when a database operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The client sees a generic message; the original error text travels in
    `context` and is only exposed outside production.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(BeliLiteError):
    """
    Raised when the chat-completion API call fails.

    When:    Non-2xx response, malformed response, or transport failure.
    HTTP:    500 Internal Server Error

    Attributes:
        status_code: Upstream HTTP status, None for transport failures
        detail:      Upstream error message (exposed outside production only)
    """

    def __init__(
        self,
        message: str = "Failed to summarize text. Please try again.",
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["upstream_status"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
        self.detail = detail


class UpstreamAuthError(UpstreamError):
    """Upstream rejected our credential. HTTP: 401 Unauthorized."""

    def __init__(
        self,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message="Invalid xAI API key",
            status_code=status_code,
            detail=detail,
            context=context,
        )


class UpstreamRateLimitError(UpstreamError):
    """
    Upstream signalled a rate limit. HTTP: 429 Too Many Requests.

    The caller is told to retry later; this service performs no backoff.
    """

    def __init__(
        self,
        status_code: Optional[int] = None,
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message="xAI API rate limit exceeded. Please try again later.",
            status_code=status_code,
            detail=detail,
            context=context,
        )
