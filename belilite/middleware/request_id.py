"""
BeliLite Backend — Request ID Middleware
==========================================

What:  Assigns a short correlation ID to each request and echoes it back.
Why:   Error responses carry the ID, and the access log prints it, so a
       failure seen in the browser can be matched to its log lines.
How:   Uses the client's X-Request-ID header when present, otherwise an
       8-char UUID prefix; stored in a ContextVar and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on the same loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)

        response.headers["X-Request-ID"] = rid
        return response
