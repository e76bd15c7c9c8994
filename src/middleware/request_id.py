"""Request ID tracing middleware — adds X-Request-ID to every response."""
from __future__ import annotations

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Read by logging_config.RequestIDFilter so AI failures can be traced per request
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

_MAX_LEN = 128


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to every request/response.

    A client-sent X-Request-ID is honored (truncated to 128 chars); otherwise a
    UUID4 is generated. The ID is reset once the response is produced.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        rid = (request.headers.get("x-request-id") or str(uuid.uuid4()))[:_MAX_LEN]
        token = request_id_var.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = rid
        return response
