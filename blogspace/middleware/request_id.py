"""
BlogSpace — Request ID Middleware
==================================

What:  Tags every HTTP request with a short id and echoes it in the
       `X-Request-ID` response header.
How:   A client-supplied `X-Request-ID` is kept; otherwise the first eight
       characters of a UUID4 are used. The id lives in a ContextVar so the
       access log and the error handlers can read it without the request.
When:  Outermost middleware; runs before the access log.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
