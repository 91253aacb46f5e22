"""
BlogSpace — Access Log Middleware
==================================

What:  One log line per user action: method, path, status, duration and
       request id.
How:   Logged on the `blogspace.access` logger at a level picked from the
       status (5xx ERROR, 4xx WARNING, otherwise INFO). Health probes are
       not logged. Request bodies carry passwords and are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from blogspace.middleware.request_id import request_id_var

logger = logging.getLogger("blogspace.access")

SKIPPED_PATHS = frozenset({"/health"})


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path in SKIPPED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        rid = request_id_var.get("")
        status = response.status_code
        logger.log(
            level_for_status(status),
            "%s %s %d %.1fms [%s]",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response
