"""BlogSpace — HTTP middleware (request ids, access log)."""

from blogspace.middleware.logging import RequestLoggingMiddleware
from blogspace.middleware.request_id import RequestIDMiddleware, request_id_var

__all__ = ["RequestIDMiddleware", "RequestLoggingMiddleware", "request_id_var"]
