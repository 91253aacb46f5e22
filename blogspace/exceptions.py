"""
BlogSpace — Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions for configuration, input, auth,
       navigation and backend failures.
How:   Each exception carries a user-facing message and an optional context
       dict. The data client raises them; page views turn them into visible
       error state; the HTTP shell maps the ones that escape to status codes.

Exception Hierarchy:
    BlogSpaceError (base)
    ├── ConfigurationError   → 500 (fatal at startup)
    ├── ValidationError      → 400 Bad Request
    ├── AuthenticationError  → 401 Unauthorized
    ├── NotFoundError        → 404 Not Found
    ├── NavigationError      → 409 Conflict (action aimed at an inactive page)
    └── BackendError         → 502 Bad Gateway
"""

from typing import Any, Dict, Optional


class BlogSpaceError(Exception):
    """
    Base exception for all BlogSpace application errors.

    Attributes:
        message:  User-facing error description (safe to show in the UI)
        context:  Additional debug info (logged, never rendered)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(BlogSpaceError):
    """
    Raised when required process configuration is missing or invalid.

    When:  Application startup, before any backend call is made.
    """

    def __init__(
        self,
        message: str = "The application is not configured",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(BlogSpaceError):
    """
    Raised when user input breaks a client-side rule.

    When:  Blank blog title, short sign-up password, saving a new post with
           no target blog, unknown blog selected on the dashboard.
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


class AuthenticationError(BlogSpaceError):
    """
    Raised when the backend auth service rejects a sign-in, sign-up,
    refresh or sign-out, or when an operation needs a signed-in user.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BlogSpaceError):
    """
    Raised when a query that must return exactly one row returns none.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class NavigationError(BlogSpaceError):
    """
    Raised when an action targets a page that is not the active one,
    e.g. saving the editor while the dashboard is shown.
    """

    def __init__(
        self,
        expected_page: str,
        current_page: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"expected_page": expected_page, "current_page": current_page})
        super().__init__(
            message=f"The {expected_page} page is not active (current page: {current_page})",
            context=ctx,
        )
        self.expected_page = expected_page
        self.current_page = current_page


class BackendError(BlogSpaceError):
    """
    Raised when the hosted backend answers with a non-2xx status or cannot
    be reached at all.

    Attributes:
        status_code: HTTP status from the backend (None when unreachable)
        code:        Backend error code when one is supplied (e.g. "23505")
    """

    def __init__(
        self,
        message: str = "The data service is unavailable. Please try again later.",
        status_code: Optional[int] = None,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        if code:
            ctx["code"] = code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code
        self.code = code
