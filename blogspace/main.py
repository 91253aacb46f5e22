"""
BlogSpace — Application Factory
================================

What:  Builds the FastAPI shell around one BlogSpace client instance.
How:   `create_app()` registers middleware, exception handlers and routes.
       The lifespan validates configuration, builds the DataClient, the
       AuthContext and the ViewRouter, starts them and stores them on
       `app.state`; shutdown closes them in reverse order.
Who:   `uvicorn blogspace.main:app`, or `python -m blogspace`.

Application Layout:
    Middleware:  RequestID → access log → CORS → GZip
    Routes:      /api/app, /api/navigate, /api/auth/*, /api/home/*,
                 /api/dashboard/*, /api/editor*, /api/profile, /health
    Errors:      ValidationError→400  AuthenticationError→401
                 NotFoundError→404    NavigationError→409
                 BackendError→502     anything else→500

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate SUPABASE_URL / SUPABASE_ANON_KEY (startup aborts when missing)
    3. Build client, auth context and router; resolve the stored session
    4. Mount the home page
    Shutdown:
    1. Unmount the active view, drop auth subscriptions
    2. Close the HTTP connection pool
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from blogspace import __version__
from blogspace.auth_context import AuthContext
from blogspace.config import Settings, settings as default_settings
from blogspace.data.client import DataClient
from blogspace.exceptions import (
    AuthenticationError,
    BackendError,
    BlogSpaceError,
    ConfigurationError,
    NavigationError,
    NotFoundError,
    ValidationError,
)
from blogspace.middleware.logging import RequestLoggingMiddleware
from blogspace.middleware.request_id import RequestIDMiddleware, request_id_var
from blogspace.router import ViewRouter
from blogspace.routes import app_state, auth, dashboard, editor, health, home, profile

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Configure process-wide logging once, before anything logs.

    Format: 2025-01-05T12:00:00 [INFO] blogspace.router: Navigated to home
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("BlogSpace %s starting up...", __version__)

    try:
        settings.validate_required()
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e.message)
        logger.error("Fix the configuration and restart.")
        raise

    client = DataClient.from_settings(settings, transport=app.state.transport)
    auth_context = AuthContext(client)
    view_router = ViewRouter(client, auth_context, settings)
    app.state.client = client
    app.state.auth = auth_context
    app.state.router = view_router

    # Router first, so it sees the end of the initial session check
    await view_router.start()
    await auth_context.start()

    logger.info("Backend: %s", settings.supabase_url)
    logger.info("Shell ready at http://%s:%d (docs at /docs)", settings.host, settings.port)
    logger.info("=" * 60)
    try:
        yield
    finally:
        logger.info("BlogSpace shutting down...")
        await view_router.close()
        await auth_context.close()
        await client.aclose()
        logger.info("Shutdown complete.")


def _error_response(status_code: int, error: str, exc: BlogSpaceError, details: Optional[Dict[str, Any]] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": exc.message,
            "details": details,
            "request_id": request_id_var.get(""),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map BlogSpace exceptions that escape a route to status codes.

    Failed page operations do not get here: they are part of the view state.
    What remains is mostly NavigationError (action for an inactive page).
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc, exc.context)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, "authentication_error", exc)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc)

    @app.exception_handler(NavigationError)
    async def handle_navigation_error(request: Request, exc: NavigationError):
        logger.info("[%s] %s", request_id_var.get(""), exc.message)
        return _error_response(409, "page_not_active", exc, exc.context)

    @app.exception_handler(BackendError)
    async def handle_backend_error(request: Request, exc: BackendError):
        logger.error("[%s] Backend error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(502, "backend_error", exc)

    @app.exception_handler(BlogSpaceError)
    async def handle_blogspace_error(request: Request, exc: BlogSpaceError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error_response(500, "server_error", exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Assemble the shell.

    `transport` replaces the network transport of the backend client
    (an `httpx.MockTransport` in tests).
    """
    settings = settings or default_settings
    app = FastAPI(
        title="BlogSpace",
        description="Local shell for the BlogSpace client: pages, navigation and actions as JSON.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.transport = transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(app_state.router)
    app.include_router(auth.router)
    app.include_router(home.router)
    app.include_router(dashboard.router)
    app.include_router(editor.router)
    app.include_router(profile.router)
    app.include_router(health.router)

    return app


app = create_app()
