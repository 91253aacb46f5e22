"""
BlogSpace — Data Client
========================

What:  The configured handle to the hosted backend: table-scoped queries
       (`client.table("blogs")`) and the auth API (`client.auth`).
How:   One `httpx.AsyncClient` with the project URL as base and the
       configured timeout. Each request carries the anon key and the current
       bearer token; an expired session is refreshed before the request is
       sent. A 401 while signed in ends the session (another device or an
       admin revoked it).
Who:   Built once by the application lifespan; passed explicitly to the Auth
       Context, the View Router and every page view.
When:  Opened at startup, closed by `aclose()` at shutdown.

Failure model:
    Every failure surfaces as a BackendError (or NotFoundError from
    `single()`); there are no retries.
"""

import logging
from typing import Any, List, Optional, Tuple

import httpx

from blogspace.config import Settings
from blogspace.data.auth import AuthClient
from blogspace.data.errors import error_from_response
from blogspace.data.query import TableQuery
from blogspace.data.session_store import FileSessionStore, MemorySessionStore, SessionStore
from blogspace.exceptions import BackendError

logger = logging.getLogger(__name__)

COLLECTIONS = ("profiles", "blogs", "posts")


class DataClient:
    """Backend handle shared by the whole application instance."""

    def __init__(
        self,
        url: str,
        anon_key: str,
        timeout: float = 30.0,
        session_store: Optional[SessionStore] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=self.url,
            timeout=timeout,
            transport=transport,
        )
        self.auth = AuthClient(self._http, anon_key, session_store or MemorySessionStore())

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "DataClient":
        store: SessionStore = (
            FileSessionStore(settings.session_file)
            if settings.session_file
            else MemorySessionStore()
        )
        return cls(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.backend_timeout,
            session_store=store,
            transport=transport,
        )

    def table(self, name: str) -> TableQuery:
        """Start a query against one collection."""
        if name not in COLLECTIONS:
            logger.debug("Querying collection outside the known set: %s", name)
        return TableQuery(self, name)

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[List[Tuple[str, str]]] = None,
        json: Optional[Any] = None,
        prefer: Optional[str] = None,
    ) -> Any:
        """
        Send one request to the REST service and return its decoded body.

        Returns None for empty responses (204, `return=minimal`).

        Raises:
            BackendError: unreachable backend or non-2xx status
        """
        # Refreshes an expired token; may end the session
        await self.auth.get_session()
        signed_in = self.auth.session is not None

        headers = self.auth.headers()
        if prefer:
            headers["Prefer"] = prefer

        try:
            response = await self._http.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("Backend unreachable: %s %s (%s)", method, path, type(e).__name__)
            raise BackendError(context={"method": method, "path": path, "error": type(e).__name__}) from e

        if response.status_code == 401 and signed_in:
            await self.auth.handle_rejected_session()

        if response.is_error:
            error = error_from_response(response)
            logger.warning(
                "Backend error %d on %s %s: %s",
                response.status_code, method, path, error.message,
            )
            raise error

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        """Close pooled connections."""
        await self._http.aclose()
