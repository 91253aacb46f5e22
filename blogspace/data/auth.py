"""
BlogSpace — Backend Auth Client
================================

What:  Talks to the hosted auth service (GoTrue dialect under /auth/v1) and
       owns the current session.
How:   Password sign-in and refresh go through `/token`, sign-up through
       `/signup` (display name travels as user metadata), sign-out through
       `/logout`. Every change of session is broadcast to the listeners
       registered with `on_auth_state_change`.
Who:   DataClient (request headers, rejected-token handling) and the Auth
       Context (session lifecycle).

Session Events:
    SIGNED_IN        password sign-in, or sign-up with immediate session
    TOKEN_REFRESHED  expired access token exchanged for a new one
    SIGNED_OUT       explicit sign-out, failed refresh, or a token the
                     backend no longer accepts
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import httpx

from blogspace.data.errors import error_from_response
from blogspace.data.session_store import MemorySessionStore, SessionStore
from blogspace.exceptions import AuthenticationError, BackendError
from blogspace.models.records import AuthUser, Session

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


AuthListener = Callable[[AuthEvent, Optional[Session]], Awaitable[None]]


class Subscription:
    """Handle returned by `on_auth_state_change`; call `unsubscribe()` to stop."""

    def __init__(self, listeners: List[AuthListener], listener: AuthListener):
        self._listeners = listeners
        self._listener = listener

    def unsubscribe(self) -> None:
        if self._listener in self._listeners:
            self._listeners.remove(self._listener)


class AuthClient:
    """
    Session owner for one application instance.

    The session is restored lazily from the store on the first
    `get_session()` call.
    """

    def __init__(self, http: httpx.AsyncClient, anon_key: str, store: Optional[SessionStore] = None):
        self._http = http
        self._anon_key = anon_key
        self._store = store or MemorySessionStore()
        self._session: Optional[Session] = None
        self._restored = False
        self._listeners: List[AuthListener] = []
        self._refresh_lock = asyncio.Lock()

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def headers(self) -> Dict[str, str]:
        """Headers for a data request: anon key plus the caller's bearer token."""
        token = self._session.access_token if self._session else self._anon_key
        return {"apikey": self._anon_key, "Authorization": f"Bearer {token}"}

    # ── Subscriptions ─────────────────────────────────────────────────────

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self._listeners, listener)

    async def _emit(self, event: AuthEvent) -> None:
        logger.info("Auth event: %s", event.value)
        for listener in list(self._listeners):
            await listener(event, self._session)

    # ── Session lifecycle ─────────────────────────────────────────────────

    async def get_session(self) -> Optional[Session]:
        """
        Return the current session, restoring it from the store on first use
        and refreshing it when the access token has expired.

        A failed refresh ends the session (SIGNED_OUT) instead of raising.
        Concurrent callers share one refresh: the backend rotates refresh
        tokens, so a second exchange of the same token would be rejected.
        """
        if not self._restored:
            self._restored = True
            if self._session is None:
                self._session = self._store.load()
                if self._session:
                    logger.info("Restored session for user %s", self._session.user.id)

        if self._session is not None and self._session.is_expired():
            async with self._refresh_lock:
                # Another caller may have refreshed while we waited
                if self._session is not None and self._session.is_expired():
                    try:
                        await self.refresh_session()
                    except (AuthenticationError, BackendError) as e:
                        logger.warning("Session refresh failed, signing out locally: %s", e.message)
                        await self._end_session()
        return self._session

    async def refresh_session(self) -> Session:
        if self._session is None or not self._session.refresh_token:
            raise AuthenticationError("There is no session to refresh")
        body = await self._post(
            "token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": self._session.refresh_token},
        )
        await self._start_session(Session.from_token_response(body), AuthEvent.TOKEN_REFRESHED)
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> Session:
        body = await self._post(
            "token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = Session.from_token_response(body)
        await self._start_session(session, AuthEvent.SIGNED_IN)
        return session

    async def sign_up(
        self,
        email: str,
        password: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Tuple[AuthUser, Optional[Session]]:
        """
        Create an account.

        Returns the new user and, when the backend confirms accounts
        immediately, the session it opened. When email confirmation is
        required there is no session yet.
        """
        body = await self._post(
            "signup",
            json={"email": email, "password": password, "data": data or {}},
        )
        if body.get("access_token"):
            session = Session.from_token_response(body)
            await self._start_session(session, AuthEvent.SIGNED_IN)
            return session.user, session
        user = AuthUser.parse(body.get("user") or body)
        return user, None

    async def sign_out(self) -> None:
        """
        End the session with the backend, then locally.

        A backend that no longer knows the session (401/403/404) still ends
        it locally. Any other failure raises and keeps the session.
        """
        if self._session is None:
            return
        try:
            await self._post("logout", bearer=self._session.access_token)
        except AuthenticationError as e:
            if e.context.get("status_code") not in (401, 403, 404):
                raise
            logger.info("Session already invalid on the backend; clearing locally")
        except BackendError as e:
            raise AuthenticationError(
                "Could not sign out. Please try again.",
                context={"status_code": e.status_code},
            ) from e
        await self._end_session()

    async def handle_rejected_session(self) -> None:
        """The backend refused our bearer token: the session is over."""
        if self._session is None:
            return
        logger.warning("Backend rejected the session token for user %s", self._session.user.id)
        await self._end_session()

    async def health(self) -> Dict[str, Any]:
        """Probe the auth service; raises BackendError when it is unhealthy."""
        try:
            response = await self._http.get("/auth/v1/health", headers={"apikey": self._anon_key})
        except httpx.HTTPError as e:
            raise BackendError(context={"error": type(e).__name__}) from e
        if response.is_error:
            raise error_from_response(response)
        return response.json() if response.content else {}

    # ── Internals ─────────────────────────────────────────────────────────

    async def _start_session(self, session: Session, event: AuthEvent) -> None:
        self._session = session
        self._restored = True
        self._store.save(session)
        await self._emit(event)

    async def _end_session(self) -> None:
        self._session = None
        self._store.clear()
        await self._emit(AuthEvent.SIGNED_OUT)

    async def _post(
        self,
        path: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        bearer: Optional[str] = None,
    ) -> Dict[str, Any]:
        headers = {"apikey": self._anon_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        try:
            response = await self._http.post(
                f"/auth/v1/{path}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error("Auth service unreachable (%s): %s", path, e)
            raise BackendError(context={"path": path, "error": type(e).__name__}) from e

        if response.is_error:
            error = error_from_response(response)
            if response.status_code < 500:
                # 4xx from the auth service is a rejected credential or request
                raise AuthenticationError(error.message, context=error.context)
            raise error

        if not response.content:
            return {}
        return response.json()
