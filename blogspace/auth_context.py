"""
BlogSpace — Auth Context
=========================

What:  Application-wide auth state: the signed-in user, their profile, and a
       loading flag that stays true until the first session check is done.
How:   Constructed explicitly with the DataClient and handed to the router
       and views. `start()` resolves the stored session and subscribes to the
       client's session events; every event updates user/profile and then
       notifies the registered dependents. `close()` undoes the subscription.
Who:   View Router (guard, re-render), Layout (nav links, sign-out), Dashboard
       (owner id), Editor (author id), Profile view.

Stale profiles:
    Each session change bumps a generation counter. A profile response that
    comes back after a newer change is dropped.
"""

import logging
from typing import Awaitable, Callable, List, Optional

from blogspace.data.auth import AuthEvent, Subscription
from blogspace.data.client import DataClient
from blogspace.exceptions import BlogSpaceError
from blogspace.models.records import AuthUser, Profile, Session

logger = logging.getLogger(__name__)

AuthStateListener = Callable[["AuthContext"], Awaitable[None]]


class AuthContext:
    """Session state shared by every view of one application instance."""

    def __init__(self, client: DataClient):
        self._client = client
        self.session: Optional[Session] = None
        self.user: Optional[AuthUser] = None
        self.profile: Optional[Profile] = None
        self.loading = True
        self._listeners: List[AuthStateListener] = []
        self._subscription: Optional[Subscription] = None
        self._generation = 0
        self._started = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def start(self) -> None:
        """
        Resolve the existing session and begin following session changes.

        Safe to call twice; the second call does nothing.
        """
        if self._started:
            return
        self._started = True

        try:
            session = await self._client.auth.get_session()
        except BlogSpaceError as e:
            logger.warning("Could not resolve the stored session: %s", e.message)
            session = None

        await self._apply(session)
        self.loading = False
        self._subscription = self._client.auth.on_auth_state_change(self._on_session_change)
        logger.info(
            "Auth ready: %s",
            f"signed in as {self.user.id}" if self.user else "signed out",
        )
        await self._notify()

    async def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._listeners.clear()
        self._started = False

    def subscribe(self, listener: AuthStateListener) -> Callable[[], None]:
        """Register a dependent; returns a callable that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Operations ────────────────────────────────────────────────────────

    async def sign_in(self, email: str, password: str) -> None:
        """
        Raises:
            AuthenticationError: wrong credentials or unconfirmed account
            BackendError: auth service unreachable
        """
        await self._client.auth.sign_in_with_password(email, password)

    async def sign_up(self, email: str, password: str, display_name: str) -> bool:
        """
        Create an account with `display_name` as user metadata.

        Returns True when the backend signed the new user in right away,
        False when the account still needs email confirmation.
        """
        _, session = await self._client.auth.sign_up(
            email, password, data={"display_name": display_name}
        )
        return session is not None

    async def sign_out(self) -> None:
        """
        Raises:
            AuthenticationError: the backend could not end the session
        """
        await self._client.auth.sign_out()

    async def refresh_profile(self) -> None:
        """Reload the profile of the current user (after a profile edit)."""
        if self.user is None:
            return
        generation = self._generation
        profile = await self._fetch_profile(self.user.id)
        if generation == self._generation:
            self.profile = profile
            await self._notify()

    # ── Internals ─────────────────────────────────────────────────────────

    async def _on_session_change(self, event: AuthEvent, session: Optional[Session]) -> None:
        logger.debug("Auth context handling %s", event.value)
        await self._apply(session)
        await self._notify()

    async def _apply(self, session: Optional[Session]) -> None:
        self._generation += 1
        generation = self._generation

        self.session = session
        self.user = session.user if session else None
        if self.user is None:
            self.profile = None
            return
        if self.profile is not None and self.profile.id == self.user.id:
            # Same user (token refresh): keep the profile
            return

        profile = await self._fetch_profile(self.user.id)
        if generation != self._generation:
            logger.debug("Discarding profile for %s: session changed meanwhile", self.user and self.user.id)
            return
        self.profile = profile

    async def _fetch_profile(self, user_id: str) -> Optional[Profile]:
        try:
            row = await (
                self._client.table("profiles").select("*").eq("id", user_id).maybe_single()
            )
            return Profile.parse(row) if row else None
        except BlogSpaceError as e:
            logger.warning("Could not load profile for %s: %s", user_id, e.message)
            return None

    async def _notify(self) -> None:
        for listener in list(self._listeners):
            await listener(self)
