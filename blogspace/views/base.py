"""
BlogSpace — Page View Base
===========================

What:  Shared lifecycle for page views: mount, unmount, request bookkeeping
       and visible error state.
How:   Every backend call of a view goes through `_call()`, which takes a
       ticket from the view's RequestTracker before awaiting and checks it
       afterwards. Unmounting bumps the tracker's epoch, so nothing that
       comes back later can touch the state of a view that is gone. Keyed
       calls (e.g. "posts") additionally drop every response but the one
       for the latest request with that key.
Who:   Subclassed by every page view; the router mounts and unmounts them.

Operations:
    Public view actions are wrapped with `@operation`. The wrapper clears
    the previous error, turns a BlogSpaceError into `view.error` plus a
    WARNING log line, and returns True/False instead of raising. A stale
    response ends the operation quietly (False, DEBUG log).
"""

import functools
import itertools
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from pydantic import BaseModel

from blogspace.auth_context import AuthContext
from blogspace.config import Settings
from blogspace.data.client import DataClient
from blogspace.exceptions import AuthenticationError, BlogSpaceError
from blogspace.models.records import AuthUser
from blogspace.navigation import Navigate, NavigationData, Page

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Answers a yes/no prompt shown before destructive actions
Confirm = Callable[[str], bool]


@dataclass
class ViewContext:
    """Collaborators handed to every view by the router."""
    client: DataClient
    auth: AuthContext
    navigate: Navigate
    settings: Settings


# ══════════════════════════════════════════════════════════════════════════
# Request bookkeeping
# ══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Ticket:
    epoch: int
    key: str
    seq: int


class RequestTracker:
    """
    Decides whether a response may still be applied.

    A ticket is current while the tracker's epoch is unchanged and no newer
    ticket was issued for the same key.
    """

    def __init__(self):
        self._epoch = 0
        self._counter = itertools.count(1)
        self._latest: Dict[str, int] = {}

    def begin(self, key: Optional[str] = None) -> Ticket:
        seq = next(self._counter)
        # Unkeyed requests never compete with each other
        key = key or f"#{seq}"
        self._latest[key] = seq
        return Ticket(self._epoch, key, seq)

    def is_current(self, ticket: Ticket) -> bool:
        return ticket.epoch == self._epoch and self._latest.get(ticket.key) == ticket.seq

    def cancel_all(self) -> None:
        self._epoch += 1
        self._latest.clear()


class RequestAborted(Exception):
    """The response of a view request was stale, or its failure already reported."""


def operation(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[bool]]:
    """Wrap a view action so failures become visible state instead of exceptions."""

    @functools.wraps(func)
    async def wrapper(self: "View", *args: Any, **kwargs: Any) -> bool:
        if not self.mounted:
            logger.debug("Ignoring %s on unmounted %s view", func.__name__, self.page.value)
            return False
        self.error = None
        try:
            result = await func(self, *args, **kwargs)
        except RequestAborted:
            return False
        except BlogSpaceError as e:
            self._fail(func.__name__, e)
            return False
        return result is not False

    return wrapper


# ══════════════════════════════════════════════════════════════════════════
# View
# ══════════════════════════════════════════════════════════════════════════


class View:
    """Base class for page views; one instance per visit to a page."""

    page: Page

    def __init__(self, ctx: ViewContext, data: Optional[NavigationData] = None):
        self.ctx = ctx
        self.data = data or NavigationData()
        self.loading = False
        self.error: Optional[str] = None
        self.mounted = False
        self._requests = RequestTracker()

    @property
    def client(self) -> DataClient:
        return self.ctx.client

    @property
    def auth(self) -> AuthContext:
        return self.ctx.auth

    @property
    def settings(self) -> Settings:
        return self.ctx.settings

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def mount(self) -> None:
        self.mounted = True
        logger.debug("Mounted %s view", self.page.value)
        await self.load()

    def unmount(self) -> None:
        self.mounted = False
        self._requests.cancel_all()
        logger.debug("Unmounted %s view", self.page.value)

    async def load(self) -> None:
        """Initial data load; pages without remote data keep the default."""

    async def on_auth_change(self) -> None:
        """Called by the router after the signed-in user changed."""

    def render(self) -> BaseModel:
        raise NotImplementedError

    # ── Helpers ───────────────────────────────────────────────────────────

    async def navigate(self, page: Page, data: Optional[NavigationData] = None) -> None:
        await self.ctx.navigate(page, data)

    def _require_user(self) -> AuthUser:
        user = self.auth.user
        if user is None:
            raise AuthenticationError("You need to sign in first")
        return user

    async def _call(self, awaitable: Awaitable[T], action: str, key: Optional[str] = None) -> T:
        """
        Await one backend request on behalf of this view.

        Raises:
            RequestAborted: the view was unmounted, a newer request with the
                same key was issued, or the request failed (the failure is
                recorded on the view first, unless it is stale as well)
        """
        ticket = self._requests.begin(key)
        try:
            result = await awaitable
        except BlogSpaceError as e:
            if self._requests.is_current(ticket):
                self._fail(action, e)
            else:
                logger.debug("Ignoring failed stale request '%s' on %s", action, self.page.value)
            raise RequestAborted(action) from e

        if not self._requests.is_current(ticket):
            logger.debug("Discarding stale response for '%s' on %s", action, self.page.value)
            raise RequestAborted(action)
        return result

    def _fail(self, action: str, error: BlogSpaceError) -> None:
        self.error = error.message
        self.loading = False
        logger.warning(
            "%s failed on %s view: %s",
            action, self.page.value, error.message,
            extra={"context": error.context},
        )
