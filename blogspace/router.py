"""
BlogSpace — View Router
========================

What:  Owns the active page, its navigation payload and the mounted view.
How:   `navigate()` is the only way to change pages. It does nothing while
       the auth context is still loading, sends signed-out users who target
       a protected page to sign-in before touching any state, replaces the
       payload, unmounts the old view and mounts the new one.
Who:   Built by the application lifespan; the HTTP routes read `render()`
       and dispatch actions to `view`.

Auth changes:
    The router subscribes to the auth context. When auth finishes loading
    the initial page is mounted; when the user signs out on a protected
    page the router redirects to sign-in; otherwise the active view is told
    the user changed.
"""

import logging
from typing import Callable, Dict, Optional, Tuple, Type, Union

from blogspace.auth_context import AuthContext
from blogspace.config import Settings
from blogspace.data.client import DataClient
from blogspace.navigation import PROTECTED_PAGES, NavigationData, Page, parse_page
from blogspace.schemas.app_state import AppState, NavigationPayload
from blogspace.views import (
    DashboardView,
    EditorView,
    HomeView,
    Layout,
    PostDetailView,
    ProfileView,
    SignInView,
    SignUpView,
    View,
    ViewContext,
)

logger = logging.getLogger(__name__)

VIEWS: Dict[Page, Type[View]] = {
    Page.HOME: HomeView,
    Page.SIGNIN: SignInView,
    Page.SIGNUP: SignUpView,
    Page.DASHBOARD: DashboardView,
    Page.EDITOR: EditorView,
    Page.POST: PostDetailView,
    Page.PROFILE: ProfileView,
}


class ViewRouter:
    """Navigation state machine of one application instance."""

    def __init__(self, client: DataClient, auth: AuthContext, settings: Settings):
        self.auth = auth
        self.page = Page.HOME
        self.view: Optional[View] = None
        self._data = NavigationData()
        self.context = ViewContext(client=client, auth=auth, navigate=self.navigate, settings=settings)
        self.layout = Layout(self.context)
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def data(self) -> NavigationData:
        """Payload of the active page; a mounted view may have moved it on."""
        if self.view is not None:
            return self.view.data
        return self._data

    @data.setter
    def data(self, value: NavigationData) -> None:
        self._data = value

    async def start(self) -> None:
        """Follow auth changes; mounts the initial page once auth is ready."""
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.subscribe(self._on_auth_change)
        if not self.auth.loading and self.view is None:
            await self.navigate(self.page, self.data)

    async def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self.view is not None:
            self.view.unmount()
            self.view = None

    # ── Navigation ────────────────────────────────────────────────────────

    def resolve(self, page: Page, data: NavigationData) -> Tuple[Page, NavigationData]:
        """Apply the protected-page guard to a navigation target."""
        if page in PROTECTED_PAGES and self.auth.user is None:
            return Page.SIGNIN, NavigationData()
        return page, data

    async def navigate(
        self,
        page: Union[Page, str],
        data: Optional[NavigationData] = None,
    ) -> None:
        target = parse_page(page)
        if self.auth.loading:
            logger.debug("Ignoring navigation to %s while auth is loading", target.value)
            return

        resolved, payload = self.resolve(target, data or NavigationData())
        if resolved is not target:
            logger.info("Redirecting signed-out user from %s to %s", target.value, resolved.value)

        previous = self.view
        self.page, self.data = resolved, payload
        if previous is not None:
            previous.unmount()

        view = VIEWS[resolved](self.context, payload)
        self.view = view
        logger.info("Navigated to %s", resolved.value)
        await view.mount()

    async def _on_auth_change(self, auth: AuthContext) -> None:
        if auth.loading:
            return
        if self.view is None:
            await self.navigate(self.page, self.data)
        elif auth.user is None and self.page in PROTECTED_PAGES:
            await self.navigate(Page.SIGNIN)
        else:
            await self.view.on_auth_change()

    # ── Rendering ─────────────────────────────────────────────────────────

    def render(self) -> AppState:
        navigation = NavigationPayload(blog_id=self.data.blog_id, post_id=self.data.post_id)
        if self.auth.loading or self.view is None:
            return AppState(page=self.page.value, navigation=navigation, loading=True)

        # The editor is full-screen: no layout around it
        layout = None if self.page is Page.EDITOR else self.layout.render(self.page)
        return AppState(
            page=self.page.value,
            navigation=navigation,
            layout=layout,
            view=self.view.render(),
        )
