"""
BlogSpace — Layout
===================

What:  The nav bar wrapped around every page except the editor.
How:   Links depend on the auth context: signed-in users get Home, My Blogs,
       their profile and sign-out; everyone else gets Sign In and Get
       Started. Lives as long as the router, not per page.
"""

import logging
from typing import Optional

from blogspace.exceptions import BlogSpaceError
from blogspace.navigation import HIGHLIGHTED_PAGES, Page
from blogspace.schemas.app_state import LayoutState, NavLink
from blogspace.views.base import ViewContext

logger = logging.getLogger(__name__)


class Layout:
    def __init__(self, ctx: ViewContext):
        self.ctx = ctx
        self.error: Optional[str] = None

    async def sign_out(self) -> bool:
        self.error = None
        try:
            await self.ctx.auth.sign_out()
        except BlogSpaceError as e:
            logger.error("Error signing out: %s", e.message, extra={"context": e.context})
            self.error = e.message
            return False
        await self.ctx.navigate(Page.HOME, None)
        return True

    def render(self, page: Page) -> LayoutState:
        auth = self.ctx.auth
        current = page.value if page in HIGHLIGHTED_PAGES else None

        if auth.user is not None:
            name = (auth.profile.display_name if auth.profile else "") or auth.user.email or "Profile"
            links = [
                NavLink(page=Page.HOME.value, label="Home"),
                NavLink(page=Page.DASHBOARD.value, label="My Blogs"),
                NavLink(page=Page.PROFILE.value, label=name),
            ]
        else:
            name = None
            links = [
                NavLink(page=Page.SIGNIN.value, label="Sign In"),
                NavLink(page=Page.SIGNUP.value, label="Get Started"),
            ]
        for link in links:
            link.active = link.page == current

        return LayoutState(
            signed_in=auth.user is not None,
            display_name=name,
            current_page=current,
            links=links,
            can_sign_out=auth.user is not None,
            error=self.error,
        )
