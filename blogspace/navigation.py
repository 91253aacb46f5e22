"""
BlogSpace — Navigation Surface
===============================

What:  The page identifiers and the navigation payload passed between views.
How:   In-process only. A navigation is a `Page` plus an optional
       `NavigationData`; the payload replaces the previous one, it is never
       merged.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

logger = logging.getLogger(__name__)


class Page(str, Enum):
    HOME = "home"
    SIGNIN = "signin"
    SIGNUP = "signup"
    DASHBOARD = "dashboard"
    EDITOR = "editor"
    POST = "post"
    PROFILE = "profile"


# Pages a signed-out user is redirected away from
PROTECTED_PAGES = frozenset({Page.DASHBOARD, Page.EDITOR, Page.PROFILE})

# Pages the layout highlights in its nav bar
HIGHLIGHTED_PAGES = frozenset({Page.HOME, Page.DASHBOARD, Page.PROFILE})


@dataclass(frozen=True)
class NavigationData:
    blog_id: Optional[str] = None
    post_id: Optional[str] = None


Navigate = Callable[[Union[Page, str], Optional[NavigationData]], Awaitable[None]]


def parse_page(value: Union[Page, str]) -> Page:
    """Coerce a page name; unknown names fall back to the home page."""
    if isinstance(value, Page):
        return value
    try:
        return Page(value)
    except ValueError:
        logger.warning("Unknown page '%s', falling back to home", value)
        return Page.HOME
