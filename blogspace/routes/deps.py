"""
BlogSpace — Route Dependencies
===============================

What:  FastAPI dependencies that hand route handlers the application
       instance built by the lifespan.
How:   The router lives on `app.state.router`. `active_view(page)` yields
       the mounted view only when `page` is the one shown; an action aimed
       at any other page is refused with NavigationError (409).
"""

from typing import Callable

from fastapi import Depends, Request

from blogspace.exceptions import NavigationError
from blogspace.navigation import Page
from blogspace.router import ViewRouter
from blogspace.views.base import View


def get_router(request: Request) -> ViewRouter:
    return request.app.state.router


def active_view(page: Page) -> Callable[..., View]:
    def dependency(router: ViewRouter = Depends(get_router)) -> View:
        if router.view is None or router.page is not page:
            raise NavigationError(expected_page=page.value, current_page=router.page.value)
        return router.view

    return dependency
