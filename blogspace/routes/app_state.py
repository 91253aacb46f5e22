"""
BlogSpace — Application State & Navigation Routes
==================================================

What:  GET /api/app returns what the application shows right now;
       POST /api/navigate moves to another page.
"""

from fastapi import APIRouter, Depends

from blogspace.navigation import NavigationData
from blogspace.router import ViewRouter
from blogspace.routes.deps import get_router
from blogspace.schemas import AppState, NavigateRequest

router = APIRouter(prefix="/api", tags=["Application"])


@router.get(
    "/app",
    response_model=AppState,
    summary="Current application state",
    description=(
        "The active page, its navigation payload, the layout and the view state. "
        "`loading` stays true until the stored session has been checked."
    ),
)
async def get_app_state(app_router: ViewRouter = Depends(get_router)) -> AppState:
    return app_router.render()


@router.post(
    "/navigate",
    response_model=AppState,
    summary="Navigate to a page",
    description=(
        "Replaces the navigation payload with the given ids. Signed-out users are sent "
        "to sign-in when they target a protected page; unknown pages open home. "
        "Ignored while the session check is still running."
    ),
)
async def navigate(
    body: NavigateRequest,
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await app_router.navigate(body.page, NavigationData(blog_id=body.blog_id, post_id=body.post_id))
    return app_router.render()
