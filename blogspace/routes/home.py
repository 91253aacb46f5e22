"""BlogSpace — Home Page Routes."""

from fastapi import APIRouter, Depends

from blogspace.navigation import Page
from blogspace.router import ViewRouter
from blogspace.routes.deps import active_view, get_router
from blogspace.schemas import AppState, ErrorResponse
from blogspace.views import HomeView

router = APIRouter(prefix="/api/home", tags=["Home"])


@router.post(
    "/posts/{post_id}/open",
    response_model=AppState,
    responses={409: {"description": "Home is not active", "model": ErrorResponse}},
    summary="Open a post from the feed",
)
async def open_post(
    post_id: str,
    view: HomeView = Depends(active_view(Page.HOME)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.open_post(post_id)
    return app_router.render()
