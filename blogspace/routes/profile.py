"""BlogSpace — Profile Routes."""

from fastapi import APIRouter, Depends

from blogspace.navigation import Page
from blogspace.router import ViewRouter
from blogspace.routes.deps import active_view, get_router
from blogspace.schemas import AppState, ErrorResponse, ProfileUpdateRequest
from blogspace.views import ProfileView

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.patch(
    "",
    response_model=AppState,
    responses={409: {"description": "The profile page is not active", "model": ErrorResponse}},
    summary="Update display name, bio or avatar",
)
async def update_profile(
    body: ProfileUpdateRequest,
    view: ProfileView = Depends(active_view(Page.PROFILE)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.update(display_name=body.display_name, bio=body.bio, avatar_url=body.avatar_url)
    return app_router.render()
