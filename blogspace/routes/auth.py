"""
BlogSpace — Account Routes
===========================

What:  Sign-in, sign-up and sign-out.
How:   Sign-in and sign-up are actions of their pages and need that page to
       be active. Sign-out belongs to the layout and works from any page.
       Rejected credentials show up as the form's `error`, not as a 401.
"""

import logging

from fastapi import APIRouter, Depends

from blogspace.navigation import Page
from blogspace.router import ViewRouter
from blogspace.routes.deps import active_view, get_router
from blogspace.schemas import AppState, ErrorResponse, SignInRequest, SignUpRequest
from blogspace.views import SignInView, SignUpView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

_NOT_ACTIVE = {409: {"description": "The form's page is not active", "model": ErrorResponse}}


@router.post("/sign-in", response_model=AppState, responses=_NOT_ACTIVE, summary="Sign in with email and password")
async def sign_in(
    body: SignInRequest,
    view: SignInView = Depends(active_view(Page.SIGNIN)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.submit(body.email, body.password)
    return app_router.render()


@router.post(
    "/sign-up",
    response_model=AppState,
    responses=_NOT_ACTIVE,
    summary="Create an account",
    description="When the backend requires email confirmation the page stays on sign-up with a notice.",
)
async def sign_up(
    body: SignUpRequest,
    view: SignUpView = Depends(active_view(Page.SIGNUP)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.submit(body.email, body.password, body.display_name)
    return app_router.render()


@router.post("/sign-out", response_model=AppState, summary="Sign out and return home")
async def sign_out(app_router: ViewRouter = Depends(get_router)) -> AppState:
    await app_router.layout.sign_out()
    return app_router.render()
