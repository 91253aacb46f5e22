"""
BlogSpace — Dashboard Routes
=============================

What:  Blog and post management for the signed-in user.
How:   Every route needs the dashboard to be the active page. Deletes take
       `confirm=true` as the answer to the confirmation prompt; without it
       nothing is deleted.
"""

import logging

from fastapi import APIRouter, Depends, Query

from blogspace.navigation import Page
from blogspace.router import ViewRouter
from blogspace.routes.deps import active_view, get_router
from blogspace.schemas import AppState, CreateBlogRequest, ErrorResponse
from blogspace.views import DashboardView

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])

_NOT_ACTIVE = {409: {"description": "The dashboard is not active", "model": ErrorResponse}}


def _answer(confirm: bool):
    def ask(prompt: str) -> bool:
        logger.debug("Confirmation prompt %r answered %s", prompt, confirm)
        return confirm

    return ask


@router.post("/blogs", response_model=AppState, responses=_NOT_ACTIVE, summary="Create a blog")
async def create_blog(
    body: CreateBlogRequest,
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.create_blog(body.title, body.description)
    return app_router.render()


@router.post(
    "/blogs/{blog_id}/select",
    response_model=AppState,
    responses=_NOT_ACTIVE,
    summary="Select a blog and load its posts",
)
async def select_blog(
    blog_id: str,
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.select_blog(blog_id)
    return app_router.render()


@router.delete(
    "/blogs/{blog_id}",
    response_model=AppState,
    responses=_NOT_ACTIVE,
    summary="Delete a blog and all of its posts",
)
async def delete_blog(
    blog_id: str,
    confirm: bool = Query(default=False, description="Answer to the confirmation prompt"),
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.delete_blog(blog_id, _answer(confirm))
    return app_router.render()


@router.delete("/posts/{post_id}", response_model=AppState, responses=_NOT_ACTIVE, summary="Delete a post")
async def delete_post(
    post_id: str,
    confirm: bool = Query(default=False, description="Answer to the confirmation prompt"),
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.delete_post(post_id, _answer(confirm))
    return app_router.render()


@router.post(
    "/posts/{post_id}/toggle-publish",
    response_model=AppState,
    responses=_NOT_ACTIVE,
    summary="Publish a draft or unpublish a post",
)
async def toggle_publish(
    post_id: str,
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.toggle_publish(post_id)
    return app_router.render()


@router.post("/new-post", response_model=AppState, responses=_NOT_ACTIVE, summary="Write a post in the selected blog")
async def new_post(
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.new_post()
    return app_router.render()


@router.post("/posts/{post_id}/edit", response_model=AppState, responses=_NOT_ACTIVE, summary="Open a post in the editor")
async def edit_post(
    post_id: str,
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.edit_post(post_id)
    return app_router.render()


@router.post("/posts/{post_id}/view", response_model=AppState, responses=_NOT_ACTIVE, summary="Read a published post")
async def view_post(
    post_id: str,
    view: DashboardView = Depends(active_view(Page.DASHBOARD)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.view_post(post_id)
    return app_router.render()
