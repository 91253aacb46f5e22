"""
BlogSpace — Editor Routes
==========================

What:  Field edits, save, and leaving the editor.
How:   PATCH changes fields locally only; nothing reaches the backend until
       POST /api/editor/save.
"""

from fastapi import APIRouter, Depends

from blogspace.navigation import Page
from blogspace.router import ViewRouter
from blogspace.routes.deps import active_view, get_router
from blogspace.schemas import AppState, EditorChangesRequest, ErrorResponse
from blogspace.views import EditorView

router = APIRouter(prefix="/api/editor", tags=["Editor"])

_NOT_ACTIVE = {409: {"description": "The editor is not active", "model": ErrorResponse}}


@router.patch("", response_model=AppState, responses=_NOT_ACTIVE, summary="Change title, content or excerpt")
async def edit_fields(
    body: EditorChangesRequest,
    view: EditorView = Depends(active_view(Page.EDITOR)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    view.edit(title=body.title, content=body.content, excerpt=body.excerpt)
    return app_router.render()


@router.post(
    "/save",
    response_model=AppState,
    responses=_NOT_ACTIVE,
    summary="Save the post",
    description="Inserts a new post on the first save and updates it afterwards.",
)
async def save(
    view: EditorView = Depends(active_view(Page.EDITOR)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.save()
    return app_router.render()


@router.post("/back", response_model=AppState, responses=_NOT_ACTIVE, summary="Return to the dashboard")
async def back(
    view: EditorView = Depends(active_view(Page.EDITOR)),
    app_router: ViewRouter = Depends(get_router),
) -> AppState:
    await view.back()
    return app_router.render()
