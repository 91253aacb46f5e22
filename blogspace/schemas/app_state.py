"""
BlogSpace — Application State Documents
========================================

What:  Pydantic models for what the application currently shows: the page,
       its navigation payload, the layout (nav bar) and the page view state.
How:   Page views build their state model in `render()`; the router wraps it
       in `AppState`. The HTTP shell returns `AppState` from every action
       route, so a client always receives the re-rendered state.
Who:   Router, page views, every route under /api.

View state union:
    Discriminated by `page`; the editor is the only page without a layout,
    so `AppState.layout` is null while editing.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class NavigationPayload(BaseModel):
    blog_id: Optional[str] = Field(default=None, description="Blog the page works on")
    post_id: Optional[str] = Field(default=None, description="Post the page works on")


# ══════════════════════════════════════════════════════════════════════════
# Layout
# ══════════════════════════════════════════════════════════════════════════


class NavLink(BaseModel):
    page: str = Field(description="Target page of the link")
    label: str = Field(description="Link text")
    active: bool = Field(default=False, description="True for the highlighted page")


class LayoutState(BaseModel):
    """
    What:  The persistent nav bar around every page except the editor.
    Who:   Rendered by `Layout.render()`.
    """
    signed_in: bool
    display_name: Optional[str] = None
    current_page: Optional[str] = Field(
        default=None,
        description="Highlighted page; only home, dashboard or profile",
    )
    links: List[NavLink] = Field(default_factory=list)
    can_sign_out: bool = False
    error: Optional[str] = Field(default=None, description="Last sign-out failure")


# ══════════════════════════════════════════════════════════════════════════
# Page Views
# ══════════════════════════════════════════════════════════════════════════


class _ViewState(BaseModel):
    loading: bool = Field(default=False, description="A load is in flight")
    error: Optional[str] = Field(default=None, description="Last failed operation, user-facing")


class PostCard(BaseModel):
    post_id: str
    blog_id: str
    title: str
    blog_title: Optional[str] = None
    preview: str = Field(description="Excerpt, or a tag-free prefix of the content")
    published_at: Optional[datetime] = None


class HomeState(_ViewState):
    page: Literal["home"] = "home"
    posts: List[PostCard] = Field(default_factory=list)


class BlogSummary(BaseModel):
    id: str
    title: str
    description: str = ""
    slug: str = ""
    selected: bool = False


class PostSummary(BaseModel):
    id: str
    title: str
    excerpt: str = ""
    published: bool = False
    status: Literal["Published", "Draft"] = "Draft"
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class DashboardState(_ViewState):
    page: Literal["dashboard"] = "dashboard"
    blogs: List[BlogSummary] = Field(default_factory=list)
    selected_blog_id: Optional[str] = None
    posts: List[PostSummary] = Field(default_factory=list)


class EditorState(_ViewState):
    page: Literal["editor"] = "editor"
    blog_id: Optional[str] = None
    post_id: Optional[str] = Field(default=None, description="Null until the post is first saved")
    title: str = ""
    content: str = ""
    excerpt: str = ""
    saving: bool = False
    last_saved: Optional[datetime] = None


class AuthorInfo(BaseModel):
    display_name: str
    bio: str
    initial: str = Field(description="First letter of the display name, for the avatar badge")


class PostDetailState(_ViewState):
    page: Literal["post"] = "post"
    not_found: bool = False
    message: Optional[str] = Field(default=None, description="Shown instead of the post when not found")
    title: str = ""
    blog_title: Optional[str] = None
    excerpt: str = ""
    content: str = ""
    published_at: Optional[datetime] = None
    published_on: Optional[str] = Field(default=None, description='Formatted like "January 5, 2025"')
    author: Optional[AuthorInfo] = None


class SignInState(_ViewState):
    page: Literal["signin"] = "signin"
    email: str = ""


class SignUpState(_ViewState):
    page: Literal["signup"] = "signup"
    email: str = ""
    display_name: str = ""
    notice: Optional[str] = Field(default=None, description="Email confirmation hint")


class ProfileState(_ViewState):
    page: Literal["profile"] = "profile"
    email: str = ""
    display_name: str = ""
    bio: str = ""
    avatar_url: str = ""
    updated_at: Optional[datetime] = None


ViewState = Annotated[
    Union[
        HomeState,
        DashboardState,
        EditorState,
        PostDetailState,
        SignInState,
        SignUpState,
        ProfileState,
    ],
    Field(discriminator="page"),
]


class AppState(BaseModel):
    """
    What:  Everything the application currently displays.
    When:  Returned by GET /api/app and by every action route.
    """
    page: str = Field(description="Active page")
    navigation: NavigationPayload = Field(default_factory=NavigationPayload)
    loading: bool = Field(default=False, description="True until the first session check is done")
    layout: Optional[LayoutState] = None
    view: Optional[ViewState] = None
