"""BlogSpace — Pydantic documents for the HTTP shell."""

from blogspace.schemas.app_state import (
    AppState,
    AuthorInfo,
    BlogSummary,
    DashboardState,
    EditorState,
    HomeState,
    LayoutState,
    NavigationPayload,
    NavLink,
    PostCard,
    PostDetailState,
    PostSummary,
    ProfileState,
    SignInState,
    SignUpState,
)
from blogspace.schemas.requests import (
    CreateBlogRequest,
    EditorChangesRequest,
    ErrorResponse,
    HealthResponse,
    NavigateRequest,
    ProfileUpdateRequest,
    SignInRequest,
    SignUpRequest,
)

__all__ = [
    "AppState",
    "AuthorInfo",
    "BlogSummary",
    "CreateBlogRequest",
    "DashboardState",
    "EditorChangesRequest",
    "EditorState",
    "ErrorResponse",
    "HealthResponse",
    "HomeState",
    "LayoutState",
    "NavigateRequest",
    "NavigationPayload",
    "NavLink",
    "PostCard",
    "PostDetailState",
    "PostSummary",
    "ProfileState",
    "ProfileUpdateRequest",
    "SignInRequest",
    "SignInState",
    "SignUpRequest",
    "SignUpState",
]
