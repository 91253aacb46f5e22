"""
BlogSpace — Request and Error Schemas
======================================

What:  Bodies accepted by the action routes, plus the error and health
       documents.
How:   FastAPI validates bodies against these models before the handler
       runs. Only shape is checked here; the page views own the input rules
       (blank title, short password) so they surface as view errors.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from blogspace.navigation import Page


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies
# ══════════════════════════════════════════════════════════════════════════


class NavigateRequest(BaseModel):
    page: str = Field(description="Target page; unknown names open the home page")
    blog_id: Optional[str] = None
    post_id: Optional[str] = None


class SignInRequest(BaseModel):
    email: str = Field(default="")
    password: str = Field(default="")


class SignUpRequest(BaseModel):
    email: str = Field(default="")
    password: str = Field(default="")
    display_name: str = Field(default="")


class CreateBlogRequest(BaseModel):
    title: str = Field(default="", max_length=200)
    description: str = Field(default="", max_length=2000)


class EditorChangesRequest(BaseModel):
    """Fields left out (null) keep their current value."""
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """Fields left out (null) keep their current value."""
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Error & Health
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standard error body for every failed request.
    Who:   Built by the exception handlers in main.py.
    """
    error: str = Field(description="Error type (e.g. 'page_not_active')")
    message: str = Field(description="User-facing error message")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Extra debug info")
    request_id: Optional[str] = Field(default=None, description="X-Request-ID of the failed request")


class HealthResponse(BaseModel):
    status: str = Field(description="'healthy' or 'degraded'")
    version: str
    page: Page = Field(description="Page currently shown")
    dependencies: Dict[str, str] = Field(description="Status per dependency")
    uptime_seconds: float
