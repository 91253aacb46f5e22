"""
BlogSpace — Record Models
==========================

What:  Pydantic models for the `profiles`, `blogs` and `posts` collections
       and for the auth session.
How:   Built with `Model.parse(row)` from the JSON the backend returns.
       Unknown columns are ignored so a backend schema change does not break
       reads, and null text columns read as "". A row that still does not
       fit raises BackendError like any other bad backend answer.
       Timestamps arrive as ISO 8601 strings.
Who:   Data client (sessions), Auth Context (profile), every page view.
"""

import time
from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from blogspace.exceptions import BackendError

R = TypeVar("R", bound="_Record")


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def null_as_blank(cls, value: Any, info: ValidationInfo) -> Any:
        """Optional text columns read a null as "", a null `published` as a draft."""
        field = cls.model_fields[info.field_name]
        if value is None and not field.is_required():
            annotation = field.annotation
            if annotation is str:
                return ""
            if annotation is bool:
                return False
        return value

    @classmethod
    def parse(cls: Type[R], row: Any) -> R:
        """Validate one backend row; a malformed row is a BackendError."""
        try:
            return cls.model_validate(row)
        except PydanticValidationError as e:
            raise BackendError(
                f"The data service returned an unreadable {cls.__name__} record",
                context={"record": cls.__name__, "errors": e.error_count()},
            ) from e


# ══════════════════════════════════════════════════════════════════════════
# Collections
# ══════════════════════════════════════════════════════════════════════════


class Profile(_Record):
    """
    One row of `profiles`; one per authenticated user, created by the
    backend when the account is created.
    """
    id: str
    email: str = ""
    display_name: str = ""
    bio: str = ""
    avatar_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Blog(_Record):
    """One row of `blogs`. Deleting a blog cascades to its posts server-side."""
    id: str
    user_id: str
    title: str = ""
    description: str = ""
    slug: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class Post(_Record):
    """
    One row of `posts`.

    `published_at` is set exactly when `published` is true; the client
    upholds that when it builds update payloads.
    """
    id: str
    blog_id: str
    user_id: str
    title: str = ""
    slug: str = ""
    content: str = ""
    excerpt: str = ""
    published: bool = False
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class PostWithBlog(Post):
    """A post joined with its owning blog (`select=*,blog:blogs(*)`)."""
    blog: Optional[Blog] = None


# ══════════════════════════════════════════════════════════════════════════
# Auth
# ══════════════════════════════════════════════════════════════════════════


class AuthUser(_Record):
    """The user object embedded in auth responses."""
    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)


class Session(_Record):
    """
    An authenticated session as issued by the auth service.

    `expires_at` is epoch seconds. Some responses only carry `expires_in`;
    `from_token_response` fills the absolute value in from the local clock.
    """
    access_token: str
    refresh_token: str = ""
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
    user: AuthUser

    @classmethod
    def from_token_response(cls, body: Dict[str, Any]) -> "Session":
        session = cls.parse(body)
        if session.expires_at is None and session.expires_in is not None:
            session.expires_at = int(time.time()) + session.expires_in
        return session

    def is_expired(self, leeway: int = 10) -> bool:
        """True once the access token is within `leeway` seconds of expiry."""
        if self.expires_at is None:
            return False
        return self.expires_at - leeway <= time.time()
