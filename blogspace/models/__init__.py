"""
BlogSpace — Backend Records
============================

Typed views of the rows the hosted backend returns. The backend owns the
schema; these models only parse what comes back.
"""

from blogspace.models.records import (
    AuthUser,
    Blog,
    Post,
    PostWithBlog,
    Profile,
    Session,
)

__all__ = ["AuthUser", "Blog", "Post", "PostWithBlog", "Profile", "Session"]
