"""
BlogSpace — Post Reader
========================

What:  Public page showing one published post with its blog and author.
How:   Three sequential lookups: the post (published only), its blog, and
       the profile of the blog's owner. A missing post or blog shows the
       not-found state instead of an error.
"""

import logging
from typing import Optional

from blogspace.models.records import Blog, Post, Profile
from blogspace.navigation import Page
from blogspace.schemas.app_state import AuthorInfo, PostDetailState
from blogspace.views.base import View, operation

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "This post may have been removed or is not published yet."
DEFAULT_BIO = "Writer and blogger"


def format_publish_date(value) -> str:
    """e.g. "January 5, 2025"."""
    return f"{value:%B} {value.day}, {value.year}"


class PostDetailView(View):
    page = Page.POST

    def __init__(self, ctx, data=None):
        super().__init__(ctx, data)
        self.post: Optional[Post] = None
        self.blog: Optional[Blog] = None
        self.author: Optional[Profile] = None
        self.not_found = False
        self.loading = True

    @operation
    async def load(self) -> None:
        self.loading = True
        if not self.data.post_id:
            self._mark_not_found()
            return

        post_row = await self._call(
            self.client.table("posts")
            .select("*")
            .eq("id", self.data.post_id)
            .eq("published", True)
            .maybe_single(),
            "load post",
            key="post",
        )
        if post_row is None:
            self._mark_not_found()
            return
        post = Post.parse(post_row)

        blog_row = await self._call(
            self.client.table("blogs").select("*").eq("id", post.blog_id).maybe_single(),
            "load blog",
            key="blog",
        )
        if blog_row is None:
            self._mark_not_found()
            return
        blog = Blog.parse(blog_row)

        author_row = await self._call(
            self.client.table("profiles").select("*").eq("id", blog.user_id).maybe_single(),
            "load author",
            key="author",
        )

        self.post, self.blog = post, blog
        self.author = Profile.parse(author_row) if author_row else None
        self.loading = False

    def _mark_not_found(self) -> None:
        logger.info("Post %s is not available", self.data.post_id)
        self.not_found = True
        self.loading = False

    def render(self) -> PostDetailState:
        if self.not_found:
            return PostDetailState(not_found=True, message=NOT_FOUND_MESSAGE, error=self.error)
        if self.post is None:
            return PostDetailState(loading=self.loading, error=self.error)

        author = None
        if self.author is not None:
            name = self.author.display_name
            author = AuthorInfo(
                display_name=name,
                bio=self.author.bio or DEFAULT_BIO,
                initial=name[:1].upper(),
            )
        published_at = self.post.published_at
        return PostDetailState(
            error=self.error,
            title=self.post.title,
            blog_title=self.blog.title if self.blog else None,
            excerpt=self.post.excerpt or "",
            content=self.post.content,
            published_at=published_at,
            published_on=format_publish_date(published_at) if published_at else None,
            author=author,
        )
