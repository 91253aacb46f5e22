"""
BlogSpace — Home Page
======================

What:  Public feed of the most recent published posts across all blogs.
How:   One query on mount: published posts joined with their blog, newest
       publication first, capped at `home_feed_limit`.
"""

import logging
from typing import List

from blogspace.exceptions import NotFoundError
from blogspace.models.records import PostWithBlog
from blogspace.navigation import NavigationData, Page
from blogspace.schemas.app_state import HomeState, PostCard
from blogspace.text import preview
from blogspace.views.base import View, operation

logger = logging.getLogger(__name__)


class HomeView(View):
    page = Page.HOME

    def __init__(self, ctx, data=None):
        super().__init__(ctx, data)
        self.posts: List[PostWithBlog] = []
        self.loading = True

    @operation
    async def load(self) -> None:
        self.loading = True
        rows = await self._call(
            self.client.table("posts")
            .select("*, blog:blogs(*)")
            .eq("published", True)
            .order("published_at", desc=True)
            .limit(self.settings.home_feed_limit)
            .execute(),
            "load feed",
            key="feed",
        )
        self.posts = [PostWithBlog.parse(row) for row in rows]
        self.loading = False
        logger.debug("Home feed loaded with %d posts", len(self.posts))

    @operation
    async def open_post(self, post_id: str) -> None:
        post = next((p for p in self.posts if p.id == post_id), None)
        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        await self.navigate(Page.POST, NavigationData(blog_id=post.blog_id, post_id=post.id))

    def render(self) -> HomeState:
        return HomeState(
            loading=self.loading,
            error=self.error,
            posts=[
                PostCard(
                    post_id=post.id,
                    blog_id=post.blog_id,
                    title=post.title,
                    blog_title=post.blog.title if post.blog else None,
                    preview=preview(post.content, post.excerpt or ""),
                    published_at=post.published_at,
                )
                for post in self.posts
            ],
        )
