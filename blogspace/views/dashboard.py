"""
BlogSpace — Dashboard
======================

What:  The signed-in user's blogs and the posts of the selected blog, with
       create/delete for blogs and delete/publish for posts.
How:   Blogs load on mount and whenever the signed-in user changes; the
       first blog is selected when nothing is. Selecting a blog loads its
       posts under the "posts" request key, so only the latest selection's
       posts are ever applied.
Who:   Reached from the layout ("My Blogs") and after sign-in.

Local state after writes:
    Create prepends the returned blog and selects it. Deletes remove the
    record locally once the backend confirmed; deleting a blog always
    re-selects the first remaining one. Publish toggles replace the local
    post with the row the backend returned.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from blogspace.exceptions import NotFoundError, ValidationError
from blogspace.models.records import Blog, Post
from blogspace.navigation import NavigationData, Page
from blogspace.schemas.app_state import BlogSummary, DashboardState, PostSummary
from blogspace.text import slugify
from blogspace.views.base import Confirm, View, operation

logger = logging.getLogger(__name__)

DELETE_BLOG_PROMPT = "Are you sure? This will delete all posts in this blog."
DELETE_POST_PROMPT = "Are you sure you want to delete this post?"


class DashboardView(View):
    page = Page.DASHBOARD

    def __init__(self, ctx, data=None):
        super().__init__(ctx, data)
        self.blogs: List[Blog] = []
        self.posts: List[Post] = []
        self.selected_blog_id: Optional[str] = None
        self.loading = True
        self._owner_id: Optional[str] = None

    @property
    def selected_blog(self) -> Optional[Blog]:
        return next((b for b in self.blogs if b.id == self.selected_blog_id), None)

    # ── Loading ───────────────────────────────────────────────────────────

    async def load(self) -> None:
        await self.load_blogs()

    async def on_auth_change(self) -> None:
        user = self.auth.user
        if user is None or user.id == self._owner_id:
            return
        # Another account: nothing of the previous owner may stay visible
        self.blogs, self.posts, self.selected_blog_id = [], [], None
        await self.load_blogs()

    @operation
    async def load_blogs(self) -> None:
        user = self._require_user()
        self._owner_id = user.id
        self.loading = True
        rows = await self._call(
            self.client.table("blogs")
            .select("*")
            .eq("user_id", user.id)
            .order("created_at", desc=True)
            .execute(),
            "load blogs",
            key="blogs",
        )
        self.blogs = [Blog.parse(row) for row in rows]
        self.loading = False

        if self.selected_blog is None:
            self.selected_blog_id = None
            if self.blogs:
                await self._select(self.blogs[0].id)

    @operation
    async def select_blog(self, blog_id: str) -> None:
        if not any(b.id == blog_id for b in self.blogs):
            raise ValidationError("That blog is not one of yours", field="blog_id")
        await self._select(blog_id)

    async def _select(self, blog_id: str) -> None:
        self.selected_blog_id = blog_id
        self.posts = []
        rows = await self._call(
            self.client.table("posts")
            .select("*")
            .eq("blog_id", blog_id)
            .order("created_at", desc=True)
            .execute(),
            "load posts",
            key="posts",
        )
        self.posts = [Post.parse(row) for row in rows]

    # ── Blogs ─────────────────────────────────────────────────────────────

    @operation
    async def create_blog(self, title: str, description: str = "") -> None:
        user = self._require_user()
        if not title.strip():
            raise ValidationError("Blog title is required", field="title")

        row = await self._call(
            self.client.table("blogs")
            .insert({
                "user_id": user.id,
                "title": title,
                "description": description,
                "slug": slugify(title),
            })
            .single(),
            "create blog",
        )
        blog = Blog.parse(row)
        self.blogs.insert(0, blog)
        logger.info("Created blog %s (%s)", blog.id, blog.slug)
        await self._select(blog.id)

    @operation
    async def delete_blog(self, blog_id: str, confirm: Confirm) -> bool:
        if not confirm(DELETE_BLOG_PROMPT):
            logger.debug("Deletion of blog %s not confirmed", blog_id)
            return False

        await self._call(
            self.client.table("blogs").delete().eq("id", blog_id).execute(),
            "delete blog",
            key=f"delete-blog:{blog_id}",
        )
        self.blogs = [b for b in self.blogs if b.id != blog_id]
        logger.info("Deleted blog %s", blog_id)

        self.posts = []
        if self.blogs:
            await self._select(self.blogs[0].id)
        else:
            self.selected_blog_id = None
        return True

    # ── Posts ─────────────────────────────────────────────────────────────

    @operation
    async def delete_post(self, post_id: str, confirm: Confirm) -> bool:
        if not confirm(DELETE_POST_PROMPT):
            logger.debug("Deletion of post %s not confirmed", post_id)
            return False

        await self._call(
            self.client.table("posts").delete().eq("id", post_id).execute(),
            "delete post",
            key=f"delete-post:{post_id}",
        )
        self.posts = [p for p in self.posts if p.id != post_id]
        logger.info("Deleted post %s", post_id)
        return True

    @operation
    async def toggle_publish(self, post_id: str) -> None:
        post = self._find_post(post_id)
        published = not post.published
        changes = {
            "published": published,
            "published_at": datetime.now(timezone.utc).isoformat() if published else None,
        }
        row = await self._call(
            self.client.table("posts").update(changes).eq("id", post_id).single(),
            "toggle publish",
            key=f"publish:{post_id}",
        )
        updated = Post.parse(row)
        self.posts = [updated if p.id == post_id else p for p in self.posts]

    # ── Navigation ────────────────────────────────────────────────────────

    @operation
    async def new_post(self) -> None:
        if self.selected_blog_id is None:
            raise ValidationError("Create or select a blog first", field="blog_id")
        await self.navigate(Page.EDITOR, NavigationData(blog_id=self.selected_blog_id))

    @operation
    async def edit_post(self, post_id: str) -> None:
        post = self._find_post(post_id)
        await self.navigate(Page.EDITOR, NavigationData(blog_id=post.blog_id, post_id=post.id))

    @operation
    async def view_post(self, post_id: str) -> None:
        post = self._find_post(post_id)
        if not post.published:
            raise ValidationError("Publish the post before viewing it", field="post_id")
        await self.navigate(Page.POST, NavigationData(blog_id=post.blog_id, post_id=post.id))

    def _find_post(self, post_id: str) -> Post:
        post = next((p for p in self.posts if p.id == post_id), None)
        if post is None:
            raise NotFoundError(resource="post", resource_id=post_id)
        return post

    def render(self) -> DashboardState:
        return DashboardState(
            loading=self.loading,
            error=self.error,
            selected_blog_id=self.selected_blog_id,
            blogs=[
                BlogSummary(
                    id=blog.id,
                    title=blog.title,
                    description=blog.description or "",
                    slug=blog.slug,
                    selected=blog.id == self.selected_blog_id,
                )
                for blog in self.blogs
            ],
            posts=[
                PostSummary(
                    id=post.id,
                    title=post.title,
                    excerpt=post.excerpt or "",
                    published=post.published,
                    status="Published" if post.published else "Draft",
                    published_at=post.published_at,
                    created_at=post.created_at,
                )
                for post in self.posts
            ],
        )
