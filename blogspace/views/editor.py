"""
BlogSpace — Post Editor
========================

What:  Writes a new post into a blog, or edits an existing one.
How:   Opened with `{blog_id}` for a new post or `{blog_id, post_id}` to edit.
       Field edits stay local until `save()`. Slug and excerpt are derived at
       save time. After the first save of a new post the editor keeps working
       on the created row, so later saves update it instead of inserting
       again; the navigation payload follows it. An update that matches no
       row (deleted meanwhile, or not ours) is reported as not found.
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

from blogspace.exceptions import ValidationError
from blogspace.models.records import Post
from blogspace.navigation import Page
from blogspace.schemas.app_state import EditorState
from blogspace.text import make_excerpt, slugify
from blogspace.views.base import View, operation

logger = logging.getLogger(__name__)


class EditorView(View):
    page = Page.EDITOR

    def __init__(self, ctx, data=None):
        super().__init__(ctx, data)
        self.blog_id: Optional[str] = self.data.blog_id
        self.post_id: Optional[str] = self.data.post_id
        self.title = ""
        self.content = ""
        self.excerpt = ""
        self.saving = False
        self.last_saved: Optional[datetime] = None
        self.loading = self.post_id is not None

    @operation
    async def load(self) -> None:
        if self.post_id is None:
            self.loading = False
            return
        self.loading = True
        row = await self._call(
            self.client.table("posts").select("*").eq("id", self.post_id).single(),
            "load post",
            key="post",
        )
        post = Post.parse(row)
        self.title = post.title
        self.content = post.content
        self.excerpt = post.excerpt or ""
        self.blog_id = self.blog_id or post.blog_id
        self.loading = False

    def edit(
        self,
        title: Optional[str] = None,
        content: Optional[str] = None,
        excerpt: Optional[str] = None,
    ) -> None:
        """Change fields locally; None leaves a field as it is."""
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        if excerpt is not None:
            self.excerpt = excerpt

    @operation
    async def save(self) -> None:
        if self.saving:
            raise ValidationError("The post is already being saved")
        user = self._require_user()
        if self.post_id is None and not self.blog_id:
            raise ValidationError("A new post needs a blog to belong to", field="blog_id")

        slug = slugify(self.title) or "untitled"
        excerpt = make_excerpt(self.content, self.excerpt, self.settings.excerpt_length)

        self.saving = True
        try:
            if self.post_id is not None:
                await self._call(
                    self.client.table("posts")
                    .update({
                        "title": self.title,
                        "slug": slug,
                        "content": self.content,
                        "excerpt": excerpt,
                        "updated_at": datetime.now(timezone.utc).isoformat(),
                    })
                    .eq("id", self.post_id)
                    .single(),
                    "save post",
                )
            else:
                row = await self._call(
                    self.client.table("posts")
                    .insert({
                        "blog_id": self.blog_id,
                        "user_id": user.id,
                        "title": self.title or "Untitled",
                        "slug": slug,
                        "content": self.content,
                        "excerpt": excerpt,
                    })
                    .single(),
                    "create post",
                )
                self.post_id = Post.parse(row).id
                self.data = replace(self.data, blog_id=self.blog_id, post_id=self.post_id)
                logger.info("Created post %s in blog %s", self.post_id, self.blog_id)
        finally:
            self.saving = False
        self.last_saved = datetime.now(timezone.utc)

    @operation
    async def back(self) -> None:
        await self.navigate(Page.DASHBOARD)

    def render(self) -> EditorState:
        return EditorState(
            loading=self.loading,
            error=self.error,
            blog_id=self.blog_id,
            post_id=self.post_id,
            title=self.title,
            content=self.content,
            excerpt=self.excerpt,
            saving=self.saving,
            last_saved=self.last_saved,
        )
