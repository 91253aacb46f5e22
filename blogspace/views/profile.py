"""
BlogSpace — Profile Page
=========================

What:  Shows and edits the signed-in user's profile (display name, bio,
       avatar URL).
How:   After a successful update the auth context reloads its copy, so the
       layout picks up a new display name.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from blogspace.exceptions import ValidationError
from blogspace.models.records import Profile
from blogspace.navigation import Page
from blogspace.schemas.app_state import ProfileState
from blogspace.views.base import View, operation

logger = logging.getLogger(__name__)


class ProfileView(View):
    page = Page.PROFILE

    def __init__(self, ctx, data=None):
        super().__init__(ctx, data)
        self.profile: Optional[Profile] = None
        self.loading = True

    @operation
    async def load(self) -> None:
        user = self._require_user()
        self.loading = True
        row = await self._call(
            self.client.table("profiles").select("*").eq("id", user.id).single(),
            "load profile",
            key="profile",
        )
        self.profile = Profile.parse(row)
        self.loading = False

    async def on_auth_change(self) -> None:
        user = self.auth.user
        if user is not None and (self.profile is None or self.profile.id != user.id):
            await self.load()

    @operation
    async def update(
        self,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> None:
        user = self._require_user()
        changes = {
            key: value
            for key, value in (("display_name", display_name), ("bio", bio), ("avatar_url", avatar_url))
            if value is not None
        }
        if not changes:
            raise ValidationError("Nothing to update")
        if "display_name" in changes and not changes["display_name"].strip():
            raise ValidationError("Display name cannot be empty", field="display_name")
        changes["updated_at"] = datetime.now(timezone.utc).isoformat()

        row = await self._call(
            self.client.table("profiles").update(changes).eq("id", user.id).single(),
            "update profile",
            key="update",
        )
        self.profile = Profile.parse(row)
        logger.info("Updated profile of %s", user.id)
        await self.auth.refresh_profile()

    def render(self) -> ProfileState:
        if self.profile is None:
            return ProfileState(loading=self.loading, error=self.error)
        return ProfileState(
            loading=self.loading,
            error=self.error,
            email=self.profile.email,
            display_name=self.profile.display_name,
            bio=self.profile.bio or "",
            avatar_url=self.profile.avatar_url or "",
            updated_at=self.profile.updated_at,
        )
