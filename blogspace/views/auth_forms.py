"""
BlogSpace — Sign-in and Sign-up Forms
======================================

What:  The two public account pages.
How:   Input rules are checked locally first; the auth context does the rest.
       A successful sign-in, or a sign-up the backend confirms right away,
       moves on to the dashboard. A sign-up that needs email confirmation
       stays on the page and shows a notice.
"""

import logging
from typing import Optional

from blogspace.exceptions import ValidationError
from blogspace.navigation import Page
from blogspace.schemas.app_state import SignInState, SignUpState
from blogspace.views.base import View, operation

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
CONFIRM_EMAIL_NOTICE = "Check your email to confirm your account."


class SignInView(View):
    page = Page.SIGNIN

    def __init__(self, ctx, data=None):
        super().__init__(ctx, data)
        self.email = ""

    @operation
    async def submit(self, email: str, password: str) -> None:
        self.email = email
        if not email or not password:
            raise ValidationError("Email and password are required")
        await self.auth.sign_in(email, password)
        await self.navigate(Page.DASHBOARD)

    def render(self) -> SignInState:
        return SignInState(error=self.error, email=self.email)


class SignUpView(View):
    page = Page.SIGNUP

    def __init__(self, ctx, data=None):
        super().__init__(ctx, data)
        self.email = ""
        self.display_name = ""
        self.notice: Optional[str] = None

    @operation
    async def submit(self, email: str, password: str, display_name: str) -> None:
        self.email, self.display_name = email, display_name
        self.notice = None
        if not email or not password or not display_name.strip():
            raise ValidationError("Email, password and display name are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )

        signed_in = await self.auth.sign_up(email, password, display_name)
        if signed_in:
            await self.navigate(Page.DASHBOARD)
        else:
            logger.info("Account for %s awaits email confirmation", email)
            self.notice = CONFIRM_EMAIL_NOTICE

    def render(self) -> SignUpState:
        return SignUpState(
            error=self.error,
            email=self.email,
            display_name=self.display_name,
            notice=self.notice,
        )
