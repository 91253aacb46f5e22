"""BlogSpace — Page views and the layout."""

from blogspace.views.auth_forms import SignInView, SignUpView
from blogspace.views.base import View, ViewContext
from blogspace.views.dashboard import DashboardView
from blogspace.views.editor import EditorView
from blogspace.views.home import HomeView
from blogspace.views.layout import Layout
from blogspace.views.post_view import PostDetailView
from blogspace.views.profile import ProfileView

__all__ = [
    "DashboardView",
    "EditorView",
    "HomeView",
    "Layout",
    "PostDetailView",
    "ProfileView",
    "SignInView",
    "SignUpView",
    "View",
    "ViewContext",
]
