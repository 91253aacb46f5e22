"""
BlogSpace — Application Package Initializer
============================================

What: Client application for writing and reading blogs on top of a hosted
      data backend (Supabase-style PostgREST + GoTrue).
Who:  Imported by uvicorn (`blogspace.main:app`), pytest, and the HTTP routes.

Architecture Note:
    The process owns exactly one client application instance:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP shell)          │  ← translate calls into user actions
    ├─────────────────────────────────────┤
    │    View Router + Page Views         │  ← navigation, per-page state, mutations
    ├─────────────────────────────────────┤
    │          Auth Context               │  ← user, profile, loading flag
    ├─────────────────────────────────────┤
    │   Data Client (tables + auth API)   │  ← httpx requests to the hosted backend
    └─────────────────────────────────────┘

    Persistence, authentication and row-level security live in the backend.
    Nothing here caches records beyond the view that fetched them.
"""

__version__ = "1.0.0"
