"""
BlogSpace Tests — Shared Fixtures (conftest.py)
================================================

What:  Test configuration, the fake backend, and ready-made application
       instances at different stages (fresh, signed in, served over HTTP).

Fixture Hierarchy:
    fake_backend      In-memory hosted backend (tests/fake_backend.py)
    └── data_client   DataClient wired to the fake through MockTransport
        └── app       AuthContext + ViewRouter, started (home page mounted)
            └── signed_in   same, with the `author` user signed in
    api_client        FastAPI shell over ASGITransport, lifespan entered
"""

import os
from typing import AsyncGenerator
from unittest.mock import patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fake_backend import ANON_KEY, BASE_URL, FakeSupabase

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any blogspace import reads the module-level settings
os.environ["SUPABASE_URL"] = BASE_URL
os.environ["SUPABASE_ANON_KEY"] = ANON_KEY
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("SESSION_FILE", None)

from blogspace.auth_context import AuthContext  # noqa: E402
from blogspace.config import Settings  # noqa: E402
from blogspace.data.client import DataClient  # noqa: E402
from blogspace.main import create_app  # noqa: E402
from blogspace.router import ViewRouter  # noqa: E402

PASSWORD = "secret123"


# ══════════════════════════════════════════════════════════════════════════
# Backend
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fake_backend() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        supabase_url=BASE_URL,
        supabase_anon_key=ANON_KEY,
        session_file=None,
        log_level="WARNING",
    )


@pytest.fixture
def author(fake_backend):
    """A registered user with a profile named Ada."""
    return fake_backend.add_user("ada@example.com", PASSWORD, "Ada")


@pytest_asyncio.fixture
async def data_client(fake_backend, test_settings) -> AsyncGenerator[DataClient, None]:
    client = DataClient.from_settings(test_settings, transport=fake_backend.transport)
    yield client
    await client.aclose()


# ══════════════════════════════════════════════════════════════════════════
# Application instances
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def app(data_client, test_settings) -> AsyncGenerator[ViewRouter, None]:
    """
    A started application: auth resolved (signed out), home page mounted.

    Yields the router; `app.auth` is the auth context.
    """
    auth = AuthContext(data_client)
    router = ViewRouter(data_client, auth, test_settings)
    await router.start()
    await auth.start()
    yield router
    await router.close()
    await auth.close()


@pytest_asyncio.fixture
async def signed_in(app, author) -> ViewRouter:
    await app.auth.sign_in(author["email"], PASSWORD)
    return app


@pytest_asyncio.fixture
async def api_client(fake_backend, test_settings) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client for the FastAPI shell.

    The lifespan is entered explicitly (ASGITransport does not run it).
    Logging setup is patched out so pytest keeps its capture handlers.
    """
    application = create_app(settings=test_settings, transport=fake_backend.transport)
    with patch("blogspace.main.setup_logging"):
        async with application.router.lifespan_context(application):
            transport = ASGITransport(app=application)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
