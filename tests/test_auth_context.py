"""
BlogSpace Tests — Auth Context
===============================
"""

import asyncio

import pytest

from blogspace.auth_context import AuthContext
from blogspace.data.client import DataClient
from blogspace.data.session_store import MemorySessionStore
from blogspace.exceptions import AuthenticationError
from blogspace.models.records import Session
from fake_backend import ANON_KEY, BASE_URL

PASSWORD = "secret123"


def counting_listener():
    calls = []

    async def listener(auth):
        calls.append((auth.user.id if auth.user else None, auth.loading))

    return calls, listener


@pytest.mark.asyncio
async def test_start_without_session(data_client):
    auth = AuthContext(data_client)
    calls, listener = counting_listener()
    auth.subscribe(listener)
    assert auth.loading is True

    await auth.start()

    assert auth.loading is False
    assert auth.user is None and auth.profile is None
    assert calls == [(None, False)]


@pytest.mark.asyncio
async def test_start_is_idempotent(data_client):
    auth = AuthContext(data_client)
    calls, listener = counting_listener()
    auth.subscribe(listener)

    await auth.start()
    await auth.start()

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_start_restores_stored_session_with_profile(fake_backend, author):
    session = Session.from_token_response(fake_backend.session_for(author))
    client = DataClient(
        BASE_URL, ANON_KEY,
        session_store=MemorySessionStore(session),
        transport=fake_backend.transport,
    )
    auth = AuthContext(client)
    try:
        await auth.start()
    finally:
        await client.aclose()

    assert auth.user.id == author["id"]
    assert auth.profile.display_name == "Ada"


@pytest.mark.asyncio
async def test_sign_in_loads_profile_and_notifies(data_client, author):
    auth = AuthContext(data_client)
    await auth.start()
    calls, listener = counting_listener()
    auth.subscribe(listener)

    await auth.sign_in(author["email"], PASSWORD)

    assert auth.user.id == author["id"]
    assert auth.profile.display_name == "Ada"
    assert calls == [(author["id"], False)]


@pytest.mark.asyncio
async def test_failed_sign_in_raises_and_stays_signed_out(data_client, author):
    auth = AuthContext(data_client)
    await auth.start()

    with pytest.raises(AuthenticationError):
        await auth.sign_in(author["email"], "nope")
    assert auth.user is None


@pytest.mark.asyncio
async def test_sign_out_clears_user_and_profile(data_client, author):
    auth = AuthContext(data_client)
    await auth.start()
    await auth.sign_in(author["email"], PASSWORD)

    await auth.sign_out()

    assert auth.user is None
    assert auth.profile is None


@pytest.mark.asyncio
async def test_sign_up_reports_whether_a_session_was_opened(data_client, fake_backend):
    auth = AuthContext(data_client)
    await auth.start()

    assert await auth.sign_up("grace@example.com", PASSWORD, "Grace") is True
    assert auth.profile.display_name == "Grace"

    await auth.sign_out()
    fake_backend.require_confirmation = True
    assert await auth.sign_up("linus@example.com", PASSWORD, "Linus") is False
    assert auth.user is None


@pytest.mark.asyncio
async def test_unsubscribe_stops_notifications(data_client, author):
    auth = AuthContext(data_client)
    calls, listener = counting_listener()
    unsubscribe = auth.subscribe(listener)
    await auth.start()

    unsubscribe()
    await auth.sign_in(author["email"], PASSWORD)

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_close_stops_following_session_events(data_client, author):
    auth = AuthContext(data_client)
    await auth.start()
    await auth.close()

    await data_client.auth.sign_in_with_password(author["email"], PASSWORD)

    assert auth.user is None


@pytest.mark.asyncio
async def test_profile_of_a_previous_user_is_discarded(data_client, fake_backend, author):
    other = fake_backend.add_user("bob@example.com", PASSWORD, "Bob")
    auth = AuthContext(data_client)
    await auth.start()

    gate = fake_backend.hold("GET", "/rest/v1/profiles", id=f"eq.{author['id']}")
    first = asyncio.create_task(auth.sign_in(author["email"], PASSWORD))
    await fake_backend.wait_for("GET", "/rest/v1/profiles")

    await auth.sign_in(other["email"], PASSWORD)
    assert auth.profile.display_name == "Bob"

    gate.set()
    await first

    assert auth.user.id == other["id"]
    assert auth.profile.display_name == "Bob"


@pytest.mark.asyncio
async def test_refresh_profile_picks_up_edits(data_client, fake_backend, author):
    auth = AuthContext(data_client)
    await auth.start()
    await auth.sign_in(author["email"], PASSWORD)

    fake_backend.row("profiles", author["id"])["display_name"] = "Ada L."
    await auth.refresh_profile()

    assert auth.profile.display_name == "Ada L."


@pytest.mark.asyncio
async def test_profile_load_failure_leaves_profile_empty(data_client, fake_backend, author):
    auth = AuthContext(data_client)
    await auth.start()
    fake_backend.fail("GET", "/rest/v1/profiles", status=500)

    await auth.sign_in(author["email"], PASSWORD)

    assert auth.user.id == author["id"]
    assert auth.profile is None
