"""
BlogSpace Tests — Data Client and Backend Auth
===============================================

Runs the DataClient against the in-memory backend: request headers,
error translation, session refresh and the session-event stream.
"""

import asyncio
import os
import stat
import time

import httpx
import pytest

from blogspace.data.auth import AuthEvent
from blogspace.data.client import DataClient
from blogspace.data.session_store import FileSessionStore, MemorySessionStore
from blogspace.exceptions import AuthenticationError, BackendError
from blogspace.models.records import Session
from fake_backend import ANON_KEY, BASE_URL

PASSWORD = "secret123"


def record_events(client: DataClient):
    events = []

    async def listener(event, session):
        events.append(event)

    client.auth.on_auth_state_change(listener)
    return events


def expired_session(fake_backend, user) -> Session:
    session = Session.from_token_response(fake_backend.session_for(user))
    session.expires_at = int(time.time()) - 60
    return session


# ══════════════════════════════════════════════════════════════════════════
# Requests
# ══════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signed_out_requests_use_the_anon_key(data_client, fake_backend):
    await data_client.table("posts").select("*").execute()

    request = fake_backend.calls("GET", "/rest/v1/posts")[0]
    assert request.headers["apikey"] == ANON_KEY
    assert request.headers["Authorization"] == f"Bearer {ANON_KEY}"


@pytest.mark.asyncio
async def test_signed_in_requests_carry_the_access_token(data_client, fake_backend, author):
    session = await data_client.auth.sign_in_with_password(author["email"], PASSWORD)
    await data_client.table("blogs").select("*").eq("user_id", author["id"]).execute()

    request = fake_backend.calls("GET", "/rest/v1/blogs")[0]
    assert request.headers["Authorization"] == f"Bearer {session.access_token}"
    assert request.url.params["user_id"] == f"eq.{author['id']}"


@pytest.mark.asyncio
async def test_insert_returns_created_row(data_client, author):
    await data_client.auth.sign_in_with_password(author["email"], PASSWORD)
    row = await (
        data_client.table("blogs")
        .insert({"user_id": author["id"], "title": "Daily Notes", "slug": "daily-notes"})
        .single()
    )
    assert row["title"] == "Daily Notes"
    assert row["id"].startswith("blog-")


@pytest.mark.asyncio
async def test_error_status_becomes_backend_error(data_client, fake_backend):
    fake_backend.fail(
        "GET", "/rest/v1/blogs", status=500,
        body={"message": "statement timeout", "code": "57014", "hint": None},
    )
    with pytest.raises(BackendError) as exc_info:
        await data_client.table("blogs").select("*").execute()

    assert exc_info.value.status_code == 500
    assert exc_info.value.code == "57014"
    assert exc_info.value.message == "statement timeout"


@pytest.mark.asyncio
async def test_unreachable_backend_becomes_backend_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = DataClient(BASE_URL, ANON_KEY, transport=httpx.MockTransport(refuse))
    try:
        with pytest.raises(BackendError) as exc_info:
            await client.table("posts").select("*").execute()
        assert exc_info.value.status_code is None
        assert exc_info.value.context["error"] == "ConnectError"
    finally:
        await client.aclose()


# ══════════════════════════════════════════════════════════════════════════
# Sessions
# ══════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_wrong_password_is_rejected(data_client, author):
    with pytest.raises(AuthenticationError) as exc_info:
        await data_client.auth.sign_in_with_password(author["email"], "wrong-password")
    assert exc_info.value.message == "Invalid login credentials"
    assert data_client.auth.session is None


@pytest.mark.asyncio
async def test_sign_in_emits_signed_in(data_client, author):
    events = record_events(data_client)
    await data_client.auth.sign_in_with_password(author["email"], PASSWORD)

    assert events == [AuthEvent.SIGNED_IN]
    assert data_client.auth.session.user.id == author["id"]


@pytest.mark.asyncio
async def test_expired_session_is_refreshed_before_a_request(fake_backend, author):
    stale = expired_session(fake_backend, author)
    client = DataClient(
        BASE_URL, ANON_KEY,
        session_store=MemorySessionStore(stale),
        transport=fake_backend.transport,
    )
    events = record_events(client)
    try:
        await client.table("blogs").select("*").execute()
    finally:
        await client.aclose()

    assert events == [AuthEvent.TOKEN_REFRESHED]
    assert client.auth.session.access_token != stale.access_token
    request = fake_backend.calls("GET", "/rest/v1/blogs")[0]
    assert request.headers["Authorization"] == f"Bearer {client.auth.session.access_token}"


@pytest.mark.asyncio
async def test_concurrent_requests_share_one_refresh(fake_backend, author):
    stale = expired_session(fake_backend, author)
    client = DataClient(
        BASE_URL, ANON_KEY,
        session_store=MemorySessionStore(stale),
        transport=fake_backend.transport,
    )
    events = record_events(client)
    gate = fake_backend.hold("POST", "/auth/v1/token")
    try:
        first = asyncio.create_task(client.table("blogs").select("*").execute())
        second = asyncio.create_task(client.table("posts").select("*").execute())
        await fake_backend.wait_for("POST", "/auth/v1/token")
        for _ in range(10):
            await asyncio.sleep(0)
        gate.set()
        await asyncio.gather(first, second)
    finally:
        await client.aclose()

    assert len(fake_backend.calls("POST", "/auth/v1/token")) == 1
    assert events == [AuthEvent.TOKEN_REFRESHED]
    assert client.auth.session is not None
    token = client.auth.session.access_token
    for path in ("/rest/v1/blogs", "/rest/v1/posts"):
        assert fake_backend.calls("GET", path)[0].headers["Authorization"] == f"Bearer {token}"


@pytest.mark.asyncio
async def test_failed_refresh_ends_the_session(fake_backend, author):
    stale = expired_session(fake_backend, author)
    fake_backend.refresh_tokens.clear()
    store = MemorySessionStore(stale)
    client = DataClient(BASE_URL, ANON_KEY, session_store=store, transport=fake_backend.transport)
    events = record_events(client)
    try:
        await client.table("posts").select("*").execute()
    finally:
        await client.aclose()

    assert events == [AuthEvent.SIGNED_OUT]
    assert client.auth.session is None
    assert store.load() is None
    request = fake_backend.calls("GET", "/rest/v1/posts")[0]
    assert request.headers["Authorization"] == f"Bearer {ANON_KEY}"


@pytest.mark.asyncio
async def test_rejected_token_ends_the_session(data_client, fake_backend, author):
    await data_client.auth.sign_in_with_password(author["email"], PASSWORD)
    events = record_events(data_client)
    fake_backend.revoke_all()

    with pytest.raises(BackendError) as exc_info:
        await data_client.table("blogs").select("*").execute()

    assert exc_info.value.status_code == 401
    assert data_client.auth.session is None
    assert events == [AuthEvent.SIGNED_OUT]


@pytest.mark.asyncio
async def test_sign_out_failure_keeps_the_session(data_client, fake_backend, author):
    await data_client.auth.sign_in_with_password(author["email"], PASSWORD)
    fake_backend.fail("POST", "/auth/v1/logout", status=503)

    with pytest.raises(AuthenticationError) as exc_info:
        await data_client.auth.sign_out()

    assert exc_info.value.message == "Could not sign out. Please try again."
    assert data_client.auth.session is not None


@pytest.mark.asyncio
async def test_sign_out_of_unknown_session_clears_locally(data_client, fake_backend, author):
    await data_client.auth.sign_in_with_password(author["email"], PASSWORD)
    fake_backend.revoke_all()
    events = record_events(data_client)

    await data_client.auth.sign_out()

    assert data_client.auth.session is None
    assert events == [AuthEvent.SIGNED_OUT]


@pytest.mark.asyncio
async def test_sign_up_sends_display_name_as_metadata(data_client, fake_backend):
    user, session = await data_client.auth.sign_up("grace@example.com", PASSWORD, data={"display_name": "Grace"})

    assert session is not None
    assert user.email == "grace@example.com"
    assert fake_backend.users["grace@example.com"]["user_metadata"] == {"display_name": "Grace"}


@pytest.mark.asyncio
async def test_sign_up_awaiting_confirmation_has_no_session(data_client, fake_backend):
    fake_backend.require_confirmation = True
    events = record_events(data_client)

    user, session = await data_client.auth.sign_up("grace@example.com", PASSWORD)

    assert session is None
    assert user.email == "grace@example.com"
    assert data_client.auth.session is None
    assert events == []


@pytest.mark.asyncio
async def test_auth_health(data_client, fake_backend):
    assert (await data_client.auth.health())["name"] == "GoTrue"

    fake_backend.fail("GET", "/auth/v1/health", status=503)
    with pytest.raises(BackendError):
        await data_client.auth.health()


# ══════════════════════════════════════════════════════════════════════════
# Session file
# ══════════════════════════════════════════════════════════════════════════


def test_file_store_round_trip_with_private_permissions(tmp_path, fake_backend, author):
    store = FileSessionStore(str(tmp_path / "state" / "session.json"))
    session = Session.from_token_response(fake_backend.session_for(author))

    store.save(session)

    assert store.load() == session
    mode = stat.S_IMODE(os.stat(store.path).st_mode)
    assert mode == 0o600

    store.clear()
    assert store.load() is None
    store.clear()


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert FileSessionStore(str(path)).load() is None
