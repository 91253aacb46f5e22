"""
BlogSpace Tests — In-memory Hosted Backend
===========================================

What:  A small stand-in for the hosted backend, served to the DataClient
       through `httpx.MockTransport`.
How:   Implements the subset of the REST dialect the app uses (eq/is
       filters, order, limit, the `blog:blogs(*)` embed, insert/update/delete
       with blog→post cascade) and of the auth dialect (password and refresh
       grants, signup, logout, health).

Rules:
    `fail(...)` makes matching requests answer with an error status.
    `hold(...)` parks matching requests until the returned event is set,
    which lets a test interleave overlapping requests deterministically.
    Both match on method, path and (optionally) query parameters and are
    consumed by the first request they match.
"""

import asyncio
import itertools
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import httpx

from blogspace.text import slugify

ANON_KEY = "test-anon-key"
BASE_URL = "https://blogspace-test.supabase.co"

_CLOCK_START = datetime(2025, 1, 1, tzinfo=timezone.utc)


@dataclass
class Rule:
    method: str
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    status: int = 0
    body: Any = None
    gate: Optional[asyncio.Event] = None

    def matches(self, request: httpx.Request) -> bool:
        if request.method != self.method or request.url.path != self.path:
            return False
        return all(request.url.params.get(k) == v for k, v in self.params.items())


def _render(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _matches(row: Dict[str, Any], column: str, expression: str) -> bool:
    op, _, raw = expression.partition(".")
    if op not in ("eq", "is"):
        raise AssertionError(f"Unsupported filter operator: {op}")
    return _render(row.get(column)) == raw


class FakeSupabase:
    """In-memory backend; one instance per test."""

    def __init__(self, anon_key: str = ANON_KEY):
        self.anon_key = anon_key
        self.tables: Dict[str, List[Dict[str, Any]]] = {"profiles": [], "blogs": [], "posts": []}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.access_tokens: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.requests: List[httpx.Request] = []
        self.rules: List[Rule] = []
        self.require_confirmation = False
        self.expires_in = 3600
        self._clock = itertools.count(1)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # ── Seeding ───────────────────────────────────────────────────────────

    def timestamp(self) -> str:
        """Strictly increasing timestamps, one minute apart."""
        return (_CLOCK_START + timedelta(minutes=next(self._clock))).isoformat()

    def add_user(self, email: str, password: str = "secret123", display_name: str = "") -> Dict[str, Any]:
        user = {
            "id": f"user-{uuid.uuid4().hex[:8]}",
            "email": email,
            "password": password,
            "user_metadata": {"display_name": display_name},
        }
        self.users[email] = user
        now = self.timestamp()
        self.tables["profiles"].append({
            "id": user["id"],
            "email": email,
            "display_name": display_name,
            "bio": "",
            "avatar_url": "",
            "created_at": now,
            "updated_at": now,
        })
        return user

    def add_blog(self, user: Dict[str, Any], title: str, description: str = "") -> Dict[str, Any]:
        return self._insert("blogs", {
            "user_id": user["id"],
            "title": title,
            "description": description,
            "slug": slugify(title),
        })

    def add_post(
        self,
        blog: Dict[str, Any],
        title: str,
        content: str = "",
        excerpt: str = "",
        published: bool = False,
        published_at: Optional[str] = None,
    ) -> Dict[str, Any]:
        if published and published_at is None:
            published_at = self.timestamp()
        return self._insert("posts", {
            "blog_id": blog["id"],
            "user_id": blog["user_id"],
            "title": title,
            "slug": slugify(title),
            "content": content,
            "excerpt": excerpt,
            "published": published,
            "published_at": published_at,
        })

    def row(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        return next((r for r in self.tables[table] if r["id"] == row_id), None)

    def session_for(self, user: Dict[str, Any]) -> Dict[str, Any]:
        access = f"access-{uuid.uuid4().hex}"
        refresh = f"refresh-{uuid.uuid4().hex}"
        self.access_tokens[access] = user["id"]
        self.refresh_tokens[refresh] = user["id"]
        return {
            "access_token": access,
            "token_type": "bearer",
            "expires_in": self.expires_in,
            "refresh_token": refresh,
            "user": self._public_user(user),
        }

    def revoke_all(self) -> None:
        self.access_tokens.clear()

    # ── Rules ─────────────────────────────────────────────────────────────

    def fail(self, method: str, path: str, status: int = 500, body: Any = None, **params: str) -> Rule:
        rule = Rule(method, path, params, status=status, body=body)
        self.rules.append(rule)
        return rule

    def hold(self, method: str, path: str, **params: str) -> asyncio.Event:
        gate = asyncio.Event()
        self.rules.append(Rule(method, path, params, gate=gate))
        return gate

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    async def wait_for(self, method: str, path: str, count: int = 1) -> None:
        """Yield to the event loop until `count` matching requests arrived."""
        for _ in range(1000):
            if len(self.calls(method, path)) >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"{method} {path} was not requested {count} time(s)")

    # ── Transport ─────────────────────────────────────────────────────────

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for rule in list(self.rules):
            if rule.matches(request):
                self.rules.remove(rule)
                if rule.gate is not None:
                    await rule.gate.wait()
                if rule.status:
                    body = rule.body if rule.body is not None else {"message": "Simulated failure"}
                    return httpx.Response(rule.status, json=body)
                break

        if request.headers.get("apikey") != self.anon_key:
            return httpx.Response(401, json={"message": "Invalid API key"})

        path = request.url.path
        if path.startswith("/rest/v1/"):
            return self._rest(request, path[len("/rest/v1/"):])
        if path.startswith("/auth/v1/"):
            return self._auth(request, path[len("/auth/v1/"):])
        return httpx.Response(404, json={"message": "Not found"})

    # ── REST dialect ──────────────────────────────────────────────────────

    def _rest(self, request: httpx.Request, table: str) -> httpx.Response:
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        if token != self.anon_key and token not in self.access_tokens:
            return httpx.Response(401, json={"message": "JWT expired", "code": "PGRST301"})
        if table not in self.tables:
            return httpx.Response(
                404, json={"message": f'relation "public.{table}" does not exist', "code": "42P01"}
            )

        params = request.url.params
        filters = [(k, v) for k, v in params.multi_items() if k not in ("select", "order", "limit")]
        rows = self.tables[table]
        matched = [r for r in rows if all(_matches(r, c, e) for c, e in filters)]

        if request.method == "GET":
            result = [dict(r) for r in matched]
            order = params.get("order")
            if order:
                for term in reversed(order.split(",")):
                    column, _, direction = term.partition(".")
                    result.sort(
                        key=lambda r: (r.get(column) is not None, r.get(column) or ""),
                        reverse=direction == "desc",
                    )
            if "limit" in params:
                result = result[: int(params["limit"])]
            if "blog:blogs(*)" in params.get("select", ""):
                for r in result:
                    blog = self.row("blogs", r["blog_id"])
                    r["blog"] = dict(blog) if blog else None
            return httpx.Response(200, json=result)

        if request.method == "POST":
            body = json.loads(request.content)
            items = body if isinstance(body, list) else [body]
            created = [dict(self._insert(table, item)) for item in items]
            return httpx.Response(201, json=created)

        if request.method == "PATCH":
            changes = json.loads(request.content)
            for r in matched:
                r.update(changes)
            return httpx.Response(200, json=[dict(r) for r in matched])

        if request.method == "DELETE":
            ids = {r["id"] for r in matched}
            self.tables[table] = [r for r in rows if r["id"] not in ids]
            if table == "blogs":
                self.tables["posts"] = [p for p in self.tables["posts"] if p["blog_id"] not in ids]
            return httpx.Response(204)

        return httpx.Response(405, json={"message": "Method not allowed"})

    def _insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        now = self.timestamp()
        defaults: Dict[str, Any] = {
            "id": f"{table[:-1]}-{uuid.uuid4().hex[:8]}",
            "created_at": now,
            "updated_at": now,
        }
        if table == "blogs":
            defaults.update({"description": "", "slug": ""})
        elif table == "posts":
            defaults.update({
                "title": "",
                "slug": "",
                "content": "",
                "excerpt": "",
                "published": False,
                "published_at": None,
            })
        row = {**defaults, **values}
        self.tables[table].append(row)
        return row

    # ── Auth dialect ──────────────────────────────────────────────────────

    def _auth(self, request: httpx.Request, path: str) -> httpx.Response:
        if path == "health":
            return httpx.Response(200, json={"name": "GoTrue", "version": "v2.150.0"})

        body = json.loads(request.content) if request.content else {}

        if path == "token":
            grant = request.url.params.get("grant_type")
            if grant == "password":
                user = self.users.get(body.get("email"))
                if user is None or user["password"] != body.get("password"):
                    return httpx.Response(400, json={
                        "error": "invalid_grant",
                        "error_description": "Invalid login credentials",
                    })
                return httpx.Response(200, json=self.session_for(user))
            if grant == "refresh_token":
                user_id = self.refresh_tokens.pop(body.get("refresh_token"), None)
                user = self._user_by_id(user_id)
                if user is None:
                    return httpx.Response(400, json={
                        "error": "invalid_grant",
                        "error_description": "Invalid Refresh Token: Refresh Token Not Found",
                    })
                return httpx.Response(200, json=self.session_for(user))
            return httpx.Response(400, json={"error": "unsupported_grant_type"})

        if path == "signup":
            if body.get("email") in self.users:
                return httpx.Response(422, json={
                    "code": 422,
                    "error_code": "user_already_exists",
                    "msg": "User already registered",
                })
            user = self.add_user(
                body["email"],
                body["password"],
                (body.get("data") or {}).get("display_name", ""),
            )
            if self.require_confirmation:
                return httpx.Response(200, json=self._public_user(user))
            return httpx.Response(200, json=self.session_for(user))

        if path == "logout":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            if self.access_tokens.pop(token, None) is None:
                return httpx.Response(401, json={"msg": "Invalid token"})
            return httpx.Response(204)

        return httpx.Response(404, json={"msg": "Not found"})

    def _user_by_id(self, user_id: Optional[str]) -> Optional[Dict[str, Any]]:
        return next((u for u in self.users.values() if u["id"] == user_id), None)

    @staticmethod
    def _public_user(user: Dict[str, Any]) -> Dict[str, Any]:
        return {"id": user["id"], "email": user["email"], "user_metadata": user["user_metadata"]}
