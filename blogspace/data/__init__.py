"""
BlogSpace — Data Client Package
================================

What:  The configured handle to the hosted backend.

Inventory:
    - client.py:         DataClient (HTTP transport, headers, error mapping)
    - query.py:          TableQuery (select / insert / update / delete builder)
    - auth.py:           AuthClient (sessions, sign-in/up/out, change events)
    - session_store.py:  where the current session is kept between restarts
    - errors.py:         backend response → BackendError translation
"""

from blogspace.data.auth import AuthClient, AuthEvent, Subscription
from blogspace.data.client import DataClient
from blogspace.data.query import TableQuery
from blogspace.data.session_store import FileSessionStore, MemorySessionStore, SessionStore

__all__ = [
    "AuthClient",
    "AuthEvent",
    "DataClient",
    "FileSessionStore",
    "MemorySessionStore",
    "SessionStore",
    "Subscription",
    "TableQuery",
]
