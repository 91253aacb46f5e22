"""
BlogSpace — Session Storage
============================

What:  Keeps the current auth session between process restarts.
How:   `SessionStore` is the interface; `MemorySessionStore` forgets on exit,
       `FileSessionStore` writes JSON with owner-only permissions.
Who:   AuthClient loads on first `get_session()`, saves on sign-in and token
       refresh, clears on sign-out.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from blogspace.models.records import Session

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Contract for session persistence."""

    @abstractmethod
    def load(self) -> Optional[Session]:
        """Return the stored session, or None when nothing usable is stored."""
        ...

    @abstractmethod
    def save(self, session: Session) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemorySessionStore(SessionStore):
    """Session lives only as long as the process."""

    def __init__(self, session: Optional[Session] = None):
        self._session = session

    def load(self) -> Optional[Session]:
        return self._session

    def save(self, session: Session) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionStore(SessionStore):
    """
    Session persisted to a JSON file.

    The file is rewritten on every save and chmod'ed to 0600 because it
    holds a bearer token. A corrupt or unreadable file is logged and treated
    as "no session".
    """

    def __init__(self, path: str):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[Session]:
        if not self.path.exists():
            return None
        try:
            with open(self.path) as f:
                return Session.model_validate(json.load(f))
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            f.write(session.model_dump_json(indent=2))
        self.path.chmod(0o600)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
