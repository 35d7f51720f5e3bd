"""
Implicit session store — keyed cache of standing permissions, one per pubkey.

Expiry is evaluated at read time; expired entries are never evicted eagerly.
The store is the only writer of the underlying storage.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Protocol

from pydantic import ValidationError

from albedo_intent.errors import SessionGrantError
from albedo_intent.models.session import ImplicitSession

logger = logging.getLogger(__name__)

DEFAULT_SESSIONS_FILE = Path.home() / ".albedo" / "sessions.json"


def _now_ms() -> int:
    return int(time.time() * 1000)


class SessionStorage(Protocol):
    def load(self) -> dict[str, dict[str, Any]]:
        """Return all persisted records keyed by pubkey."""

    def save(self, records: dict[str, dict[str, Any]]) -> None:
        """Persist all records keyed by pubkey."""


class MemorySessionStorage:
    def __init__(self, records: Optional[dict[str, dict[str, Any]]] = None) -> None:
        self._records: dict[str, dict[str, Any]] = dict(records or {})

    def load(self) -> dict[str, dict[str, Any]]:
        return dict(self._records)

    def save(self, records: dict[str, dict[str, Any]]) -> None:
        self._records = dict(records)


class JsonFileSessionStorage:
    """Sessions persisted as one JSON object: {pubkey: {key, valid_until, grants}}."""

    def __init__(self, path: Path = DEFAULT_SESSIONS_FILE) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, dict[str, Any]]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable sessions file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, records: dict[str, dict[str, Any]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # sibling temp file + os.replace: the swap is atomic
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise


class SessionStore:
    def __init__(
        self,
        storage: Optional[SessionStorage] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self._storage = storage if storage is not None else JsonFileSessionStorage()
        self._clock = clock or _now_ms
        self._sessions: dict[str, ImplicitSession] = {}
        for pubkey, record in self._storage.load().items():
            try:
                self._sessions[pubkey] = ImplicitSession.from_record(pubkey, record)
            except (TypeError, ValidationError) as e:
                logger.warning(f"Skipping malformed stored session for {pubkey}: {e}")

    def get(self, intent: str, pubkey: str) -> Optional[ImplicitSession]:
        """Return the session for pubkey if it is still valid and grants intent."""
        session = self._sessions.get(pubkey)
        if session is None or session.is_expired(self._clock()) or not session.allows(intent):
            return None
        return session

    def add(self, result: Mapping[str, Any]) -> ImplicitSession:
        """Store a session from an implicit_flow grant, replacing any previous one for the same pubkey."""
        try:
            session = ImplicitSession(
                pubkey=result["pubkey"],
                key=result["session"],
                valid_until=result["valid_until"],
                grants=result["grants"],
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise SessionGrantError(f"Malformed implicit session grant: {e}", {"result": dict(result)})
        # re-insert so list order reflects the latest grant
        self._sessions.pop(session.pubkey, None)
        self._sessions[session.pubkey] = session
        self._persist()
        logger.debug(f"Stored implicit session for {session.pubkey}, grants={session.grants}")
        return session

    def list_all(self) -> list[ImplicitSession]:
        """All stored sessions in insertion order, expired ones included."""
        return list(self._sessions.values())

    def list_active(self) -> list[ImplicitSession]:
        now = self._clock()
        return [s for s in self._sessions.values() if not s.is_expired(now)]

    def forget(self, pubkey: str) -> None:
        """Remove the session for pubkey. No-op when absent."""
        if self._sessions.pop(pubkey, None) is None:
            return
        self._persist()
        logger.debug(f"Forgot implicit session for {pubkey}")

    def _persist(self) -> None:
        self._storage.save({pubkey: s.to_record() for pubkey, s in self._sessions.items()})
