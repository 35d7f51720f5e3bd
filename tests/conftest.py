"""Shared fakes: in-memory transports and a fixed clock."""

from typing import Any, Optional

import pytest

from albedo_intent.session_store import MemorySessionStorage, SessionStore
from albedo_intent.transport.base import Transport, TransportKind

PUBKEY = "G" + "A" * 55
OTHER_PUBKEY = "GB" + "7" * 54
NOW_MS = 1_700_000_000_000


class FakeTransport(Transport):
    def __init__(self, kind: TransportKind, result: Any = None, error: Optional[Exception] = None,
                 timeout: Optional[float] = None):
        super().__init__(timeout)
        self.kind = kind
        self.result = result
        self.error = error
        self.sent: list[dict[str, Any]] = []
        self.closed = False

    async def _roundtrip(self, message: dict[str, Any]) -> Any:
        self.sent.append(message)
        if self.error is not None:
            raise self.error
        if self.result is not None:
            return self.result
        return {"intent": message["intent"], "echo": True}

    async def _close(self) -> None:
        self.closed = True


class FakeTransports:
    def __init__(self, extension: bool = False, result: Any = None, error: Optional[Exception] = None):
        self.extension = extension
        self.result = result
        self.error = error
        self.created: list[FakeTransport] = []

    async def extension_available(self) -> bool:
        return self.extension

    def create(self, kind: TransportKind) -> FakeTransport:
        transport = FakeTransport(kind, result=self.result, error=self.error)
        self.created.append(transport)
        return transport

    @property
    def last(self) -> FakeTransport:
        return self.created[-1]


class Clock:
    def __init__(self, now: int = NOW_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def store(clock: Clock) -> SessionStore:
    return SessionStore(MemorySessionStorage(), clock=clock)


def grant(pubkey: str = PUBKEY, key: str = "sess-token", grants=("tx", "pay"),
          valid_until: int = NOW_MS + 3_600_000) -> dict[str, Any]:
    return {
        "intent": "implicit_flow",
        "granted": True,
        "pubkey": pubkey,
        "session": key,
        "valid_until": valid_until,
        "grants": list(grants),
    }
