"""
Frame transport — headless exchange used to redeem an implicit session.
"""

from typing import Any

from albedo_intent.transport.base import Transport, TransportKind
from albedo_intent.transport.envelope import new_request_id
from albedo_intent.transport.relay import RelayChannel

DEFAULT_FRAME_TIMEOUT = 10.0


class FrameTransport(Transport):
    kind = TransportKind.FRAME

    def __init__(self, channel: RelayChannel, timeout: float = DEFAULT_FRAME_TIMEOUT):
        # headless: the wait is always bounded
        super().__init__(timeout)
        self._channel = channel

    async def _open(self) -> None:
        await self._channel.connect()

    async def _roundtrip(self, message: dict[str, Any]) -> Any:
        return await self._channel.request(message, new_request_id(), mode="implicit")

    async def _close(self) -> None:
        await self._channel.disconnect()
