"""
Socket.IO relay channel to the hosted confirmation surface.

Connection: {relay_url}/relay/socket.io/. The relay assigns a channel id in
its `ready` event; the confirmation page joins that channel and answers
each intent:request with an intent:response carrying the same request_id.
"""

import asyncio
import logging
from typing import Any, Optional

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from albedo_intent.errors import ChannelClosedError
from albedo_intent.transport.envelope import (
    CLOSED_EVENT,
    REQUEST_EVENT,
    RESPONSE_EVENT,
    build_request_frame,
    parse_frame,
)

logger = logging.getLogger(__name__)

RELAY_PATH = "/relay/socket.io/"


class RelayChannel:
    def __init__(
        self,
        relay_url: str,
        origin: Optional[str] = None,
        transports: Optional[list[str]] = None,
        ready_timeout: float = 15.0,
    ):
        self._relay_url = relay_url
        self._origin = origin
        self._transports = transports or ["websocket"]
        self._ready_timeout = ready_timeout
        self._sio: Optional[socketio.AsyncClient] = None
        self._channel_id: Optional[str] = None
        self._pending: dict[str, asyncio.Future] = {}

    @property
    def connected(self) -> bool:
        return self._sio is not None and self._sio.connected

    @property
    def channel_id(self) -> Optional[str]:
        return self._channel_id

    async def connect(self) -> None:
        """Connect to the relay and wait for the `ready` event with the channel id."""
        if self.connected:
            return

        self._sio = socketio.AsyncClient()
        ready_event = asyncio.Event()

        @self._sio.on("ready")
        async def on_ready(data: Any = None) -> None:
            if isinstance(data, dict):
                self._channel_id = data.get("channel_id")
            ready_event.set()

        @self._sio.on(RESPONSE_EVENT)
        async def on_response(data: Any) -> None:
            self._resolve(data)

        @self._sio.on(CLOSED_EVENT)
        async def on_closed(data: Any) -> None:
            self._resolve(data, closed=True)

        @self._sio.event
        async def disconnect(_reason: str = "") -> None:
            self._fail_pending("Relay connection dropped before a response arrived.")

        try:
            await self._sio.connect(
                self._relay_url,
                transports=self._transports,
                socketio_path=RELAY_PATH,
            )
        except SocketIOConnectionError as e:
            raise ChannelClosedError(f"Unable to reach relay at {self._relay_url}: {e}") from e

        try:
            await asyncio.wait_for(ready_event.wait(), timeout=self._ready_timeout)
        except asyncio.TimeoutError:
            await self._sio.disconnect()
            raise ChannelClosedError(f"Timed out waiting for relay 'ready' event after {self._ready_timeout}s")

    async def request(self, message: dict[str, Any], request_id: str, mode: str = "interactive") -> dict[str, Any]:
        """Emit one intent:request and wait for the response with the same request_id."""
        if not self.connected:
            raise ChannelClosedError("Relay channel not connected")
        frame = build_request_frame(message, request_id, mode=mode, origin=self._origin)
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            await self._sio.emit(REQUEST_EVENT, frame)  # type: ignore[union-attr]
            return await future
        finally:
            self._pending.pop(request_id, None)

    def _resolve(self, raw: Any, closed: bool = False) -> None:
        frame = parse_frame(raw)
        if frame is None:
            logger.debug(f"Ignoring malformed relay frame: {raw!r}")
            return
        future = self._pending.get(frame.metadata.request_id)
        if future is None or future.done():
            return  # not ours or already settled
        if closed:
            future.set_exception(ChannelClosedError())
        else:
            future.set_result(frame.payload or {})

    def _fail_pending(self, message: str) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(ChannelClosedError(message))

    async def disconnect(self) -> None:
        if self._sio:
            await self._sio.disconnect()
            self._sio = None
        self._channel_id = None
