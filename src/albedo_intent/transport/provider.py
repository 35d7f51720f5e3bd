"""
Transport provider — the host capability handed to the dispatcher.

Knows whether an extension channel is available and builds a fresh transport
of the requested kind for every exchange.
"""

from typing import Any, Callable, Optional

from albedo_intent.transport.base import Transport, TransportKind
from albedo_intent.transport.dialog import DialogTransport
from albedo_intent.transport.extension import (
    DEFAULT_BRIDGE_URL,
    DEFAULT_EXTENSION_TIMEOUT,
    ExtensionBridge,
    ExtensionTransport,
)
from albedo_intent.transport.frame import DEFAULT_FRAME_TIMEOUT, FrameTransport
from albedo_intent.transport.relay import RelayChannel


class TransportProvider:
    def __init__(
        self,
        frontend_url: str,
        relay_url: Optional[str] = None,
        bridge_url: Optional[str] = DEFAULT_BRIDGE_URL,
        dialog_timeout: Optional[float] = None,
        frame_timeout: float = DEFAULT_FRAME_TIMEOUT,
        extension_timeout: Optional[float] = DEFAULT_EXTENSION_TIMEOUT,
        opener: Optional[Callable[[str], Any]] = None,
    ):
        self.frontend_url = frontend_url.rstrip("/")
        self.relay_url = (relay_url or self.frontend_url).rstrip("/")
        self._dialog_timeout = dialog_timeout
        self._frame_timeout = frame_timeout
        self._extension_timeout = extension_timeout
        self._opener = opener
        # bridge_url=None disables the extension channel entirely
        self._bridge = ExtensionBridge(bridge_url) if bridge_url else None

    async def extension_available(self) -> bool:
        if self._bridge is None:
            return False
        return await self._bridge.is_available()

    def create(self, kind: TransportKind) -> Transport:
        if kind == TransportKind.EXTENSION:
            if self._bridge is None:
                raise ValueError("Extension channel is disabled for this provider")
            return ExtensionTransport(self._bridge, timeout=self._extension_timeout)
        channel = RelayChannel(self.relay_url, origin=self.frontend_url)
        if kind == TransportKind.FRAME:
            return FrameTransport(channel, timeout=self._frame_timeout)
        if self._opener is not None:
            return DialogTransport(self.frontend_url, channel, opener=self._opener, timeout=self._dialog_timeout)
        return DialogTransport(self.frontend_url, channel, timeout=self._dialog_timeout)

    async def close(self) -> None:
        if self._bridge is not None:
            await self._bridge.close()
