"""
Dialog transport — interactive confirmation page opened in the user's browser.
"""

import logging
import webbrowser
from typing import Any, Callable, Optional
from urllib.parse import urlencode

from albedo_intent.errors import ChannelClosedError
from albedo_intent.transport.base import Transport, TransportKind
from albedo_intent.transport.envelope import new_request_id
from albedo_intent.transport.relay import RelayChannel

logger = logging.getLogger(__name__)


class DialogTransport(Transport):
    """Needs the user's attention; waits until the page answers or is closed."""

    kind = TransportKind.DIALOG

    def __init__(
        self,
        frontend_url: str,
        channel: RelayChannel,
        opener: Callable[[str], Any] = webbrowser.open,
        timeout: Optional[float] = None,
    ):
        super().__init__(timeout)
        self._frontend_url = frontend_url.rstrip("/")
        self._channel = channel
        self._opener = opener

    def confirmation_url(self, request_id: str) -> str:
        query = urlencode({"channel": self._channel.channel_id or "", "request_id": request_id})
        return f"{self._frontend_url}/confirm?{query}"

    async def _open(self) -> None:
        await self._channel.connect()

    async def _roundtrip(self, message: dict[str, Any]) -> Any:
        request_id = new_request_id()
        url = self.confirmation_url(request_id)
        logger.debug(f"Opening confirmation dialog for {message.get('intent')}: {url}")
        if self._opener(url) is False:
            raise ChannelClosedError(f"Unable to open confirmation dialog at {url}")
        return await self._channel.request(message, request_id, mode="interactive")

    async def _close(self) -> None:
        await self._channel.disconnect()
