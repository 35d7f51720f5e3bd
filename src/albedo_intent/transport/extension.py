"""
Extension transport — talks to the installed browser extension through its
local HTTP bridge.
"""

from typing import Any, Optional

import httpx

from albedo_intent.errors import ChannelClosedError, IntentRequestError, RequestTimeoutError
from albedo_intent.transport.base import Transport, TransportKind

DEFAULT_BRIDGE_URL = "http://127.0.0.1:17580"
DEFAULT_EXTENSION_TIMEOUT = 30.0


class ExtensionBridge:
    def __init__(self, base_url: str = DEFAULT_BRIDGE_URL, probe_timeout: float = 1.0):
        self._base_url = base_url.rstrip("/")
        self._probe_timeout = probe_timeout
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "albedo-intent/0.1.0", "Accept": "application/json"},
            timeout=None,
        )

    async def is_available(self) -> bool:
        """True when the bridge answers and reports the extension as enabled."""
        try:
            resp = await self._client.get("/status", timeout=self._probe_timeout)
        except httpx.HTTPError:
            return False
        if resp.status_code != 200:
            return False
        try:
            return bool(resp.json().get("extensionEnabled"))
        except (ValueError, AttributeError):
            return False

    async def post_intent(self, message: dict[str, Any]) -> Any:
        try:
            resp = await self._client.post("/intent", json=message)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Extension bridge timed out: {e}")
        except httpx.TransportError as e:
            raise ChannelClosedError(f"Extension bridge unreachable: {e}")
        if resp.status_code == 410:
            raise ChannelClosedError("Extension closed the request before responding.")
        try:
            data = resp.json()
        except ValueError:
            data = None
        if resp.status_code >= 400 and not (isinstance(data, dict) and data.get("error")):
            raise IntentRequestError(f"HTTP {resp.status_code}: {resp.text[:200]}")
        return data

    async def close(self) -> None:
        await self._client.aclose()


class ExtensionTransport(Transport):
    kind = TransportKind.EXTENSION

    def __init__(self, bridge: ExtensionBridge, timeout: Optional[float] = DEFAULT_EXTENSION_TIMEOUT):
        super().__init__(timeout)
        self._bridge = bridge

    async def _roundtrip(self, message: dict[str, Any]) -> Any:
        return await self._bridge.post_intent(message)
