"""
Transport contract shared by the dialog, frame and extension channels.

Every variant correlates exactly one outbound request with one inbound
response. The surface is opened per exchange and always closed afterwards.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional

from albedo_intent.errors import (
    INTENT_ERRORS,
    IntentRequestError,
    RequestTimeoutError,
    UserRejectedError,
)

logger = logging.getLogger(__name__)


class TransportKind(str, Enum):
    DIALOG = "dialog"
    FRAME = "frame"
    EXTENSION = "extension"


def select_transport_kind(extension_available: bool, has_session: bool) -> TransportKind:
    """Extension wins outright; a usable implicit session runs headless; otherwise ask the user."""
    if extension_available:
        return TransportKind.EXTENSION
    if has_session:
        return TransportKind.FRAME
    return TransportKind.DIALOG


def raise_for_error(result: Any) -> dict[str, Any]:
    """Turn an error payload from the confirmation surface into an exception."""
    if not isinstance(result, dict):
        raise IntentRequestError(f"Unexpected response payload: {result!r}")
    error = result.get("error")
    if not error:
        return result
    if isinstance(error, dict):
        code = error.get("code")
        message = error.get("message") or "Intent request failed."
    else:
        code, message = None, str(error)
    if code == INTENT_ERRORS["action_rejected_by_user"]:
        raise UserRejectedError(message, {"remote_code": code})
    raise IntentRequestError(message, remote_code=code)


class Transport(ABC):
    kind: TransportKind

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    async def exchange(self, message: dict[str, Any]) -> dict[str, Any]:
        """Send one request and wait for the correlated response."""
        try:
            if self.timeout is None:
                result = await self._open_and_roundtrip(message)
            else:
                try:
                    result = await asyncio.wait_for(self._open_and_roundtrip(message), timeout=self.timeout)
                except asyncio.TimeoutError:
                    raise RequestTimeoutError(
                        f"No response from {self.kind.value} transport after {self.timeout}s"
                    )
        finally:
            try:
                await self._close()
            except Exception as e:
                logger.warning(f"Failed to close {self.kind.value} transport: {e}")
        return raise_for_error(result)

    async def _open_and_roundtrip(self, message: dict[str, Any]) -> Any:
        await self._open()
        return await self._roundtrip(message)

    async def _open(self) -> None:
        pass

    @abstractmethod
    async def _roundtrip(self, message: dict[str, Any]) -> Any:
        raise NotImplementedError

    async def _close(self) -> None:
        pass
